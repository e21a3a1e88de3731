"""Security helpers (hashing and verification)."""

from __future__ import annotations

import hashlib
import re
import secrets

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_PREFIX = "argon2$"
# Unsalted SHA-256 hex digests written by earlier tooling.
_LEGACY_PATTERN = re.compile(r"[0-9a-f]{64}")


def hash_password(password: str) -> str:
    """Create a modern Argon2 hash with a prefix for detection."""
    hashed = _ph.hash(password)
    return f"{_PREFIX}{hashed}"


def _legacy_hash(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def is_legacy_hash(stored_hash: str | None) -> bool:
    return bool(_LEGACY_PATTERN.fullmatch(stored_hash or ""))


def needs_rehash(stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not stored.startswith(_PREFIX):
        return True
    return _ph.check_needs_rehash(stored[len(_PREFIX) :])


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if stored.startswith(_PREFIX):
        hashed = stored[len(_PREFIX) :]
        try:
            return _ph.verify(hashed, password)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False
    if not is_legacy_hash(stored):
        return False
    legacy = _legacy_hash(password)
    return secrets.compare_digest(legacy, stored)
