from __future__ import annotations

import hashlib
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from coursedb.core.security import hash_password, is_legacy_hash, needs_rehash, verify_password  # noqa: E402


def test_argon2_hash_roundtrip():
    hashed = hash_password("s3cret-pass")
    assert hashed.startswith("argon2$")
    assert verify_password("s3cret-pass", hashed) is True
    assert verify_password("wrong", hashed) is False
    assert needs_rehash(hashed) is False


def test_legacy_sha256_hash_still_verifies():
    legacy = hashlib.sha256(b"mypassword").hexdigest()
    assert is_legacy_hash(legacy)
    assert verify_password("mypassword", legacy) is True
    assert verify_password("other", legacy) is False
    assert needs_rehash(legacy) is True


def test_unknown_hash_formats_never_verify():
    assert verify_password("x", "") is False
    assert verify_password("x", None) is False
    assert verify_password("plain", "plain") is False
    assert verify_password("x", "argon2$garbage") is False
