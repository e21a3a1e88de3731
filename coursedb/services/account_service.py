"""
Account registration and login.
"""

from __future__ import annotations

from dataclasses import dataclass

from coursedb.core.logging import get_logger
from coursedb.core.security import hash_password, needs_rehash, verify_password
from coursedb.domain.users import USER_TYPES, Role, User
from coursedb.repositories.user_store import UserStore

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 8


class AccountError(Exception):
    """Base class for account-related exceptions."""


class RegistrationError(AccountError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AccountExistsError(AccountError):
    pass


class InvalidCredentialsError(AccountError):
    pass


@dataclass
class AccountService:
    """Handles registration and login against a UserStore."""

    users: UserStore

    def register(self, username: str, email: str, password: str, role: Role | str = Role.STUDENT) -> User:
        raw_email = (email or "").strip()
        if not raw_email:
            raise RegistrationError("Email is required")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise RegistrationError(f"Password too short. Use at least {MIN_PASSWORD_LENGTH} characters")
        try:
            kind = USER_TYPES[Role.parse(role)]
        except ValueError as exc:
            raise RegistrationError(str(exc)) from exc
        if self.users.exists_email(raw_email):
            raise AccountExistsError(f"An account already uses {raw_email}")
        try:
            user = kind(self.users.next_user_id(), username, raw_email, hash_password(password))
        except ValueError as exc:
            raise RegistrationError(str(exc)) from exc
        self.users.save_or_update(user)
        logger.info("account_registered", user_id=user.user_id, role=user.role.value)
        return user

    def login(self, email: str, password: str) -> User:
        raw_email = (email or "").strip()
        if not raw_email:
            raise InvalidCredentialsError("Invalid credentials")
        user = self.users.get_by_email(raw_email)
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Invalid credentials")
        if needs_rehash(user.password_hash):
            user.password_hash = hash_password(password)
            self.users.save_or_update(user)
            logger.info("password_rehashed", user_id=user.user_id)
        return user
