"""User-related business logic."""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from diet_tracker.domain.errors import (
    EmailAlreadyRegistered,
    InvalidCredentials,
    NotFound,
)
from diet_tracker.domain.profile import (
    NutritionGoals,
    UserProfile,
    UserRecord,
    normalize_diet_types,
)
from diet_tracker.services.security import TokenService, hash_password, verify_password

_logger = logging.getLogger(__name__)

_PROFILE_FIELDS = {field.name for field in dataclasses.fields(UserProfile)}
_LIST_FIELDS = {"regional_cuisines", "allergies", "goals"}


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return a user by id, if present."""

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return a user by email, if present."""

    def create_user(self, name: str, email: str, password_hash: str) -> UserRecord:
        """Create and return a new user record."""

    def update_user(self, user_id: UUID, changes: dict[str, object]) -> UserRecord:
        """Write the given account or profile fields and return the user."""

    def update_nutrition_goals(self, user_id: UUID, goals: NutritionGoals) -> None:
        """Write all four goal values in a single update."""


@dataclass(frozen=True)
class AuthResult:
    """Authenticated user and the bearer token issued for it."""

    user: UserRecord
    token: str


@dataclass
class UserService:
    """Application service for accounts and profiles."""

    repository: UserRepository
    token_service: TokenService

    def register(self, name: str, email: str, password: str) -> AuthResult:
        """Create an account and return a token for it."""
        normalized_email = email.strip().lower()
        if self.repository.get_by_email(normalized_email):
            raise EmailAlreadyRegistered()
        user = self.repository.create_user(
            name=name.strip(),
            email=normalized_email,
            password_hash=hash_password(password),
        )
        _logger.info("Registered user %s", user.id)
        return AuthResult(user=user, token=self.token_service.issue(user.id))

    def login(self, email: str, password: str) -> AuthResult:
        """Check credentials and return a fresh token."""
        user = self.repository.get_by_email(email.strip().lower())
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentials()
        return AuthResult(user=user, token=self.token_service.issue(user.id))

    def get_profile(self, user_id: UUID) -> UserRecord:
        """Return the user or raise NotFound."""
        user = self.repository.get_user(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def update_profile(self, user_id: UUID, changes: dict[str, object]) -> UserRecord:
        """Apply only the provided, non-empty changes to a user."""
        self.get_profile(user_id)
        updates: dict[str, object] = {}
        for name, value in changes.items():
            if value is None:
                continue
            if name == "password":
                updates["password_hash"] = hash_password(str(value))
            elif name == "email":
                updates["email"] = str(value).strip().lower()
            elif name == "name":
                updates["name"] = str(value).strip()
            elif name == "dietary_preference":
                updates[name] = str(value)
            elif name == "diet_type":
                updates["diet_type"] = tuple(normalize_diet_types(value))
            elif name in _LIST_FIELDS:
                updates[name] = tuple(str(item) for item in value if item)
            elif name in _PROFILE_FIELDS:
                updates[name] = value
        if "email" in updates:
            existing = self.repository.get_by_email(str(updates["email"]))
            if existing is not None and existing.id != user_id:
                raise EmailAlreadyRegistered()
        if not updates:
            return self.get_profile(user_id)
        return self.repository.update_user(user_id, updates)
