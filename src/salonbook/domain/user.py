"""User domain service."""

import logging
from typing import Any, Optional

from salonbook.database.base import Database
from salonbook.domain.entities import Role, User
from salonbook.domain.errors import (
    DependencyError,
    NotFoundError,
    ValidationError,
    delete_blocked,
    duplicate_value,
    entity_not_found,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("username", "password", "name", "email")


def _parse_role(role: Role | str) -> Role:
    try:
        return Role(role)
    except ValueError:
        allowed = ", ".join(r.value for r in Role)
        raise ValidationError(f"Unknown role '{role}'. Expected one of: {allowed}")


class UserService:
    """Service for managing clients and admins."""

    def __init__(self, db: Database):
        """Initialize user service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_user(
        self,
        username: str,
        password: str,
        name: str,
        email: str,
        role: Role | str = Role.CLIENT,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        instagram: Optional[str] = None,
        profile_picture: Optional[str] = None,
    ) -> User:
        """Create a user.

        Raises:
            ValidationError: If a required field is blank, the role is unknown,
                or the username or email is already taken
        """
        fields = {"username": username, "password": password, "name": name, "email": email}
        for field in REQUIRED_FIELDS:
            if not fields[field] or not str(fields[field]).strip():
                raise ValidationError(f"User {field} is required")
        parsed_role = _parse_role(role)
        self._check_unique(username=username, email=email)

        user = self.db.create_user(
            username=username,
            password=password,
            name=name,
            email=email,
            role=parsed_role,
            phone=phone,
            address=address,
            instagram=instagram,
            profile_picture=profile_picture,
        )
        logger.info("Created %s user %s (%s)", user.role.value, user.id, user.username)
        return user

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.get_user(user_id)

    def require_user(self, user_id: int) -> User:
        """Get user by ID or raise NotFoundError."""
        user = self.db.get_user(user_id)
        if user is None:
            raise NotFoundError(entity_not_found("User", user_id))
        return user

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.get_user_by_username(username)

    def list_users(self, role: Optional[Role | str] = None) -> list[User]:
        """List users, optionally only clients or only admins."""
        return self.db.list_users(role=_parse_role(role) if role is not None else None)

    def update_user(self, user_id: int, **changes: Any) -> User:
        """Merge changes into a user.

        Raises:
            NotFoundError: If user doesn't exist
            ValidationError: If a unique field collides with another user
        """
        self.require_user(user_id)
        for field in REQUIRED_FIELDS:
            if field in changes and (changes[field] is None or not str(changes[field]).strip()):
                raise ValidationError(f"User {field} is required")
        if "role" in changes:
            changes["role"] = _parse_role(changes["role"])
        self._check_unique(
            username=changes.get("username"), email=changes.get("email"), exclude_id=user_id
        )
        return self.db.update_user(user_id, **changes)

    def delete_user(self, user_id: int) -> None:
        """Delete a user.

        Raises:
            NotFoundError: If user doesn't exist
            DependencyError: If the user still has appointments
        """
        self.require_user(user_id)
        appointment_count = len(self.db.list_appointments(user_id=user_id))
        if appointment_count:
            raise DependencyError(
                delete_blocked("User", user_id, {"appointment": appointment_count})
            )
        self.db.delete_user(user_id)
        logger.info("Deleted user %s", user_id)

    def _check_unique(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> None:
        if username is not None:
            existing = self.db.get_user_by_username(username)
            if existing is not None and existing.id != exclude_id:
                raise ValidationError(duplicate_value("User", "username", username))
        if email is not None:
            existing = self.db.get_user_by_email(email)
            if existing is not None and existing.id != exclude_id:
                raise ValidationError(duplicate_value("User", "email", email))
