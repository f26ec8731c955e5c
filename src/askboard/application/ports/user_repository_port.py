"""Port for user account persistence."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from askboard.domain.auth.credentials import Credential


class UserAlreadyExistsError(ValueError):
    """Raised when email or username is already taken."""

    def __init__(self, *, field: str) -> None:
        super().__init__(f"{field} has already been taken")
        self.field = field


@dataclass(frozen=True)
class UserRecord:
    """User persistence model."""

    user_id: UUID
    email: str
    username: str
    name: str | None
    avatar_url: str | None
    password_salt: str
    password_hash: str
    created_at: datetime
    updated_at: datetime

    @property
    def credential(self) -> Credential:
        return Credential(password_salt=self.password_salt, password_hash=self.password_hash)


@dataclass(frozen=True)
class UserCreateInput:
    """Insert payload for one user row."""

    user_id: UUID
    email: str
    username: str
    name: str | None
    avatar_url: str | None
    credential: Credential


@dataclass(frozen=True)
class UserUpdateInput:
    """Partial update payload; `None` fields are left unchanged, `clear_fields` are set to NULL."""

    email: str | None = None
    username: str | None = None
    name: str | None = None
    avatar_url: str | None = None
    credential: Credential | None = None
    clear_fields: frozenset[str] = frozenset()


class UserRepositoryPort(Protocol):
    """User repository contract."""

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id or None."""

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email or None."""

    async def get_by_username(self, *, username: str) -> UserRecord | None:
        """Return user by normalized username or None."""

    async def list_users(self) -> list[UserRecord]:
        """Return all users ordered by username."""

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user row and return it."""

    async def update_user(self, *, user_id: UUID, payload: UserUpdateInput) -> UserRecord | None:
        """Apply a partial update and return the updated row, or None when missing."""

    async def delete_user(self, *, user_id: UUID) -> bool:
        """Delete one user together with their questions; return whether a row was removed."""
