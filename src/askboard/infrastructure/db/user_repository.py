"""SQLAlchemy adapter for user account persistence."""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from askboard.application.ports.user_repository_port import (
    UserAlreadyExistsError,
    UserCreateInput,
    UserRecord,
    UserRepositoryPort,
    UserUpdateInput,
)
from askboard.infrastructure.db.metadata import questions, users

_USER_COLUMNS = (
    users.c.id,
    users.c.email,
    users.c.username,
    users.c.name,
    users.c.avatar_url,
    users.c.password_salt,
    users.c.password_hash,
    users.c.created_at,
    users.c.updated_at,
)
_NULLABLE_PROFILE_COLUMNS = frozenset({"name", "avatar_url"})


class SqlAlchemyUserRepository(UserRepositoryPort):
    """User repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id or None."""

        return await self._fetch_one(users.c.id == user_id)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email or None."""

        return await self._fetch_one(users.c.email == email)

    async def get_by_username(self, *, username: str) -> UserRecord | None:
        """Return user by normalized username or None."""

        return await self._fetch_one(users.c.username == username)

    async def list_users(self) -> list[UserRecord]:
        """Return all users ordered by username."""

        statement = sa.select(*_USER_COLUMNS).order_by(users.c.username.asc())

        async with self._session_factory() as session:
            result = await session.execute(statement)

        return [_to_user_record(row) for row in result.mappings().all()]

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user row with its credential pair and return it."""

        statement = sa.insert(users).values(
            id=payload.user_id,
            email=payload.email,
            username=payload.username,
            name=payload.name,
            avatar_url=payload.avatar_url,
            password_salt=payload.credential.password_salt,
            password_hash=payload.credential.password_hash,
        ).returning(*_USER_COLUMNS)

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise _duplicate_user_error(exc) from exc

        return _to_user_record(result.mappings().one())

    async def update_user(self, *, user_id: UUID, payload: UserUpdateInput) -> UserRecord | None:
        """Apply non-None fields and clear `clear_fields`; salt and hash are written together."""

        values: dict[str, Any] = {"updated_at": sa.func.current_timestamp()}
        for column in ("email", "username", "name", "avatar_url"):
            value = getattr(payload, column)
            if value is not None:
                values[column] = value
        for column in payload.clear_fields & _NULLABLE_PROFILE_COLUMNS:
            values[column] = None
        if payload.credential is not None:
            values["password_salt"] = payload.credential.password_salt
            values["password_hash"] = payload.credential.password_hash

        statement = (
            sa.update(users)
            .where(users.c.id == user_id)
            .values(**values)
            .returning(*_USER_COLUMNS)
        )

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                row = result.mappings().first()
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise _duplicate_user_error(exc) from exc

        if row is None:
            return None
        return _to_user_record(row)

    async def delete_user(self, *, user_id: UUID) -> bool:
        """Delete one user and their questions in a single transaction."""

        async with self._session_factory() as session:
            await session.execute(sa.delete(questions).where(questions.c.user_id == user_id))
            result = cast(
                CursorResult[Any],
                await session.execute(sa.delete(users).where(users.c.id == user_id)),
            )
            await session.commit()

        return int(result.rowcount or 0) > 0

    async def _fetch_one(self, condition: sa.ColumnElement[bool]) -> UserRecord | None:
        statement = sa.select(*_USER_COLUMNS).where(condition).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)


def _duplicate_user_error(exc: IntegrityError) -> UserAlreadyExistsError:
    message = str(exc.orig)
    field = "username" if "username" in message else "email"
    return UserAlreadyExistsError(field=field)


def _to_user_record(row: sa.RowMapping) -> UserRecord:
    raw_user_id = row["id"]
    user_id = raw_user_id if isinstance(raw_user_id, UUID) else UUID(str(raw_user_id))
    return UserRecord(
        user_id=user_id,
        email=cast(str, row["email"]),
        username=cast(str, row["username"]),
        name=cast(str | None, row["name"]),
        avatar_url=cast(str | None, row["avatar_url"]),
        password_salt=cast(str, row["password_salt"]),
        password_hash=cast(str, row["password_hash"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
