"""SQLAlchemy adapter for auth event append operations."""

from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from askboard.application.ports.auth_event_repository_port import (
    AuthEventCreateInput,
    AuthEventRepositoryPort,
)
from askboard.infrastructure.db.metadata import auth_events


class SqlAlchemyAuthEventRepository(AuthEventRepositoryPort):
    """Append-only login audit trail backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def append_event(self, payload: AuthEventCreateInput) -> int:
        """Insert one login audit row and return its numeric id."""

        statement = (
            sa.insert(auth_events)
            .values(
                user_id=payload.user_id,
                event_type=payload.event_type,
                ip_address=payload.ip_address,
                user_agent=payload.user_agent,
                payload=dict(payload.payload),
            )
            .returning(auth_events.c.id)
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)
            inserted_id = result.scalar_one()
            await session.commit()

        return int(inserted_id)
