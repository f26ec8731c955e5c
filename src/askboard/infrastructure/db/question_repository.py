"""SQLAlchemy adapter for question persistence."""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from askboard.application.ports.question_repository_port import (
    QuestionCreateInput,
    QuestionRecord,
    QuestionRepositoryPort,
)
from askboard.infrastructure.db.metadata import questions


class SqlAlchemyQuestionRepository(QuestionRepositoryPort):
    """Question repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_id(self, *, question_id: int) -> QuestionRecord | None:
        statement = sa.select(*questions.c).where(questions.c.id == question_id).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_question_record(row)

    async def list_for_user(self, *, user_id: UUID) -> list[QuestionRecord]:
        """Return one user's questions, newest first with id as tie-breaker."""

        statement = (
            sa.select(*questions.c)
            .where(questions.c.user_id == user_id)
            .order_by(questions.c.created_at.desc(), questions.c.id.desc())
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)

        return [_to_question_record(row) for row in result.mappings().all()]

    async def create_question(self, payload: QuestionCreateInput) -> QuestionRecord:
        statement = sa.insert(questions).values(
            user_id=payload.user_id,
            text=payload.text,
        ).returning(*questions.c)

        async with self._session_factory() as session:
            result = await session.execute(statement)
            await session.commit()

        return _to_question_record(result.mappings().one())

    async def update_text(self, *, question_id: int, text: str) -> QuestionRecord | None:
        statement = (
            sa.update(questions)
            .where(questions.c.id == question_id)
            .values(text=text, updated_at=sa.func.current_timestamp())
            .returning(*questions.c)
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)
            row = result.mappings().first()
            await session.commit()

        if row is None:
            return None
        return _to_question_record(row)

    async def delete_question(self, *, question_id: int) -> bool:
        async with self._session_factory() as session:
            result = cast(
                CursorResult[Any],
                await session.execute(sa.delete(questions).where(questions.c.id == question_id)),
            )
            await session.commit()

        return int(result.rowcount or 0) > 0


def _to_question_record(row: sa.RowMapping) -> QuestionRecord:
    raw_user_id = row["user_id"]
    user_id = raw_user_id if isinstance(raw_user_id, UUID) else UUID(str(raw_user_id))
    return QuestionRecord(
        question_id=int(row["id"]),
        user_id=user_id,
        text=cast(str, row["text"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
