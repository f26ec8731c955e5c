"""Port for question persistence."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class QuestionRecord:
    """Question persistence model."""

    question_id: int
    user_id: UUID
    text: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class QuestionCreateInput:
    """Insert payload for one question row."""

    user_id: UUID
    text: str


class QuestionRepositoryPort(Protocol):
    """Question repository contract."""

    async def get_by_id(self, *, question_id: int) -> QuestionRecord | None:
        """Return question by id or None."""

    async def list_for_user(self, *, user_id: UUID) -> list[QuestionRecord]:
        """Return one user's questions, newest first."""

    async def create_question(self, payload: QuestionCreateInput) -> QuestionRecord:
        """Insert one question row and return it."""

    async def update_text(self, *, question_id: int, text: str) -> QuestionRecord | None:
        """Replace question text and return the updated row, or None when missing."""

    async def delete_question(self, *, question_id: int) -> bool:
        """Delete one question; return whether a row was removed."""
