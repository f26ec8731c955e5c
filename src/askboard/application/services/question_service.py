"""Application service for asking, editing and removing questions."""

from __future__ import annotations

import logging
from uuid import UUID

from askboard.application.dto.question_models import QuestionForm
from askboard.application.ports.question_repository_port import (
    QuestionCreateInput,
    QuestionRecord,
    QuestionRepositoryPort,
)
from askboard.application.ports.user_repository_port import UserRepositoryPort
from askboard.application.services.user_service import UserNotFoundError

logger = logging.getLogger(__name__)


class QuestionNotFoundError(LookupError):
    """Raised when a target question cannot be found."""

    def __init__(self, *, question_id: int) -> None:
        super().__init__(f"question not found: {question_id}")
        self.question_id = question_id


class QuestionOwnershipError(PermissionError):
    """Raised when the actor does not own the target question."""

    def __init__(self) -> None:
        super().__init__("only the question owner may perform this action")


class QuestionService:
    """Question use-cases with owner-equals-actor checks."""

    def __init__(
        self,
        *,
        questions: QuestionRepositoryPort,
        users: UserRepositoryPort,
    ) -> None:
        self._questions = questions
        self._users = users

    async def ask(self, *, actor_user_id: UUID, form: QuestionForm) -> QuestionRecord:
        """Create one question on the actor's profile."""

        if await self._users.get_by_id(user_id=actor_user_id) is None:
            raise UserNotFoundError(user_id=actor_user_id)
        question = await self._questions.create_question(
            QuestionCreateInput(user_id=actor_user_id, text=form.text)
        )
        logger.info(
            "question_created question_id=%s user_id=%s",
            question.question_id,
            actor_user_id,
        )
        return question

    async def edit(
        self,
        *,
        actor_user_id: UUID,
        question_id: int,
        form: QuestionForm,
    ) -> QuestionRecord:
        """Replace the text of one question owned by the actor."""

        await self._require_owned_question(actor_user_id=actor_user_id, question_id=question_id)
        updated = await self._questions.update_text(question_id=question_id, text=form.text)
        if updated is None:
            raise QuestionNotFoundError(question_id=question_id)
        return updated

    async def delete(self, *, actor_user_id: UUID, question_id: int) -> None:
        """Remove one question owned by the actor."""

        await self._require_owned_question(actor_user_id=actor_user_id, question_id=question_id)
        if not await self._questions.delete_question(question_id=question_id):
            raise QuestionNotFoundError(question_id=question_id)
        logger.info("question_deleted question_id=%s", question_id)

    async def list_for_user(self, *, user_id: UUID) -> list[QuestionRecord]:
        return await self._questions.list_for_user(user_id=user_id)

    async def _require_owned_question(
        self,
        *,
        actor_user_id: UUID,
        question_id: int,
    ) -> QuestionRecord:
        question = await self._questions.get_by_id(question_id=question_id)
        if question is None:
            raise QuestionNotFoundError(question_id=question_id)
        if question.user_id != actor_user_id:
            raise QuestionOwnershipError()
        return question
