"""Application service for user registration and profile lifecycle."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from uuid import UUID, uuid4

from askboard.application.dto.user_models import UserProfileUpdateForm, UserRegistrationForm
from askboard.application.ports.credential_manager_port import CredentialManagerPort
from askboard.application.ports.question_repository_port import (
    QuestionRecord,
    QuestionRepositoryPort,
)
from askboard.application.ports.user_repository_port import (
    UserAlreadyExistsError,
    UserCreateInput,
    UserRecord,
    UserRepositoryPort,
    UserUpdateInput,
)

logger = logging.getLogger(__name__)


class UserNotFoundError(LookupError):
    """Raised when a target user cannot be found."""

    def __init__(self, *, user_id: UUID) -> None:
        super().__init__(f"user not found: {user_id}")
        self.user_id = user_id


class UserOwnershipError(PermissionError):
    """Raised when the actor tries to change or remove another user's account."""

    def __init__(self) -> None:
        super().__init__("only the account owner may perform this action")


@dataclass(frozen=True)
class UserProfile:
    """User record together with their questions, newest first."""

    user: UserRecord
    questions: list[QuestionRecord]


class UserService:
    """Expose registration, profile and account removal use-cases."""

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        questions: QuestionRepositoryPort,
        credential_manager: CredentialManagerPort,
    ) -> None:
        self._users = users
        self._questions = questions
        self._credential_manager = credential_manager

    async def register(self, form: UserRegistrationForm) -> UserRecord:
        """Create one account, deriving a fresh credential from the submitted password."""

        await self._require_email_available(email=form.email)
        await self._require_username_available(username=form.username)

        credential = await asyncio.to_thread(self._credential_manager.derive, form.password)
        user = await self._users.create_user(
            UserCreateInput(
                user_id=uuid4(),
                email=form.email,
                username=form.username,
                name=form.name,
                avatar_url=form.avatar_url,
                credential=credential,
            )
        )
        logger.info("user_registered user_id=%s username=%s", user.user_id, user.username)
        return user

    async def update_profile(
        self,
        *,
        actor_user_id: UUID,
        user_id: UUID,
        form: UserProfileUpdateForm,
    ) -> UserRecord:
        """Apply owner profile changes; a non-blank password regenerates the credential."""

        target = await self._require_owned_user(actor_user_id=actor_user_id, user_id=user_id)

        if form.email is not None and form.email != target.email:
            await self._require_email_available(email=form.email)
        if form.username is not None and form.username != target.username:
            await self._require_username_available(username=form.username)

        cleared = form.cleared_fields
        credential = None
        new_password = form.new_password
        if new_password is not None:
            credential = await asyncio.to_thread(self._credential_manager.derive, new_password)

        updated = await self._users.update_user(
            user_id=user_id,
            payload=UserUpdateInput(
                email=form.email,
                username=form.username,
                name=None if "name" in cleared else form.name,
                avatar_url=None if "avatar_url" in cleared else form.avatar_url,
                credential=credential,
                clear_fields=cleared,
            ),
        )
        if updated is None:
            raise UserNotFoundError(user_id=user_id)
        logger.info(
            "user_updated user_id=%s password_changed=%s",
            user_id,
            credential is not None,
        )
        return updated

    async def get_profile(self, *, user_id: UUID) -> UserProfile:
        """Return one user and their questions, newest first."""

        user = await self._users.get_by_id(user_id=user_id)
        if user is None:
            raise UserNotFoundError(user_id=user_id)
        questions = await self._questions.list_for_user(user_id=user_id)
        return UserProfile(user=user, questions=questions)

    async def list_users(self) -> list[UserRecord]:
        return await self._users.list_users()

    async def delete_account(self, *, actor_user_id: UUID, user_id: UUID) -> None:
        """Remove the actor's own account and all of their questions."""

        await self._require_owned_user(actor_user_id=actor_user_id, user_id=user_id)
        if not await self._users.delete_user(user_id=user_id):
            raise UserNotFoundError(user_id=user_id)
        logger.info("user_deleted user_id=%s", user_id)

    async def _require_owned_user(self, *, actor_user_id: UUID, user_id: UUID) -> UserRecord:
        target = await self._users.get_by_id(user_id=user_id)
        if target is None:
            raise UserNotFoundError(user_id=user_id)
        if actor_user_id != target.user_id:
            raise UserOwnershipError()
        return target

    async def _require_email_available(self, *, email: str) -> None:
        if await self._users.get_by_email(email=email) is not None:
            raise UserAlreadyExistsError(field="email")

    async def _require_username_available(self, *, username: str) -> None:
        if await self._users.get_by_username(username=username) is not None:
            raise UserAlreadyExistsError(field="username")
