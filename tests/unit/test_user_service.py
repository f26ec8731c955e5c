from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from askboard.application.dto.user_models import UserProfileUpdateForm, UserRegistrationForm
from askboard.application.ports.question_repository_port import QuestionRecord
from askboard.application.ports.user_repository_port import (
    UserAlreadyExistsError,
    UserCreateInput,
    UserRecord,
    UserUpdateInput,
)
from askboard.application.services.user_service import (
    UserNotFoundError,
    UserOwnershipError,
    UserService,
)
from askboard.domain.auth.credentials import Credential


@dataclass
class FakeUserRepository:
    users: dict[UUID, UserRecord] = field(default_factory=dict)
    deleted: list[UUID] = field(default_factory=list)

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        return self.users.get(user_id)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        return next((user for user in self.users.values() if user.email == email), None)

    async def get_by_username(self, *, username: str) -> UserRecord | None:
        return next((user for user in self.users.values() if user.username == username), None)

    async def list_users(self) -> list[UserRecord]:
        return sorted(self.users.values(), key=lambda item: item.username)

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        now = datetime.now(tz=UTC)
        user = UserRecord(
            user_id=payload.user_id,
            email=payload.email,
            username=payload.username,
            name=payload.name,
            avatar_url=payload.avatar_url,
            password_salt=payload.credential.password_salt,
            password_hash=payload.credential.password_hash,
            created_at=now,
            updated_at=now,
        )
        self.users[user.user_id] = user
        return user

    async def update_user(self, *, user_id: UUID, payload: UserUpdateInput) -> UserRecord | None:
        existing = self.users.get(user_id)
        if existing is None:
            return None
        changes: dict[str, str | None] = {
            key: value
            for key, value in {
                "email": payload.email,
                "username": payload.username,
                "name": payload.name,
                "avatar_url": payload.avatar_url,
            }.items()
            if value is not None
        }
        for key in payload.clear_fields:
            changes[key] = None
        if payload.credential is not None:
            changes["password_salt"] = payload.credential.password_salt
            changes["password_hash"] = payload.credential.password_hash
        updated = replace(existing, **changes)
        self.users[user_id] = updated
        return updated

    async def delete_user(self, *, user_id: UUID) -> bool:
        self.deleted.append(user_id)
        return self.users.pop(user_id, None) is not None


class FakeQuestionRepository:
    def __init__(self, questions: list[QuestionRecord] | None = None) -> None:
        self.questions = questions or []

    async def list_for_user(self, *, user_id: UUID) -> list[QuestionRecord]:
        return [question for question in self.questions if question.user_id == user_id]


class FakeCredentialManager:
    def __init__(self) -> None:
        self.derive_calls: list[str] = []

    def derive(self, password: str) -> Credential:
        self.derive_calls.append(password)
        index = len(self.derive_calls)
        return Credential(password_salt=f"salt-{index}", password_hash=f"hash-{index}")

    def verify(self, password: str, credential: Credential) -> bool:
        _ = password, credential
        return False


def _service(
    *,
    users: FakeUserRepository | None = None,
    questions: FakeQuestionRepository | None = None,
) -> tuple[UserService, FakeUserRepository, FakeCredentialManager]:
    user_repo = users or FakeUserRepository()
    credential_manager = FakeCredentialManager()
    service = UserService(
        users=user_repo,
        questions=questions or FakeQuestionRepository(),
        credential_manager=credential_manager,
    )
    return service, user_repo, credential_manager


def _registration(**overrides: str) -> UserRegistrationForm:
    values = {
        "email": "Asker@Example.com",
        "username": "Asker_1",
        "password": "correcthorse",
        "password_confirmation": "correcthorse",
    }
    values.update(overrides)
    return UserRegistrationForm(**values)


@pytest.mark.asyncio
async def test_register_derives_credential_and_normalizes_identity() -> None:
    service, users, credential_manager = _service()

    user = await service.register(_registration(name="Asker"))

    assert credential_manager.derive_calls == ["correcthorse"]
    assert user.email == "asker@example.com"
    assert user.username == "asker_1"
    assert user.name == "Asker"
    assert user.password_salt == "salt-1"
    assert user.password_hash == "hash-1"
    assert users.users[user.user_id] == user


@pytest.mark.asyncio
async def test_register_rejects_taken_email_and_username() -> None:
    service, _, credential_manager = _service()
    await service.register(_registration())

    with pytest.raises(UserAlreadyExistsError) as email_error:
        await service.register(_registration(username="someone_else"))
    with pytest.raises(UserAlreadyExistsError) as username_error:
        await service.register(_registration(email="other@example.com", username="ASKER_1"))

    assert email_error.value.field == "email"
    assert username_error.value.field == "username"
    assert credential_manager.derive_calls == ["correcthorse"]


@pytest.mark.asyncio
async def test_update_with_new_password_regenerates_salt_and_hash_together() -> None:
    service, _, credential_manager = _service()
    user = await service.register(_registration())

    updated = await service.update_profile(
        actor_user_id=user.user_id,
        user_id=user.user_id,
        form=UserProfileUpdateForm(password="new-secret", password_confirmation="new-secret"),
    )

    assert credential_manager.derive_calls == ["correcthorse", "new-secret"]
    assert updated.password_salt == "salt-2"
    assert updated.password_hash == "hash-2"


@pytest.mark.asyncio
async def test_update_with_blank_password_keeps_credential() -> None:
    service, _, credential_manager = _service()
    user = await service.register(_registration())

    updated = await service.update_profile(
        actor_user_id=user.user_id,
        user_id=user.user_id,
        form=UserProfileUpdateForm(name="New Name", password="", password_confirmation=""),
    )

    assert credential_manager.derive_calls == ["correcthorse"]
    assert updated.name == "New Name"
    assert updated.credential == user.credential


@pytest.mark.asyncio
async def test_update_with_blank_name_and_avatar_clears_them() -> None:
    service, _, _ = _service()
    user = await service.register(
        _registration(name="Asker", avatar_url="https://example.com/asker.png")
    )

    cleared = await service.update_profile(
        actor_user_id=user.user_id,
        user_id=user.user_id,
        form=UserProfileUpdateForm(name="", avatar_url="  "),
    )
    untouched = await service.update_profile(
        actor_user_id=user.user_id,
        user_id=user.user_id,
        form=UserProfileUpdateForm(username="asker_2"),
    )

    assert cleared.name is None
    assert cleared.avatar_url is None
    assert untouched.name is None
    assert untouched.username == "asker_2"


@pytest.mark.asyncio
async def test_update_rejects_other_actor() -> None:
    service, _, _ = _service()
    user = await service.register(_registration())

    with pytest.raises(UserOwnershipError):
        await service.update_profile(
            actor_user_id=uuid4(),
            user_id=user.user_id,
            form=UserProfileUpdateForm(name="Intruder"),
        )


@pytest.mark.asyncio
async def test_update_unknown_user_raises_not_found() -> None:
    service, _, _ = _service()
    missing = uuid4()

    with pytest.raises(UserNotFoundError):
        await service.update_profile(
            actor_user_id=missing,
            user_id=missing,
            form=UserProfileUpdateForm(name="Ghost"),
        )


@pytest.mark.asyncio
async def test_update_rejects_email_taken_by_someone_else() -> None:
    service, _, _ = _service()
    first = await service.register(_registration())
    await service.register(_registration(email="second@example.com", username="second"))

    with pytest.raises(UserAlreadyExistsError):
        await service.update_profile(
            actor_user_id=first.user_id,
            user_id=first.user_id,
            form=UserProfileUpdateForm(email="second@example.com"),
        )

    unchanged = await service.update_profile(
        actor_user_id=first.user_id,
        user_id=first.user_id,
        form=UserProfileUpdateForm(email="asker@example.com"),
    )
    assert unchanged.email == "asker@example.com"


@pytest.mark.asyncio
async def test_get_profile_returns_user_questions() -> None:
    users = FakeUserRepository()
    service, _, _ = _service(users=users)
    user = await service.register(_registration())
    now = datetime.now(tz=UTC)
    question = QuestionRecord(
        question_id=1,
        user_id=user.user_id,
        text="What is PBKDF2?",
        created_at=now,
        updated_at=now,
    )
    service = UserService(
        users=users,
        questions=FakeQuestionRepository([question]),
        credential_manager=FakeCredentialManager(),
    )

    profile = await service.get_profile(user_id=user.user_id)

    assert profile.user == user
    assert profile.questions == [question]
    with pytest.raises(UserNotFoundError):
        await service.get_profile(user_id=uuid4())


@pytest.mark.asyncio
async def test_delete_account_is_owner_only() -> None:
    service, users, _ = _service()
    user = await service.register(_registration())

    with pytest.raises(UserOwnershipError):
        await service.delete_account(actor_user_id=uuid4(), user_id=user.user_id)
    assert users.deleted == []

    await service.delete_account(actor_user_id=user.user_id, user_id=user.user_id)

    assert users.deleted == [user.user_id]
    assert await service.list_users() == []
