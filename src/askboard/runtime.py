"""Runtime composition root wiring settings, storage and application services."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from askboard.application.services.auth_service import AuthService
from askboard.application.services.question_service import QuestionService
from askboard.application.services.user_service import UserService
from askboard.config.settings import Settings, load_settings
from askboard.infrastructure.db.auth_event_repository import SqlAlchemyAuthEventRepository
from askboard.infrastructure.db.question_repository import SqlAlchemyQuestionRepository
from askboard.infrastructure.db.session import create_session_factory
from askboard.infrastructure.db.user_repository import SqlAlchemyUserRepository
from askboard.infrastructure.logging import configure_logging
from askboard.infrastructure.security.credential_manager import Pbkdf2CredentialManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Runtime:
    """Application services handed to the surrounding web layer."""

    auth_service: AuthService
    user_service: UserService
    question_service: QuestionService
    credential_manager: Pbkdf2CredentialManager


def build_credential_manager(settings: Settings) -> Pbkdf2CredentialManager:
    """Build the credential manager; configuration errors propagate and abort startup."""

    return Pbkdf2CredentialManager(settings.key_derivation_config())


def build_runtime(
    settings: Settings | None = None,
    *,
    credential_manager: Pbkdf2CredentialManager | None = None,
) -> Runtime:
    """Wire SQLAlchemy-backed repositories and services from settings."""

    if settings is None:
        settings = load_settings()
    configure_logging(level=settings.log_level)

    if credential_manager is None:
        credential_manager = build_credential_manager(settings)

    session_factory = create_session_factory(settings.database_url)
    users = SqlAlchemyUserRepository(session_factory)
    questions = SqlAlchemyQuestionRepository(session_factory)

    runtime = Runtime(
        auth_service=AuthService(
            users=users,
            auth_events=SqlAlchemyAuthEventRepository(session_factory),
            credential_manager=credential_manager,
        ),
        user_service=UserService(
            users=users,
            questions=questions,
            credential_manager=credential_manager,
        ),
        question_service=QuestionService(questions=questions, users=users),
        credential_manager=credential_manager,
    )
    logger.info(
        "runtime_ready password_digest=%s password_iterations=%s",
        settings.password_digest,
        settings.password_iterations,
    )
    return runtime
