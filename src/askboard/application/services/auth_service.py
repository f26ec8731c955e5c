"""Application authentication service for credential verification."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

from askboard.application.ports.auth_event_repository_port import (
    AuthEventCreateInput,
    AuthEventRepositoryPort,
)
from askboard.application.ports.credential_manager_port import CredentialManagerPort
from askboard.application.ports.user_repository_port import UserRecord, UserRepositoryPort

logger = logging.getLogger(__name__)


class AuthOutcome(StrEnum):
    """Supported authentication outcomes."""

    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"


@dataclass(frozen=True)
class AuthResult:
    """Authentication result model."""

    outcome: AuthOutcome
    user: UserRecord | None = None


class AuthService:
    """Authenticate credentials and append auth audit events.

    Unknown emails and wrong passwords produce the same result and the same
    audit reason, so callers cannot tell which identifiers are registered.
    """

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        auth_events: AuthEventRepositoryPort,
        credential_manager: CredentialManagerPort,
    ) -> None:
        self._users = users
        self._auth_events = auth_events
        self._credential_manager = credential_manager

    async def authenticate(
        self,
        *,
        email: str,
        password: str,
        ip_address: str | None,
        user_agent: str | None,
    ) -> AuthResult:
        """Authenticate user credentials and always emit one auth event."""

        normalized_email = email.strip().lower()
        user = None
        if normalized_email:
            user = await self._users.get_by_email(email=normalized_email)

        if user is None:
            return await self._fail(
                user_id=None,
                email=normalized_email,
                ip_address=ip_address,
                user_agent=user_agent,
            )

        is_valid = await asyncio.to_thread(
            self._credential_manager.verify,
            password,
            user.credential,
        )
        if not is_valid:
            return await self._fail(
                user_id=user.user_id,
                email=normalized_email,
                ip_address=ip_address,
                user_agent=user_agent,
            )

        await self._auth_events.append_event(
            AuthEventCreateInput(
                user_id=user.user_id,
                event_type="login_success",
                ip_address=ip_address,
                user_agent=user_agent,
                payload={"email": normalized_email},
            )
        )
        logger.info("login_success user_id=%s", user.user_id)
        return AuthResult(outcome=AuthOutcome.SUCCESS, user=user)

    async def _fail(
        self,
        *,
        user_id: UUID | None,
        email: str,
        ip_address: str | None,
        user_agent: str | None,
    ) -> AuthResult:
        await self._auth_events.append_event(
            AuthEventCreateInput(
                user_id=user_id,
                event_type="login_failed",
                ip_address=ip_address,
                user_agent=user_agent,
                payload={"email": email, "reason": AuthOutcome.INVALID_CREDENTIALS.value},
            )
        )
        logger.info("login_failed reason=%s", AuthOutcome.INVALID_CREDENTIALS.value)
        return AuthResult(outcome=AuthOutcome.INVALID_CREDENTIALS, user=None)
