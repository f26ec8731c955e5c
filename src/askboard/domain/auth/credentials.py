"""Credential value object and normalization helpers for user account inputs."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Mailbox pattern accepted for registration, equivalent to the URI mailto address grammar.
EMAIL_PATTERN = re.compile(
    r"\A[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*\Z"
)
USERNAME_PATTERN = re.compile(r"\A[a-z0-9_]*\Z")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 40


@dataclass(frozen=True)
class Credential:
    """Stored password credential: hex salt and hex derived key, always set as a pair."""

    password_salt: str
    password_hash: str

    def __repr__(self) -> str:
        return "Credential(password_salt=<redacted>, password_hash=<redacted>)"


def normalize_user_email(*, email: str) -> str:
    """Normalize one user email and reject blank or malformed values."""

    normalized = email.strip().lower()
    if not normalized:
        raise ValueError("email cannot be blank")
    if EMAIL_PATTERN.match(normalized) is None:
        raise ValueError("email is not a valid address")
    return normalized


def normalize_username(*, username: str) -> str:
    """Lower-case one username and enforce length and allowed characters."""

    normalized = username.strip().lower()
    if not normalized:
        raise ValueError("username cannot be blank")
    if not USERNAME_MIN_LENGTH <= len(normalized) <= USERNAME_MAX_LENGTH:
        raise ValueError(
            f"username must have between {USERNAME_MIN_LENGTH} and "
            f"{USERNAME_MAX_LENGTH} characters"
        )
    if USERNAME_PATTERN.match(normalized) is None:
        raise ValueError("username only allows letters, digits, and '_'")
    return normalized
