"""Pydantic models for user registration and profile update inputs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from askboard.domain.auth.credentials import normalize_user_email, normalize_username

CLEARABLE_PROFILE_FIELDS = ("name", "avatar_url")


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid")


def validate_password_confirmation(*, password: str | None, confirmation: str | None) -> None:
    """Reject a confirmation that was supplied but differs from the password."""

    if confirmation is not None and confirmation != (password or ""):
        raise ValueError("password confirmation doesn't match password")


class UserRegistrationForm(StrictModel):
    """Registration input; a non-blank password is required."""

    email: str
    username: str
    password: str = Field(min_length=1, repr=False)
    password_confirmation: str | None = Field(default=None, repr=False)
    name: str | None = None
    avatar_url: str | None = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_user_email(email=value)

    @field_validator("username")
    @classmethod
    def _normalize_username(cls, value: str) -> str:
        return normalize_username(username=value)

    @field_validator("password")
    @classmethod
    def _require_password(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("password cannot be blank")
        return value

    @model_validator(mode="after")
    def _validate_confirmation(self) -> UserRegistrationForm:
        validate_password_confirmation(
            password=self.password,
            confirmation=self.password_confirmation,
        )
        return self


class UserProfileUpdateForm(StrictModel):
    """Profile update input.

    Omitted fields are unchanged. A blank `name` or `avatar_url` clears that field,
    while a blank password keeps the current credential.
    """

    email: str | None = None
    username: str | None = None
    password: str | None = Field(default=None, repr=False)
    password_confirmation: str | None = Field(default=None, repr=False)
    name: str | None = None
    avatar_url: str | None = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_user_email(email=value)

    @field_validator("username")
    @classmethod
    def _normalize_username(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_username(username=value)

    @model_validator(mode="after")
    def _validate_confirmation(self) -> UserProfileUpdateForm:
        validate_password_confirmation(
            password=self.password,
            confirmation=self.password_confirmation,
        )
        return self

    @property
    def new_password(self) -> str | None:
        """Password to set, or None when the update leaves the credential untouched."""

        if self.password is None or not self.password.strip():
            return None
        return self.password

    @property
    def cleared_fields(self) -> frozenset[str]:
        """Optional profile fields submitted blank, which the update sets to NULL."""

        cleared: set[str] = set()
        for field_name in CLEARABLE_PROFILE_FIELDS:
            value = getattr(self, field_name)
            if value is not None and not value.strip():
                cleared.add(field_name)
        return frozenset(cleared)
