"""Pydantic models for question inputs."""

from __future__ import annotations

from pydantic import Field, field_validator

from askboard.application.dto.user_models import StrictModel

QUESTION_TEXT_MIN_LENGTH = 5
QUESTION_TEXT_MAX_LENGTH = 255


class QuestionForm(StrictModel):
    """Question text input shared by ask and edit."""

    text: str = Field(min_length=QUESTION_TEXT_MIN_LENGTH, max_length=QUESTION_TEXT_MAX_LENGTH)

    @field_validator("text")
    @classmethod
    def _reject_blank_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question text cannot be blank")
        return value
