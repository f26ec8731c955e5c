"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from askboard.infrastructure.security.credential_manager import (
    DEFAULT_DIGEST_NAME,
    DEFAULT_ITERATIONS,
    DEFAULT_SALT_LENGTH,
    KeyDerivationConfig,
)

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveInt = Annotated[int, Field(gt=0)]
SaltLength = Annotated[int, Field(ge=16)]
DigestName = Literal["sha256", "sha3_256", "blake2s"]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    password_iterations: PositiveInt = Field(
        default=DEFAULT_ITERATIONS,
        validation_alias="PASSWORD_ITERATIONS",
    )
    password_salt_bytes: SaltLength = Field(
        default=DEFAULT_SALT_LENGTH,
        validation_alias="PASSWORD_SALT_BYTES",
    )
    password_digest: DigestName = Field(
        default=DEFAULT_DIGEST_NAME,
        validation_alias="PASSWORD_DIGEST",
    )

    def key_derivation_config(self) -> KeyDerivationConfig:
        """Build the immutable key-derivation parameters for the credential manager."""

        return KeyDerivationConfig(
            iterations=self.password_iterations,
            digest_name=self.password_digest,
            salt_length=self.password_salt_bytes,
        )


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
