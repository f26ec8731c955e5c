"""PBKDF2-HMAC credential manager adapter."""

from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass

from askboard.application.ports.credential_manager_port import CredentialManagerPort
from askboard.domain.auth.credentials import Credential

DEFAULT_ITERATIONS = 20_000
DEFAULT_DIGEST_NAME = "sha256"
DEFAULT_SALT_LENGTH = 16
SUPPORTED_DIGESTS = frozenset({"sha256", "sha3_256", "blake2s"})
_REQUIRED_DIGEST_SIZE = 32


class CredentialConfigurationError(RuntimeError):
    """Raised when key-derivation primitives are unusable; startup must abort."""


@dataclass(frozen=True)
class KeyDerivationConfig:
    """Immutable key-derivation parameters owned by one credential manager."""

    iterations: int = DEFAULT_ITERATIONS
    digest_name: str = DEFAULT_DIGEST_NAME
    salt_length: int = DEFAULT_SALT_LENGTH

    @property
    def derived_key_length(self) -> int:
        """Derived key length, coupled to the digest's native output size."""

        return hashlib.new(self.digest_name).digest_size


class Pbkdf2CredentialManager(CredentialManagerPort):
    """Derive and verify hex-encoded password credentials with PBKDF2-HMAC."""

    def __init__(self, config: KeyDerivationConfig | None = None) -> None:
        self._config = config or KeyDerivationConfig()
        self._check_config()

    @property
    def config(self) -> KeyDerivationConfig:
        return self._config

    def derive(self, password: str) -> Credential:
        """Generate a fresh random salt and derive the matching password hash."""

        password_salt = secrets.token_bytes(self._config.salt_length).hex()
        password_hash = self._derive_key(password, password_salt).hex()
        return Credential(password_salt=password_salt, password_hash=password_hash)

    def verify(self, password: str, credential: Credential) -> bool:
        """Re-derive with the stored salt and compare in constant time."""

        if not credential.password_salt or not credential.password_hash:
            return False
        candidate = self._derive_key(password, credential.password_salt).hex()
        # Stored hash is opaque text: no case folding or whitespace skipping.
        return hmac.compare_digest(
            candidate.encode("ascii"),
            credential.password_hash.encode("utf-8", errors="surrogatepass"),
        )

    def _derive_key(self, password: str, password_salt: str) -> bytes:
        # The hex salt string itself is the PBKDF2 salt input, matching stored rows.
        # Lone surrogates are encoded rather than rejected so verify never raises.
        return hashlib.pbkdf2_hmac(
            self._config.digest_name,
            password.encode("utf-8", errors="surrogatepass"),
            password_salt.encode("utf-8", errors="surrogatepass"),
            self._config.iterations,
            dklen=self._config.derived_key_length,
        )

    def _check_config(self) -> None:
        config = self._config
        if config.digest_name not in SUPPORTED_DIGESTS:
            raise CredentialConfigurationError(f"unsupported digest: {config.digest_name}")
        try:
            digest_size = hashlib.new(config.digest_name).digest_size
        except ValueError as exc:
            raise CredentialConfigurationError(
                f"digest unavailable: {config.digest_name}"
            ) from exc
        if digest_size != _REQUIRED_DIGEST_SIZE:
            raise CredentialConfigurationError(
                f"digest {config.digest_name} is not a 256-bit hash"
            )
        if config.iterations < 1:
            raise CredentialConfigurationError("iterations must be positive")
        if config.salt_length < 1:
            raise CredentialConfigurationError("salt length must be positive")
        try:
            secrets.token_bytes(1)
        except NotImplementedError as exc:
            raise CredentialConfigurationError("secure random source unavailable") from exc
