"""Port for password credential derivation and verification."""

from __future__ import annotations

from typing import Protocol

from askboard.domain.auth.credentials import Credential


class CredentialManagerPort(Protocol):
    """Password credential derivation/verification contract."""

    def derive(self, password: str) -> Credential:
        """Derive a fresh salt and hash pair for a plaintext password."""

    def verify(self, password: str, credential: Credential) -> bool:
        """Return whether the plaintext password matches the stored credential."""
