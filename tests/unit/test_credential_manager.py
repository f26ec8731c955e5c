from __future__ import annotations

import hashlib
import re
from dataclasses import replace

import pytest

from askboard.domain.auth.credentials import Credential
from askboard.infrastructure.security.credential_manager import (
    CredentialConfigurationError,
    KeyDerivationConfig,
    Pbkdf2CredentialManager,
)

_LOWER_HEX = re.compile(r"\A[0-9a-f]+\Z")


def test_default_config_matches_storage_layout() -> None:
    config = KeyDerivationConfig()

    assert config.iterations == 20_000
    assert config.digest_name == "sha256"
    assert config.salt_length == 16
    assert config.derived_key_length == 32


def test_derive_then_verify_correct_and_wrong_password() -> None:
    manager = Pbkdf2CredentialManager()

    credential = manager.derive("correcthorse")

    assert len(credential.password_salt) == 32
    assert len(credential.password_hash) == 64
    assert _LOWER_HEX.match(credential.password_salt)
    assert _LOWER_HEX.match(credential.password_hash)
    assert manager.verify("correcthorse", credential) is True
    assert manager.verify("wrongpass", credential) is False


def test_same_password_gets_fresh_salt_and_hash_each_time() -> None:
    manager = Pbkdf2CredentialManager()

    first = manager.derive("same-password")
    second = manager.derive("same-password")

    assert first.password_salt != second.password_salt
    assert first.password_hash != second.password_hash
    assert manager.verify("same-password", first) is True
    assert manager.verify("same-password", second) is True


def test_hash_is_pbkdf2_over_hex_salt_string() -> None:
    manager = Pbkdf2CredentialManager()

    credential = manager.derive("correcthorse")
    expected = hashlib.pbkdf2_hmac(
        "sha256",
        b"correcthorse",
        credential.password_salt.encode("utf-8"),
        20_000,
        dklen=32,
    ).hex()

    assert credential.password_hash == expected


def test_verify_accepts_previously_stored_credential() -> None:
    salt = "00112233445566778899aabbccddeeff"
    stored_hash = hashlib.pbkdf2_hmac(
        "sha256",
        b"legacy-password",
        salt.encode("utf-8"),
        20_000,
        dklen=32,
    ).hex()
    manager = Pbkdf2CredentialManager()

    credential = Credential(password_salt=salt, password_hash=stored_hash)

    assert manager.verify("legacy-password", credential) is True
    assert manager.verify("legacy-password", credential) is True
    assert manager.verify("other", credential) is False


def test_tampered_hash_character_fails_verification() -> None:
    manager = Pbkdf2CredentialManager()
    credential = manager.derive("correcthorse")
    first = credential.password_hash[0]
    flipped = "1" if first == "0" else "0"

    tampered = replace(credential, password_hash=flipped + credential.password_hash[1:])

    assert manager.verify("correcthorse", tampered) is False


def _with_one_upper_hex_letter(password_hash: str) -> str:
    index = next(i for i, char in enumerate(password_hash) if char in "abcdef")
    return password_hash[:index] + password_hash[index].upper() + password_hash[index + 1 :]


def test_stored_hash_is_compared_as_exact_text() -> None:
    manager = Pbkdf2CredentialManager(KeyDerivationConfig(iterations=1_000))
    credential = manager.derive("correcthorse")
    upper = replace(credential, password_hash=_with_one_upper_hex_letter(credential.password_hash))
    spaced = replace(
        credential,
        password_hash=credential.password_hash[:2] + " " + credential.password_hash[2:],
    )
    padded = replace(credential, password_hash=credential.password_hash + "\n")

    assert manager.verify("correcthorse", credential) is True
    assert manager.verify("correcthorse", upper) is False
    assert manager.verify("correcthorse", spaced) is False
    assert manager.verify("correcthorse", padded) is False


def test_lone_surrogate_password_derives_and_verifies_without_raising() -> None:
    manager = Pbkdf2CredentialManager(KeyDerivationConfig(iterations=1_000))
    stored = manager.derive("correcthorse")

    assert manager.verify("x\ud800", stored) is False

    odd = manager.derive("x\ud800")
    assert manager.verify("x\ud800", odd) is True
    assert manager.verify("x", odd) is False


def test_non_ascii_stored_hash_fails_verification() -> None:
    manager = Pbkdf2CredentialManager(KeyDerivationConfig(iterations=1_000))
    credential = manager.derive("correcthorse")

    broken = replace(credential, password_hash="é\ud800" + credential.password_hash[2:])

    assert manager.verify("correcthorse", broken) is False


@pytest.mark.parametrize(
    "credential",
    [
        Credential(password_salt="", password_hash=""),
        Credential(password_salt="00112233445566778899aabbccddeeff", password_hash=""),
        Credential(password_salt="", password_hash="ab" * 32),
        Credential(password_salt="00112233445566778899aabbccddeeff", password_hash="not-hex"),
        Credential(password_salt="00112233445566778899aabbccddeeff", password_hash="ab"),
    ],
)
def test_verify_returns_false_for_absent_or_malformed_credential(credential: Credential) -> None:
    manager = Pbkdf2CredentialManager()

    assert manager.verify("anything", credential) is False


def test_custom_config_controls_lengths() -> None:
    manager = Pbkdf2CredentialManager(
        KeyDerivationConfig(iterations=1_000, digest_name="sha3_256", salt_length=24)
    )

    credential = manager.derive("pw-12345")

    assert len(credential.password_salt) == 48
    assert len(credential.password_hash) == 64
    assert manager.verify("pw-12345", credential) is True


def test_credential_repr_does_not_leak_values() -> None:
    manager = Pbkdf2CredentialManager(KeyDerivationConfig(iterations=1_000))
    credential = manager.derive("pw-12345")

    assert credential.password_salt not in repr(credential)
    assert credential.password_hash not in repr(credential)


@pytest.mark.parametrize(
    "config",
    [
        KeyDerivationConfig(digest_name="md5"),
        KeyDerivationConfig(digest_name="sha512"),
        KeyDerivationConfig(iterations=0),
        KeyDerivationConfig(salt_length=0),
    ],
)
def test_unusable_configuration_is_fatal(config: KeyDerivationConfig) -> None:
    with pytest.raises(CredentialConfigurationError):
        Pbkdf2CredentialManager(config)
