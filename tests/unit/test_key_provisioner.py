"""Tests for managed secret key provisioning."""

from __future__ import annotations

import pytest

from quayconfig.core.contracts import (
    DATABASE_SECRET_KEY,
    SECRET_KEY,
    MalformedUserValueError,
    RandomSourceError,
    RegistryDescriptor,
    SecretKeySnapshot,
)
from quayconfig.modules.secrets.key_provisioner import (
    ALPHABET,
    SECRET_KEY_LENGTH,
    SecretKeyProvisioner,
    ensure_key_pair,
)


def test_alphabet_has_63_symbols() -> None:
    assert len(ALPHABET) == 63
    assert len(set(ALPHABET)) == 63


def test_generated_keys_have_expected_shape(descriptor: RegistryDescriptor) -> None:
    secret_key, database_secret_key, snapshot = ensure_key_pair(descriptor, {}, None)

    for value in (secret_key, database_secret_key):
        assert len(value) == SECRET_KEY_LENGTH == 80
        assert set(value) <= set(ALPHABET)
    assert secret_key != database_secret_key
    assert snapshot is not None
    assert snapshot.name == "myquay-quay-registry-managed-secret-keys"
    assert snapshot.namespace == "ns1"
    assert snapshot.string_data == {
        SECRET_KEY: secret_key,
        DATABASE_SECRET_KEY: database_secret_key,
    }


def test_key_pair_is_idempotent_across_calls(descriptor: RegistryDescriptor) -> None:
    first = ensure_key_pair(descriptor, {}, None)
    second = ensure_key_pair(descriptor, {}, first[2])

    assert second[0] == first[0]
    assert second[1] == first[1]
    assert second[2] == first[2]


def test_user_config_takes_precedence(descriptor: RegistryDescriptor) -> None:
    existing = SecretKeySnapshot.empty_for(descriptor).with_value(SECRET_KEY, "persisted")
    existing = existing.with_value(DATABASE_SECRET_KEY, "persisted-db")

    secret_key, database_secret_key, snapshot = ensure_key_pair(
        descriptor, {"SECRET_KEY": "abc"}, existing
    )

    assert secret_key == "abc"
    assert database_secret_key == "persisted-db"
    assert snapshot is existing


def test_user_supplied_keys_need_no_snapshot(descriptor: RegistryDescriptor) -> None:
    result = ensure_key_pair(
        descriptor, {SECRET_KEY: "one", DATABASE_SECRET_KEY: "two"}, None
    )

    assert result == ("one", "two", None)


def test_caller_snapshot_is_never_mutated(descriptor: RegistryDescriptor) -> None:
    existing = SecretKeySnapshot.empty_for(descriptor).with_value(SECRET_KEY, "kept")

    _, database_secret_key, snapshot = ensure_key_pair(descriptor, {}, existing)

    assert existing.string_data == {SECRET_KEY: "kept"}
    assert snapshot is not existing
    assert snapshot.string_data == {SECRET_KEY: "kept", DATABASE_SECRET_KEY: database_secret_key}


def test_legacy_binary_entries_are_honoured(descriptor: RegistryDescriptor) -> None:
    existing = SecretKeySnapshot(
        name="myquay-quay-registry-managed-secret-keys",
        namespace="ns1",
        data={SECRET_KEY: b"legacy-secret", DATABASE_SECRET_KEY: b"legacy-db"},
    )

    secret_key, database_secret_key, snapshot = ensure_key_pair(descriptor, {}, existing)

    assert (secret_key, database_secret_key) == ("legacy-secret", "legacy-db")
    assert snapshot is existing


def test_empty_persisted_value_is_regenerated(descriptor: RegistryDescriptor) -> None:
    existing = SecretKeySnapshot.empty_for(descriptor).with_value(SECRET_KEY, "")
    provisioner = SecretKeyProvisioner(descriptor, random_bytes=lambda n: bytes(range(n)))

    value, snapshot = provisioner.ensure_key({}, existing, SECRET_KEY)

    assert value == "".join(ALPHABET[i % 63] for i in range(80))
    assert snapshot.string_data[SECRET_KEY] == value


def test_byte_to_symbol_mapping_wraps_modulo_alphabet(descriptor: RegistryDescriptor) -> None:
    provisioner = SecretKeyProvisioner(
        descriptor, random_bytes=lambda n: bytes([0, 62, 63, 255]), key_length=4
    )

    assert provisioner.generate_key() == "0-0" + ALPHABET[255 % 63]


def test_non_string_user_value_is_rejected(descriptor: RegistryDescriptor) -> None:
    with pytest.raises(MalformedUserValueError):
        ensure_key_pair(descriptor, {SECRET_KEY: 12345}, None)


def test_random_source_failure_is_fatal(descriptor: RegistryDescriptor) -> None:
    def failing_source(_: int) -> bytes:
        raise OSError("entropy pool unavailable")

    provisioner = SecretKeyProvisioner(descriptor, random_bytes=failing_source)
    with pytest.raises(RandomSourceError):
        provisioner.ensure_key_pair({}, None)


def test_short_random_read_is_fatal(descriptor: RegistryDescriptor) -> None:
    provisioner = SecretKeyProvisioner(descriptor, random_bytes=lambda n: b"\x00" * (n - 1))
    with pytest.raises(RandomSourceError):
        provisioner.generate_key()
