"""
Provisioning of the registry's managed secret keys.

`SECRET_KEY` and `DATABASE_SECRET_KEY` must stay stable across every
synthesis pass. A value supplied in the user's config always wins; otherwise
the value persisted in the managed snapshot is reused, and only when neither
exists is a fresh key generated and recorded in a new snapshot.

Generated keys map each of 80 random bytes onto a 63 symbol alphabet with a
modulo reduction. 256 is not a multiple of 63, so the first few symbols are
very slightly favoured; the resulting key still carries far more entropy than
any guessing attack could exhaust.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable, Mapping
from typing import Any

from ...core.contracts import (
    DATABASE_SECRET_KEY,
    SECRET_KEY,
    MalformedUserValueError,
    RandomSourceError,
    RegistryDescriptor,
    SecretKeySnapshot,
)

logger = logging.getLogger(__name__)

SECRET_KEY_LENGTH = 80
ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-"


class SecretKeyProvisioner:
    """Resolve managed secret keys from user config, persisted state, or the CSPRNG."""

    def __init__(
        self,
        descriptor: RegistryDescriptor,
        *,
        random_bytes: Callable[[int], bytes] | None = None,
        key_length: int = SECRET_KEY_LENGTH,
    ) -> None:
        self._descriptor = descriptor
        self._random_bytes = random_bytes or secrets.token_bytes
        self._key_length = key_length

    def ensure_key(
        self,
        user_config: Mapping[str, Any],
        snapshot: SecretKeySnapshot | None,
        key_name: str,
    ) -> tuple[str, SecretKeySnapshot | None]:
        """
        Return the value for `key_name` and the snapshot to persist.

        The snapshot passed in is never modified. When a key has to be generated
        a new snapshot is returned, created from scratch if none existed.
        """
        if key_name in user_config:
            value = user_config[key_name]
            if not isinstance(value, str):
                raise MalformedUserValueError(key_name, value)
            logger.info("Secret key %s found in provided config", key_name)
            return value, snapshot

        if snapshot is not None:
            stored = snapshot.lookup(key_name)
            if stored is not None:
                logger.info("Secret key %s found in managed secret %s", key_name, snapshot.name)
                return stored, snapshot
        else:
            logger.info("Creating a new managed secret for %s", self._descriptor.name)
            snapshot = SecretKeySnapshot.empty_for(self._descriptor)

        logger.info("Generating secret key %s", key_name)
        generated = self.generate_key()
        return generated, snapshot.with_value(key_name, generated)

    def ensure_key_pair(
        self,
        user_config: Mapping[str, Any],
        snapshot: SecretKeySnapshot | None,
    ) -> tuple[str, str, SecretKeySnapshot | None]:
        """Resolve `SECRET_KEY` then `DATABASE_SECRET_KEY`, threading the snapshot."""
        secret_key, snapshot = self.ensure_key(user_config, snapshot, SECRET_KEY)
        database_secret_key, snapshot = self.ensure_key(user_config, snapshot, DATABASE_SECRET_KEY)
        return secret_key, database_secret_key, snapshot

    def generate_key(self) -> str:
        try:
            raw = self._random_bytes(self._key_length)
        except OSError as exc:
            raise RandomSourceError("secure random source failed") from exc
        if len(raw) != self._key_length:
            raise RandomSourceError(
                f"secure random source returned {len(raw)} bytes, expected {self._key_length}"
            )
        return "".join(ALPHABET[byte % len(ALPHABET)] for byte in raw)


def ensure_key_pair(
    descriptor: RegistryDescriptor,
    user_config: Mapping[str, Any],
    snapshot: SecretKeySnapshot | None = None,
) -> tuple[str, str, SecretKeySnapshot | None]:
    """Module-level shortcut around `SecretKeyProvisioner.ensure_key_pair`."""
    return SecretKeyProvisioner(descriptor).ensure_key_pair(user_config, snapshot)


__all__ = ["ALPHABET", "SECRET_KEY_LENGTH", "SecretKeyProvisioner", "ensure_key_pair"]
