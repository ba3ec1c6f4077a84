"""
Contracts shared by the synthesis modules.

These models describe the registry descriptor handed in by the control plane,
the persisted snapshot of managed secret keys, and the closed set of component
kinds the synthesizer knows how to configure.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

STORAGE_HOSTNAME_ANNOTATION = "quay-storage-hostname"
STORAGE_BUCKET_NAME_ANNOTATION = "quay-storage-bucket"
STORAGE_ACCESS_KEY_ANNOTATION = "quay-storage-access-key"
STORAGE_SECRET_KEY_ANNOTATION = "quay-storage-secret-key"
CLUSTER_HOSTNAME_ANNOTATION = "quay-cluster-hostname"

SECRET_KEY = "SECRET_KEY"
DATABASE_SECRET_KEY = "DATABASE_SECRET_KEY"
MANAGED_SECRET_KEYS = (SECRET_KEY, DATABASE_SECRET_KEY)
SECRET_KEYS_SECRET_SUFFIX = "quay-registry-managed-secret-keys"


class UnknownComponentError(ValueError):
    """Raised when a component kind is outside the supported set."""

    def __init__(self, kind: Any) -> None:
        super().__init__(f"unknown component: {kind}")
        self.kind = kind


class RandomSourceError(RuntimeError):
    """Raised when the secure random source fails to produce bytes."""


class MalformedUserValueError(TypeError):
    """Raised when a user config value the synthesizer reads is malformed."""

    def __init__(self, key_name: str, value: Any, reason: str | None = None) -> None:
        reason = reason or f"must be a string, got {type(value).__name__}"
        super().__init__(f"{key_name} in the provided config {reason}")
        self.key_name = key_name


class SerializationError(RuntimeError):
    """Raised when an internally built document cannot be encoded."""


class ComponentKind(str, enum.Enum):
    """Backing services managed alongside the registry."""

    CLAIR = "clair"
    REDIS = "redis"
    POSTGRES = "postgres"
    OBJECTSTORAGE = "objectstorage"
    ROUTE = "route"
    HORIZONTALPODAUTOSCALER = "horizontalpodautoscaler"

    @classmethod
    def parse(cls, value: str | ComponentKind) -> ComponentKind:
        """Coerce a raw kind string, raising `UnknownComponentError` on failure."""
        if isinstance(value, ComponentKind):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise UnknownComponentError(value) from exc

    @property
    def config_filename(self) -> str:
        return f"{self.value}.config.yaml"


class RegistryDescriptor(BaseModel):
    """Identity and annotated infrastructure coordinates of a registry."""

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str = Field(default="default")
    annotations: dict[str, str] = Field(default_factory=dict)

    def annotation(self, key: str) -> str:
        return self.annotations.get(key, "")

    @property
    def storage_hostname(self) -> str:
        return self.annotation(STORAGE_HOSTNAME_ANNOTATION)

    @property
    def storage_bucket_name(self) -> str:
        return self.annotation(STORAGE_BUCKET_NAME_ANNOTATION)

    @property
    def storage_access_key(self) -> str:
        return self.annotation(STORAGE_ACCESS_KEY_ANNOTATION)

    @property
    def storage_secret_key(self) -> str:
        return self.annotation(STORAGE_SECRET_KEY_ANNOTATION)

    @property
    def cluster_hostname(self) -> str:
        return self.annotation(CLUSTER_HOSTNAME_ANNOTATION)


def secret_keys_secret_name(descriptor: RegistryDescriptor) -> str:
    """Name of the snapshot holding generated secret keys for a registry."""
    return f"{descriptor.name}-{SECRET_KEYS_SECRET_SUFFIX}"


class SecretKeySnapshot(BaseModel):
    """Persisted managed secret keys for a single registry."""

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str = Field(default="default")
    string_data: dict[str, str] = Field(default_factory=dict)
    data: dict[str, bytes] = Field(
        default_factory=dict, description="Legacy binary-valued entries."
    )

    @classmethod
    def empty_for(cls, descriptor: RegistryDescriptor) -> SecretKeySnapshot:
        return cls(name=secret_keys_secret_name(descriptor), namespace=descriptor.namespace)

    def lookup(self, key_name: str) -> str | None:
        """Return a non-empty stored value, preferring `string_data` over `data`."""
        value = self.string_data.get(key_name)
        if value:
            return value
        raw = self.data.get(key_name)
        if raw:
            return raw.decode("utf-8")
        return None

    def with_value(self, key_name: str, value: str) -> SecretKeySnapshot:
        """Return an independent copy that stores `value` under `key_name`."""
        return self.model_copy(
            update={
                "string_data": {**self.string_data, key_name: value},
                "data": dict(self.data),
            }
        )

    def to_manifest(self) -> dict[str, Any]:
        """Plain mapping suitable for persisting as YAML."""
        manifest: dict[str, Any] = {
            "name": self.name,
            "namespace": self.namespace,
            "string_data": dict(self.string_data),
        }
        if self.data:
            manifest["data"] = {key: value.decode("utf-8") for key, value in self.data.items()}
        return manifest

    @classmethod
    def from_manifest(cls, manifest: dict[str, Any]) -> SecretKeySnapshot:
        data = manifest.get("data") or {}
        return cls(
            name=manifest["name"],
            namespace=manifest.get("namespace", "default"),
            string_data=dict(manifest.get("string_data") or {}),
            data={key: str(value).encode("utf-8") for key, value in data.items()},
        )


__all__ = [
    "CLUSTER_HOSTNAME_ANNOTATION",
    "DATABASE_SECRET_KEY",
    "MANAGED_SECRET_KEYS",
    "SECRET_KEY",
    "STORAGE_ACCESS_KEY_ANNOTATION",
    "STORAGE_BUCKET_NAME_ANNOTATION",
    "STORAGE_HOSTNAME_ANNOTATION",
    "STORAGE_SECRET_KEY_ANNOTATION",
    "ComponentKind",
    "MalformedUserValueError",
    "RandomSourceError",
    "RegistryDescriptor",
    "SecretKeySnapshot",
    "SerializationError",
    "UnknownComponentError",
    "secret_keys_secret_name",
]
