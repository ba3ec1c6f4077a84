"""
Typed field groups for the registry configuration bundle.

Each model covers the config keys one backing service owns. Fields carry the
registry's upper-snake-case keys as aliases so `model_dump(by_alias=True)`
yields a document the registry can load directly.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator


class _FieldGroup(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SecurityScannerFieldGroup(_FieldGroup):
    """Clair v4 integration settings."""

    feature_security_scanner: bool = Field(default=False, alias="FEATURE_SECURITY_SCANNER")
    security_scanner_v4_endpoint: str | None = Field(
        default=None, alias="SECURITY_SCANNER_V4_ENDPOINT"
    )
    security_scanner_v4_namespace_whitelist: list[str] = Field(
        default_factory=list, alias="SECURITY_SCANNER_V4_NAMESPACE_WHITELIST"
    )
    security_scanner_indexing_interval: int = Field(
        default=30, alias="SECURITY_SCANNER_INDEXING_INTERVAL"
    )
    security_scanner_notifications: bool = Field(
        default=False, alias="SECURITY_SCANNER_NOTIFICATIONS"
    )


class RedisEndpoint(_FieldGroup):
    host: str
    port: int = Field(default=6379)
    password: str | None = Field(default=None)


class RedisFieldGroup(_FieldGroup):
    """Redis instances backing build logs and user events."""

    buildlogs_redis: RedisEndpoint | None = Field(default=None, alias="BUILDLOGS_REDIS")
    user_events_redis: RedisEndpoint | None = Field(default=None, alias="USER_EVENTS_REDIS")


class DatabaseFieldGroup(_FieldGroup):
    """Primary registry database connection."""

    db_uri: str | None = Field(default=None, alias="DB_URI")
    db_connection_args: dict[str, Any] | None = Field(default=None, alias="DB_CONNECTION_ARGS")


class DistributedStorageArgs(_FieldGroup):
    hostname: str = Field(default="")
    is_secure: bool = Field(default=True)
    port: int = Field(default=443)
    storage_path: str = Field(default="/datastorage/registry")
    bucket_name: str = Field(default="")
    access_key: str = Field(default="")
    secret_key: str = Field(default="")


class DistributedStorageDefinition(_FieldGroup):
    """A storage driver name and its arguments, encoded as a `[name, args]` pair."""

    name: str
    args: DistributedStorageArgs = Field(default_factory=DistributedStorageArgs)

    @model_validator(mode="before")
    @classmethod
    def _accept_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)) and len(data) == 2:
            return {"name": data[0], "args": data[1]}
        return data

    @model_serializer(mode="wrap")
    def _as_pair(self, handler: Any) -> list[Any]:
        dumped = handler(self)
        return [dumped["name"], dumped["args"]]


class DistributedStorageFieldGroup(_FieldGroup):
    """Object storage locations and replication preferences."""

    feature_proxy_storage: bool = Field(default=False, alias="FEATURE_PROXY_STORAGE")
    distributed_storage_preference: list[str] = Field(
        default_factory=list, alias="DISTRIBUTED_STORAGE_PREFERENCE"
    )
    distributed_storage_default_locations: list[str] = Field(
        default_factory=list, alias="DISTRIBUTED_STORAGE_DEFAULT_LOCATIONS"
    )
    distributed_storage_config: dict[str, DistributedStorageDefinition] = Field(
        default_factory=dict, alias="DISTRIBUTED_STORAGE_CONFIG"
    )


class HostSettingsFieldGroup(_FieldGroup):
    """Externally visible hostname and scheme."""

    server_hostname: str = Field(default="", alias="SERVER_HOSTNAME")
    external_tls_termination: bool = Field(default=False, alias="EXTERNAL_TLS_TERMINATION")
    preferred_url_scheme: str = Field(default="http", alias="PREFERRED_URL_SCHEME")


FieldGroup = (
    SecurityScannerFieldGroup
    | RedisFieldGroup
    | DatabaseFieldGroup
    | DistributedStorageFieldGroup
    | HostSettingsFieldGroup
)


__all__ = [
    "DatabaseFieldGroup",
    "DistributedStorageArgs",
    "DistributedStorageDefinition",
    "DistributedStorageFieldGroup",
    "FieldGroup",
    "HostSettingsFieldGroup",
    "RedisEndpoint",
    "RedisFieldGroup",
    "SecurityScannerFieldGroup",
]
