"""
Per-component field group synthesis.

Every managed component kind maps to exactly one builder. Hostnames and ports
are derived from the registry descriptor following the in-cluster service
naming convention (`<registry>-quay-<service>`), so they are not inputs.
"""

from __future__ import annotations

import logging
from typing import assert_never

from ...core.config import DatabaseCredentials, OperatorSettings
from ...core.contracts import ComponentKind, RegistryDescriptor
from ...core.fieldgroups import (
    DatabaseFieldGroup,
    DistributedStorageArgs,
    DistributedStorageDefinition,
    DistributedStorageFieldGroup,
    FieldGroup,
    HostSettingsFieldGroup,
    RedisEndpoint,
    RedisFieldGroup,
    SecurityScannerFieldGroup,
)

logger = logging.getLogger(__name__)

REDIS_PORT = 6379
STORAGE_LOCATION = "local_us"
STORAGE_DRIVER = "RadosGWStorage"
STORAGE_PATH = "/datastorage/registry"
STORAGE_PORT = 443
SCANNER_NAMESPACE_WHITELIST = ("admin",)


class FieldGroupSynthesizer:
    """Build the typed settings bundle for a component kind."""

    def __init__(self, settings: OperatorSettings | None = None) -> None:
        self._settings = settings or OperatorSettings()

    def synthesize(
        self, kind: str | ComponentKind, descriptor: RegistryDescriptor
    ) -> FieldGroup | None:
        """
        Return the field group for `kind`, or None for kinds without config.

        Raises `UnknownComponentError` when `kind` is not a managed component.
        """
        component = ComponentKind.parse(kind)
        match component:
            case ComponentKind.CLAIR:
                field_group: FieldGroup | None = self._security_scanner(descriptor)
            case ComponentKind.REDIS:
                field_group = self._redis(descriptor)
            case ComponentKind.POSTGRES:
                field_group = self._database(descriptor, self._settings.postgres)
            case ComponentKind.OBJECTSTORAGE:
                field_group = self._distributed_storage(descriptor)
            case ComponentKind.ROUTE:
                field_group = self._host_settings(descriptor)
            case ComponentKind.HORIZONTALPODAUTOSCALER:
                field_group = None
            case _:
                assert_never(component)
        logger.debug("Synthesized %s field group for %s", component.value, descriptor.name)
        return field_group

    @staticmethod
    def _security_scanner(descriptor: RegistryDescriptor) -> SecurityScannerFieldGroup:
        return SecurityScannerFieldGroup(
            feature_security_scanner=True,
            security_scanner_v4_endpoint=f"http://{descriptor.name}-clair:80",
            security_scanner_v4_namespace_whitelist=list(SCANNER_NAMESPACE_WHITELIST),
        )

    @staticmethod
    def _redis(descriptor: RegistryDescriptor) -> RedisFieldGroup:
        host = f"{descriptor.name}-quay-redis"
        return RedisFieldGroup(
            buildlogs_redis=RedisEndpoint(host=host, port=REDIS_PORT),
            user_events_redis=RedisEndpoint(host=host, port=REDIS_PORT),
        )

    @staticmethod
    def _database(
        descriptor: RegistryDescriptor, credentials: DatabaseCredentials
    ) -> DatabaseFieldGroup:
        host = f"{descriptor.name}-quay-postgres"
        return DatabaseFieldGroup(
            db_uri=(
                f"postgresql://{credentials.user}:{credentials.password}"
                f"@{host}:{credentials.port}/{credentials.database}"
            )
        )

    @staticmethod
    def _distributed_storage(descriptor: RegistryDescriptor) -> DistributedStorageFieldGroup:
        args = DistributedStorageArgs(
            hostname=descriptor.storage_hostname,
            is_secure=True,
            port=STORAGE_PORT,
            storage_path=STORAGE_PATH,
            bucket_name=descriptor.storage_bucket_name,
            access_key=descriptor.storage_access_key,
            secret_key=descriptor.storage_secret_key,
        )
        return DistributedStorageFieldGroup(
            feature_proxy_storage=True,
            distributed_storage_preference=[STORAGE_LOCATION],
            distributed_storage_default_locations=[STORAGE_LOCATION],
            distributed_storage_config={
                STORAGE_LOCATION: DistributedStorageDefinition(name=STORAGE_DRIVER, args=args)
            },
        )

    @staticmethod
    def _host_settings(descriptor: RegistryDescriptor) -> HostSettingsFieldGroup:
        return HostSettingsFieldGroup(
            server_hostname=(
                f"{descriptor.name}-quay-{descriptor.namespace}.{descriptor.cluster_hostname}"
            ),
            external_tls_termination=False,
            preferred_url_scheme="https",
        )


def field_group_for(
    kind: str | ComponentKind,
    descriptor: RegistryDescriptor,
    settings: OperatorSettings | None = None,
) -> FieldGroup | None:
    """Functional shortcut around `FieldGroupSynthesizer.synthesize`."""
    return FieldGroupSynthesizer(settings).synthesize(kind, descriptor)


__all__ = ["FieldGroupSynthesizer", "field_group_for"]
