"""
Secondary configuration for components that run their own services.

Clair needs a full config of its own on top of the registry overlay. The
document is a fixed template parameterised by the registry name and the
Clair database credentials.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from ...core.config import DatabaseCredentials, OperatorSettings
from ...core.contracts import ComponentKind, RegistryDescriptor
from .overlay_renderer import encode

logger = logging.getLogger(__name__)

CLAIR_CONFIG_FILENAME = "config.yaml"


class _ClairSection(BaseModel):
    model_config = ConfigDict(frozen=True)


class ClairIndexer(_ClairSection):
    connstring: str
    scanlock_retry: int = Field(default=10)
    layer_scan_concurrency: int = Field(default=5)
    migrations: bool = Field(default=True)


class ClairMatcher(_ClairSection):
    connstring: str
    max_conn_pool: int = Field(default=100)
    migrations: bool = Field(default=True)


class ClairWebhook(_ClairSection):
    target: str
    callback: str


class ClairNotifier(_ClairSection):
    connstring: str
    migrations: bool = Field(default=True)
    delivery_interval: str = Field(default="1m")
    poll_interval: str = Field(default="5m")
    webhook: ClairWebhook


class ClairMetrics(_ClairSection):
    name: str = Field(default="prometheus")


class ClairConfig(_ClairSection):
    http_listen_addr: str = Field(default=":8080")
    log_level: str = Field(default="debug")
    indexer: ClairIndexer
    matcher: ClairMatcher
    notifier: ClairNotifier
    metrics: ClairMetrics = Field(default_factory=ClairMetrics)


def clair_connection_string(
    descriptor: RegistryDescriptor, credentials: DatabaseCredentials
) -> str:
    return (
        f"host={descriptor.name}-clair-postgres port={credentials.port} "
        f"dbname={credentials.database} user={credentials.user} "
        f"password={credentials.password} sslmode=disable"
    )


def clair_config_for(
    descriptor: RegistryDescriptor, settings: OperatorSettings | None = None
) -> bytes:
    """Return a Clair v4 config wired to the registry's in-cluster services."""
    settings = settings or OperatorSettings()
    connstring = clair_connection_string(descriptor, settings.clair_postgres)
    config = ClairConfig(
        log_level=settings.clair_log_level,
        indexer=ClairIndexer(connstring=connstring),
        matcher=ClairMatcher(connstring=connstring),
        notifier=ClairNotifier(
            connstring=connstring,
            webhook=ClairWebhook(
                target=f"http://{descriptor.name}-quay-app/secscan/notification",
                callback=f"http://{descriptor.name}-clair/notifier/api/v1/notifications",
            ),
        ),
    )
    return encode(config.model_dump(mode="json"))


class DependentServiceConfigBuilder:
    """Produce the extra config artifact a component needs, if any."""

    def __init__(self, settings: OperatorSettings | None = None) -> None:
        self._settings = settings or OperatorSettings()

    def build(
        self, kind: str | ComponentKind, descriptor: RegistryDescriptor
    ) -> tuple[str, bytes] | None:
        component = ComponentKind.parse(kind)
        if component is ComponentKind.CLAIR:
            logger.info("Rendering Clair config for %s", descriptor.name)
            return CLAIR_CONFIG_FILENAME, clair_config_for(descriptor, self._settings)
        return None


__all__ = [
    "ClairConfig",
    "DependentServiceConfigBuilder",
    "clair_config_for",
    "clair_connection_string",
]
