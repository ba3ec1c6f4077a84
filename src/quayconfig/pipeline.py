"""
One synthesis pass over a registry.

The pipeline strings the modules together the way the control plane's
reconcile loop calls them: resolve the managed secret keys, render every
requested component overlay and its dependent service config, then issue TLS
material for the route hostname. Persisting the result is the caller's job.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .core.config import OperatorSettings, base_config
from .core.contracts import (
    DATABASE_SECRET_KEY,
    SECRET_KEY,
    ComponentKind,
    RegistryDescriptor,
    SecretKeySnapshot,
)
from .modules.render.dependent_services import DependentServiceConfigBuilder
from .modules.render.overlay_renderer import ConfigOverlayRenderer, encode
from .modules.secrets.key_provisioner import SecretKeyProvisioner
from .modules.tls.self_signed import generate_self_signed_cert_key

logger = logging.getLogger(__name__)

BASE_CONFIG_FILENAME = "config.yaml"
ALL_COMPONENTS: tuple[ComponentKind, ...] = tuple(ComponentKind)


@dataclass(slots=True)
class SynthesisResult:
    """Artifacts produced by a single pass."""

    secret_key: str
    database_secret_key: str
    secret_keys: SecretKeySnapshot | None
    config_files: dict[str, bytes] = field(default_factory=dict)
    component_files: dict[ComponentKind, dict[str, bytes]] = field(default_factory=dict)
    tls_cert: bytes | None = None
    tls_key: bytes | None = None


class SynthesisPipeline:
    """Compose key provisioning, overlay rendering, and TLS issuance."""

    def __init__(
        self,
        settings: OperatorSettings | None = None,
        *,
        provisioner_factory: type[SecretKeyProvisioner] = SecretKeyProvisioner,
    ) -> None:
        self._settings = settings or OperatorSettings()
        self._renderer = ConfigOverlayRenderer(self._settings)
        self._dependents = DependentServiceConfigBuilder(self._settings)
        self._provisioner_factory = provisioner_factory

    def run(
        self,
        descriptor: RegistryDescriptor,
        user_config: Mapping[str, Any],
        secret_keys: SecretKeySnapshot | None = None,
        *,
        components: Iterable[str | ComponentKind] = ALL_COMPONENTS,
        issue_tls: bool = True,
    ) -> SynthesisResult:
        kinds = [ComponentKind.parse(kind) for kind in components]
        provisioner = self._provisioner_factory(descriptor)
        secret_key, database_secret_key, secret_keys = provisioner.ensure_key_pair(
            user_config, secret_keys
        )

        document: dict[str, Any] = {**base_config(), **user_config}
        document[SECRET_KEY] = secret_key
        document[DATABASE_SECRET_KEY] = database_secret_key

        result = SynthesisResult(
            secret_key=secret_key,
            database_secret_key=database_secret_key,
            secret_keys=secret_keys,
        )
        result.config_files[BASE_CONFIG_FILENAME] = encode(document)
        for kind in kinds:
            result.config_files.update(
                self._renderer.render_component(kind, descriptor, user_config)
            )
            dependent = self._dependents.build(kind, descriptor)
            if dependent is not None:
                filename, content = dependent
                result.component_files[kind] = {filename: content}

        if issue_tls and ComponentKind.ROUTE in kinds:
            hostname = self._renderer.route_hostname(descriptor, user_config)
            result.tls_cert, result.tls_key = generate_self_signed_cert_key(hostname)

        logger.info(
            "Synthesized %d config files for %s (%s)",
            len(result.config_files),
            descriptor.name,
            ", ".join(kind.value for kind in kinds) or "no components",
        )
        return result


__all__ = ["ALL_COMPONENTS", "SynthesisPipeline", "SynthesisResult"]
