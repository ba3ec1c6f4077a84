"""
Render component field groups into named YAML overlays.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import yaml

from ...core.config import OperatorSettings
from ...core.contracts import (
    ComponentKind,
    MalformedUserValueError,
    RegistryDescriptor,
    SerializationError,
)
from ...core.fieldgroups import FieldGroup, HostSettingsFieldGroup
from ..synthesis.field_groups import FieldGroupSynthesizer

logger = logging.getLogger(__name__)

SERVER_HOSTNAME_KEY = "SERVER_HOSTNAME"


def encode(document: Any) -> bytes:
    """Dump a plain document to YAML bytes, failing loudly on encoder errors."""
    try:
        return yaml.safe_dump(document, default_flow_style=False, sort_keys=True).encode("utf-8")
    except yaml.YAMLError as exc:
        raise SerializationError(f"failed to encode {type(document).__name__}") from exc


def encode_field_group(field_group: FieldGroup) -> bytes:
    return encode(field_group.model_dump(mode="json", by_alias=True, exclude_none=True))


class ConfigOverlayRenderer:
    """Turn a component kind into its `<kind>.config.yaml` overlay."""

    def __init__(
        self,
        settings: OperatorSettings | None = None,
        *,
        synthesizer: FieldGroupSynthesizer | None = None,
    ) -> None:
        self._synthesizer = synthesizer or FieldGroupSynthesizer(settings)

    def render_component(
        self,
        kind: str | ComponentKind,
        descriptor: RegistryDescriptor,
        base_config: Mapping[str, Any],
    ) -> dict[str, bytes]:
        component = ComponentKind.parse(kind)
        field_group = self._synthesizer.synthesize(component, descriptor)
        if field_group is None:
            logger.debug("Component %s has no configuration overlay", component.value)
            return {}

        # SERVER_HOSTNAME only ever overrides the route's host settings.
        if component is ComponentKind.ROUTE and SERVER_HOSTNAME_KEY in base_config:
            assert isinstance(field_group, HostSettingsFieldGroup)
            hostname = base_config[SERVER_HOSTNAME_KEY]
            if not isinstance(hostname, str):
                raise MalformedUserValueError(SERVER_HOSTNAME_KEY, hostname)
            if not hostname:
                raise MalformedUserValueError(SERVER_HOSTNAME_KEY, hostname, "must not be empty")
            logger.info("Using configured %s %s", SERVER_HOSTNAME_KEY, hostname)
            field_group = field_group.model_copy(update={"server_hostname": hostname})

        return {component.config_filename: encode_field_group(field_group)}

    def render_components(
        self,
        kinds: list[str | ComponentKind],
        descriptor: RegistryDescriptor,
        base_config: Mapping[str, Any],
    ) -> dict[str, bytes]:
        """Merge the overlays of several components into one mapping."""
        overlay: dict[str, bytes] = {}
        for kind in kinds:
            overlay.update(self.render_component(kind, descriptor, base_config))
        return overlay

    def route_hostname(
        self, descriptor: RegistryDescriptor, base_config: Mapping[str, Any]
    ) -> str:
        """Decode the rendered route overlay and return its effective hostname."""
        rendered = self.render_component(ComponentKind.ROUTE, descriptor, base_config)
        document = yaml.safe_load(rendered[ComponentKind.ROUTE.config_filename])
        return HostSettingsFieldGroup.model_validate(document).server_hostname


__all__ = ["ConfigOverlayRenderer", "encode", "encode_field_group"]
