"""
quayconfig - registry configuration synthesis

Builds the backing-service config overlays, dependent service configs and
managed secret keys for a container registry deployment.
"""

__version__ = "0.1.0"

from quayconfig.core import (
    ComponentKind,
    RegistryDescriptor,
    SecretKeySnapshot,
    UnknownComponentError,
    base_config,
)
from quayconfig.modules import (
    ConfigOverlayRenderer,
    DependentServiceConfigBuilder,
    FieldGroupSynthesizer,
    SecretKeyProvisioner,
    custom_tls_for,
)
from quayconfig.pipeline import SynthesisPipeline, SynthesisResult

__all__ = [
    "ComponentKind",
    "ConfigOverlayRenderer",
    "DependentServiceConfigBuilder",
    "FieldGroupSynthesizer",
    "RegistryDescriptor",
    "SecretKeyProvisioner",
    "SecretKeySnapshot",
    "SynthesisPipeline",
    "SynthesisResult",
    "UnknownComponentError",
    "base_config",
    "custom_tls_for",
]
