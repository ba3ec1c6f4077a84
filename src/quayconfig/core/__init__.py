"""
Core contracts, settings, and field group models shared by the synthesis modules.
"""

from .config import ConfigError, DatabaseCredentials, OperatorSettings, base_config, load_settings
from .contracts import (
    ComponentKind,
    MalformedUserValueError,
    RandomSourceError,
    RegistryDescriptor,
    SecretKeySnapshot,
    SerializationError,
    UnknownComponentError,
)

__all__ = [
    "ComponentKind",
    "ConfigError",
    "DatabaseCredentials",
    "MalformedUserValueError",
    "OperatorSettings",
    "RandomSourceError",
    "RegistryDescriptor",
    "SecretKeySnapshot",
    "SerializationError",
    "UnknownComponentError",
    "base_config",
    "load_settings",
]
