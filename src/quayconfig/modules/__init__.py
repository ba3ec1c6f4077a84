"""
Synthesis modules grouped by responsibility.
"""

from .render.dependent_services import DependentServiceConfigBuilder
from .render.overlay_renderer import ConfigOverlayRenderer
from .secrets.key_provisioner import SecretKeyProvisioner
from .synthesis.field_groups import FieldGroupSynthesizer
from .tls.self_signed import custom_tls_for, generate_self_signed_cert_key

__all__ = [
    "ConfigOverlayRenderer",
    "DependentServiceConfigBuilder",
    "FieldGroupSynthesizer",
    "SecretKeyProvisioner",
    "custom_tls_for",
    "generate_self_signed_cert_key",
]
