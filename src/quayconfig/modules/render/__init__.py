"""Overlay and dependent service rendering."""

from .dependent_services import DependentServiceConfigBuilder, clair_config_for
from .overlay_renderer import ConfigOverlayRenderer

__all__ = ["ConfigOverlayRenderer", "DependentServiceConfigBuilder", "clair_config_for"]
