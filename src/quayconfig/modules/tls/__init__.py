"""TLS material."""

from .self_signed import custom_tls_for, generate_self_signed_cert_key

__all__ = ["custom_tls_for", "generate_self_signed_cert_key"]
