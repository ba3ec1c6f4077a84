"""
Self-signed TLS material for the registry's externally reachable hostname.
"""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Mapping
from typing import Any

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from ...core.config import OperatorSettings
from ...core.contracts import RegistryDescriptor
from ..render.overlay_renderer import ConfigOverlayRenderer

logger = logging.getLogger(__name__)

KEY_SIZE = 2048
MAX_COMMON_NAME_LENGTH = 64
VALIDITY = dt.timedelta(days=365)


def _common_name(host: str) -> str:
    if len(host) <= MAX_COMMON_NAME_LENGTH:
        return host
    return host.split(".", 1)[0][:MAX_COMMON_NAME_LENGTH]


def generate_self_signed_cert_key(
    host: str,
    *,
    now: dt.datetime | None = None,
) -> tuple[bytes, bytes]:
    """
    Issue a self-signed certificate for `host`.

    The only subject alternative name is the DNS name `host`; no IP addresses
    are included. X.509 caps the common name at 64 characters, so longer hosts
    use their first label as the common name. Returns PEM encoded (cert, key).
    """
    if not host:
        raise ValueError("a hostname is required to issue a certificate")
    issued_at = now or dt.datetime.now(tz=dt.UTC)
    key = rsa.generate_private_key(public_exponent=65537, key_size=KEY_SIZE)
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, _common_name(host))])
    certificate = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(issued_at - dt.timedelta(minutes=5))
        .not_valid_after(issued_at + VALIDITY)
        .add_extension(x509.SubjectAlternativeName([x509.DNSName(host)]), critical=False)
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    cert_pem = certificate.public_bytes(serialization.Encoding.PEM)
    key_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )
    return cert_pem, key_pem


def custom_tls_for(
    descriptor: RegistryDescriptor,
    base_config: Mapping[str, Any],
    settings: OperatorSettings | None = None,
) -> tuple[bytes, bytes]:
    """Issue TLS material for the route hostname, honouring a SERVER_HOSTNAME override."""
    hostname = ConfigOverlayRenderer(settings).route_hostname(descriptor, base_config)
    logger.info("Issuing self-signed certificate for %s", hostname)
    return generate_self_signed_cert_key(hostname)


__all__ = ["custom_tls_for", "generate_self_signed_cert_key"]
