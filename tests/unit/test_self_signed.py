"""Tests for self-signed TLS issuance."""

from __future__ import annotations

import pytest
from cryptography import x509
from cryptography.x509.oid import NameOID

from quayconfig.core.contracts import RegistryDescriptor
from quayconfig.modules.tls.self_signed import custom_tls_for, generate_self_signed_cert_key


def _load(cert_pem: bytes) -> x509.Certificate:
    return x509.load_pem_x509_certificate(cert_pem)


def test_certificate_subject_matches_route_hostname(descriptor: RegistryDescriptor) -> None:
    cert_pem, key_pem = custom_tls_for(descriptor, {})

    certificate = _load(cert_pem)
    common_name = certificate.subject.get_attributes_for_oid(NameOID.COMMON_NAME)[0].value
    assert common_name == "myquay-quay-ns1.apps.example.com"
    assert certificate.issuer == certificate.subject
    san = certificate.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    assert san.get_values_for_type(x509.DNSName) == ["myquay-quay-ns1.apps.example.com"]
    assert san.get_values_for_type(x509.IPAddress) == []
    assert b"PRIVATE KEY" in key_pem


def test_certificate_uses_server_hostname_override(descriptor: RegistryDescriptor) -> None:
    cert_pem, _ = custom_tls_for(descriptor, {"SERVER_HOSTNAME": "registry.example.org"})

    san = _load(cert_pem).extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    assert san.get_values_for_type(x509.DNSName) == ["registry.example.org"]


def test_certificate_never_carries_ip_addresses() -> None:
    cert_pem, _ = generate_self_signed_cert_key("quay.local")

    san = _load(cert_pem).extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    assert all(isinstance(value, x509.DNSName) for value in san)
    assert len(san) == 1


def test_hostname_is_required() -> None:
    with pytest.raises(ValueError):
        generate_self_signed_cert_key("")


def test_long_hostname_keeps_full_san_and_short_common_name() -> None:
    descriptor = RegistryDescriptor(
        name="enterprise-registry",
        namespace="platform-registry-prod",
        annotations={"quay-cluster-hostname": "apps.ocp4-cluster01.corp.example.com"},
    )
    hostname = (
        "enterprise-registry-quay-platform-registry-prod.apps.ocp4-cluster01.corp.example.com"
    )
    assert len(hostname) > 64

    cert_pem, _ = custom_tls_for(descriptor, {})

    certificate = _load(cert_pem)
    san = certificate.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    assert san.get_values_for_type(x509.DNSName) == [hostname]
    common_name = certificate.subject.get_attributes_for_oid(NameOID.COMMON_NAME)[0].value
    assert common_name == "enterprise-registry-quay-platform-registry-prod"
    assert len(common_name) <= 64
