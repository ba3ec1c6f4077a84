from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from quayconfig.core.contracts import (
    CLUSTER_HOSTNAME_ANNOTATION,
    STORAGE_ACCESS_KEY_ANNOTATION,
    STORAGE_BUCKET_NAME_ANNOTATION,
    STORAGE_HOSTNAME_ANNOTATION,
    STORAGE_SECRET_KEY_ANNOTATION,
    RegistryDescriptor,
)


def _write_yaml(path: Path, content: str) -> None:
    path.write_text(textwrap.dedent(content).strip() + "\n", encoding="utf-8")


@pytest.fixture
def descriptor() -> RegistryDescriptor:
    """A registry with every infrastructure annotation populated."""

    return RegistryDescriptor(
        name="myquay",
        namespace="ns1",
        annotations={
            STORAGE_HOSTNAME_ANNOTATION: "s3.storage.example.com",
            STORAGE_BUCKET_NAME_ANNOTATION: "quay-bucket",
            STORAGE_ACCESS_KEY_ANNOTATION: "AKIA-test",
            STORAGE_SECRET_KEY_ANNOTATION: "storage-secret",
            CLUSTER_HOSTNAME_ANNOTATION: "apps.example.com",
        },
    )


@pytest.fixture
def descriptor_file(tmp_path: Path) -> Path:
    path = tmp_path / "registry.yaml"
    _write_yaml(
        path,
        f"""
        metadata:
          name: myquay
          namespace: ns1
          annotations:
            {CLUSTER_HOSTNAME_ANNOTATION}: apps.example.com
            {STORAGE_HOSTNAME_ANNOTATION}: s3.storage.example.com
            {STORAGE_BUCKET_NAME_ANNOTATION}: quay-bucket
        """,
    )
    return path


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    """Operator settings overriding both database logins."""

    path = tmp_path / "settings.yaml"
    _write_yaml(
        path,
        """
        postgres:
          user: quayadmin
          password: registry-pass
        clair_postgres:
          password: clair-pass
        clair_log_level: info
        """,
    )
    return path
