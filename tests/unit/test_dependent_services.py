"""Tests for the Clair dependent service config."""

from __future__ import annotations

import pytest
import yaml

from quayconfig.core.config import DatabaseCredentials, OperatorSettings
from quayconfig.core.contracts import RegistryDescriptor, UnknownComponentError
from quayconfig.modules.render.dependent_services import (
    DependentServiceConfigBuilder,
    clair_config_for,
)

EXPECTED_CONNSTRING = (
    "host=myquay-clair-postgres port=5432 dbname=clair user=postgres "
    "password=postgres sslmode=disable"
)


def test_clair_config_contents(descriptor: RegistryDescriptor) -> None:
    name, content = DependentServiceConfigBuilder().build("clair", descriptor)

    assert name == "config.yaml"
    config = yaml.safe_load(content)
    assert config["http_listen_addr"] == ":8080"
    assert config["log_level"] == "debug"
    assert config["indexer"] == {
        "connstring": EXPECTED_CONNSTRING,
        "scanlock_retry": 10,
        "layer_scan_concurrency": 5,
        "migrations": True,
    }
    assert config["matcher"] == {
        "connstring": EXPECTED_CONNSTRING,
        "max_conn_pool": 100,
        "migrations": True,
    }
    notifier = config["notifier"]
    assert notifier["connstring"] == EXPECTED_CONNSTRING
    assert notifier["migrations"] is True
    assert notifier["delivery_interval"] == "1m"
    assert notifier["poll_interval"] == "5m"
    assert notifier["webhook"] == {
        "target": "http://myquay-quay-app/secscan/notification",
        "callback": "http://myquay-clair/notifier/api/v1/notifications",
    }
    assert config["metrics"] == {"name": "prometheus"}


def test_clair_config_is_a_pure_function_of_the_descriptor() -> None:
    first = clair_config_for(RegistryDescriptor(name="a"))
    again = clair_config_for(RegistryDescriptor(name="a", namespace="elsewhere"))
    other = clair_config_for(RegistryDescriptor(name="b"))

    assert first == again
    assert first != other


def test_clair_credentials_are_injectable(descriptor: RegistryDescriptor) -> None:
    settings = OperatorSettings(
        clair_postgres=DatabaseCredentials(user="clair", password="pw", database="clairdb"),
        clair_log_level="info",
    )

    config = yaml.safe_load(clair_config_for(descriptor, settings))

    assert config["log_level"] == "info"
    assert config["indexer"]["connstring"] == (
        "host=myquay-clair-postgres port=5432 dbname=clairdb user=clair "
        "password=pw sslmode=disable"
    )


@pytest.mark.parametrize(
    "kind", ["redis", "postgres", "objectstorage", "route", "horizontalpodautoscaler"]
)
def test_other_components_have_no_dependent_config(
    kind: str, descriptor: RegistryDescriptor
) -> None:
    assert DependentServiceConfigBuilder().build(kind, descriptor) is None


def test_unknown_kind_raises(descriptor: RegistryDescriptor) -> None:
    with pytest.raises(UnknownComponentError):
        DependentServiceConfigBuilder().build("bogus", descriptor)
