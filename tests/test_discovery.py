"""Tests for the notifiable registry."""

from __future__ import annotations

import json

import pytest

from notifyhub.domain.exceptions import ConfigurationError
from notifyhub.infrastructure.discovery import NotifiableDiscovery

from conftest import AccountModel, TeamModel


def _write_config(tmp_path, payload) -> str:
    path = tmp_path / "notifiables.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_decorator_registers_class():
    discovery = NotifiableDiscovery()

    @discovery.notifiable("customer", identifiers=("code",))
    class Customer:
        code = "C-1"

    descriptor = discovery.get_notifiables()["customer"]
    assert descriptor.cls is Customer
    assert descriptor.identifiers == ("code",)
    assert discovery.get_notifiable_name(Customer()) == "customer"


def test_mapped_class_defaults_to_primary_key_identifiers():
    discovery = NotifiableDiscovery()

    assert discovery.register(AccountModel, name="user").identifiers == ("id",)
    assert discovery.register(TeamModel, name="team").identifiers == ("organization", "slug")


def test_plain_class_without_identifiers_is_rejected():
    discovery = NotifiableDiscovery()

    with pytest.raises(ConfigurationError):
        discovery.register(type("Anonymous", (), {}), name="anonymous")


def test_name_bound_to_another_class_is_rejected():
    discovery = NotifiableDiscovery()
    discovery.register(AccountModel, name="user")

    discovery.register(AccountModel, name="user", identifiers=("email",))
    with pytest.raises(ConfigurationError):
        discovery.register(TeamModel, name="user")


def test_blank_name_is_rejected():
    with pytest.raises(ConfigurationError):
        NotifiableDiscovery().register(AccountModel, name="  ")


def test_registry_is_read_only():
    discovery = NotifiableDiscovery()
    discovery.register(AccountModel, name="user")

    with pytest.raises(TypeError):
        discovery.get_notifiables()["other"] = None  # type: ignore[index]


def test_load_file_registers_declared_classes(tmp_path):
    path = _write_config(
        tmp_path,
        {
            "notifiables": {
                "user": {"class": "conftest:AccountModel"},
                "team": {"class": "conftest.TeamModel", "identifiers": ["slug", "organization"]},
            }
        },
    )
    discovery = NotifiableDiscovery(path)

    notifiables = discovery.get_notifiables()

    assert notifiables["user"].cls is AccountModel
    assert notifiables["user"].identifiers == ("id",)
    assert notifiables["team"].identifiers == ("slug", "organization")
    assert discovery.find_by_class_path("conftest:TeamModel").name == "team"


@pytest.mark.parametrize(
    "payload",
    [
        {"users": {}},
        {"notifiables": {"user": {}}},
        {"notifiables": {"user": {"class": "conftest:AccountModel", "identifiers": "id"}}},
        {"notifiables": {"user": {"class": "conftest:Missing"}}},
        {"notifiables": {"user": {"class": "not_a_module_anywhere:Thing"}}},
        {"notifiables": {"user": {"class": "Thing"}}},
    ],
)
def test_invalid_file_raises_configuration_error(tmp_path, payload):
    discovery = NotifiableDiscovery(_write_config(tmp_path, payload))

    with pytest.raises(ConfigurationError):
        discovery.get_notifiables()


def test_missing_file_raises_on_every_access(tmp_path):
    discovery = NotifiableDiscovery(tmp_path / "missing.json")

    with pytest.raises(ConfigurationError):
        discovery.get_notifiables()
    with pytest.raises(ConfigurationError):
        discovery.get_notifiables()


def test_malformed_json_raises_configuration_error(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        NotifiableDiscovery().load_file(path)


def test_configure_points_registry_at_new_file(tmp_path):
    discovery = NotifiableDiscovery()
    assert dict(discovery.get_notifiables()) == {}

    discovery.configure(
        _write_config(tmp_path, {"notifiables": {"user": {"class": "conftest:AccountModel"}}})
    )

    assert list(discovery.get_notifiables()) == ["user"]
