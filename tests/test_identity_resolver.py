"""Tests for notifiable key generation and lookup."""

from __future__ import annotations

import pytest

from notifyhub.application.use_cases.notifications import IdentityResolver, join_key, split_key
from notifyhub.domain.exceptions import NotFoundError
from notifyhub.infrastructure.discovery import NotifiableDiscovery

from conftest import AccountModel, TeamModel


@pytest.fixture()
def resolver(discovery) -> IdentityResolver:
    return IdentityResolver(discovery)


@pytest.mark.parametrize(
    ("values", "expected"),
    [
        ((42,), "42"),
        (("acme", "ops"), "acme-ops"),
        (("a-b", "c"), "a\\-b-c"),
        (("a", "b-c"), "a-b\\-c"),
        (("back\\slash",), "back\\\\slash"),
        (("",), ""),
    ],
)
def test_join_key_escapes_separator_and_backslash(values, expected):
    assert join_key(values) == expected


@pytest.mark.parametrize(
    "values",
    [["42"], ["acme", "ops"], ["a-b", "c"], ["a", "b-c"], ["x\\", "-"], ["", ""]],
)
def test_split_key_recovers_joined_values(values):
    assert split_key(join_key(values)) == values


def test_distinct_tuples_never_share_a_key():
    assert join_key(("a-b", "c")) != join_key(("a", "b-c"))


def test_resolve_key_uses_registered_identifiers(resolver):
    account = AccountModel(id=42, email="user@example.com")
    team = TeamModel(organization="acme", slug="on-call")

    assert resolver.resolve_key(account) == "42"
    assert resolver.resolve_key(team) == "acme-on\\-call"


def test_resolve_key_is_deterministic(resolver):
    first = AccountModel(id=7, email="a@example.com")
    second = AccountModel(id=7, email="b@example.com")

    assert resolver.resolve_key(first) == resolver.resolve_key(second)


def test_identity_of_returns_key_and_class_path(resolver):
    key, class_name = resolver.identity_of(AccountModel(id=3, email="x@example.com"))

    assert key == "3"
    assert class_name == f"{AccountModel.__module__}:AccountModel"


def test_name_of_returns_none_for_unregistered_types(resolver):
    assert resolver.name_of(AccountModel(id=1, email="x@example.com")) == "user"
    assert resolver.name_of(object()) is None


def test_name_of_falls_back_to_base_class():
    class Person:
        def __init__(self, id):
            self.id = id

    class Employee(Person):
        pass

    discovery = NotifiableDiscovery()
    discovery.register(Person, name="person", identifiers=("id",))
    resolver = IdentityResolver(discovery)

    assert resolver.name_of(Employee(5)) == "person"
    assert resolver.resolve_key(Employee(5)) == "5"


def test_unregistered_notifiable_raises_not_found(resolver):
    with pytest.raises(NotFoundError):
        resolver.resolve_key(object())


def test_describe_unknown_name_raises_not_found(resolver):
    assert resolver.describe("team").identifiers == ("organization", "slug")
    with pytest.raises(NotFoundError):
        resolver.describe("ghost")


def test_descriptor_for_unknown_class_raises_not_found(resolver):
    with pytest.raises(NotFoundError):
        resolver.descriptor_for_class("missing.module:Missing")
