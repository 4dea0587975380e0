"""Unit tests for InMemorySessionStorage."""

import pytest

from virgin_initiatives.infrastructure.session.in_memory_session_storage import (
    InMemorySessionStorage,
)


def test_get_missing_key_is_none():
    assert InMemorySessionStorage().get_item("user") is None


def test_set_get_remove():
    storage = InMemorySessionStorage()

    storage.set_item("user", '{"email": "jane@virgin.com"}')
    assert storage.get_item("user") == '{"email": "jane@virgin.com"}'
    assert len(storage) == 1

    storage.remove_item("user")
    assert storage.get_item("user") is None


def test_remove_missing_key_is_noop():
    storage = InMemorySessionStorage()

    storage.remove_item("user")

    assert len(storage) == 0


def test_values_must_be_strings():
    with pytest.raises(TypeError):
        InMemorySessionStorage().set_item("user", {"email": "jane@virgin.com"})  # type: ignore[arg-type]


def test_instances_are_isolated():
    a, b = InMemorySessionStorage(), InMemorySessionStorage()

    a.set_item("user", "x")

    assert b.get_item("user") is None


def test_clear():
    storage = InMemorySessionStorage()
    storage.set_item("a", "1")
    storage.set_item("b", "2")

    storage.clear()

    assert len(storage) == 0
