"""Shared fixtures for typed_records tests."""

from __future__ import annotations

import pytest

from typed_records import StructStore

HOTEL_ROOM_FIELDS = [
    ("rmnum", "Int"),
    ("telnum", "String"),
    ("bednum", "Sequence"),
    ("beds", "Map"),
    ("occupied", "Bool"),
    ("occupant", "Map"),
]


@pytest.fixture
def store(tmp_path):
    """A store rooted in a per-test directory."""
    with StructStore(tmp_path / "session") as s:
        yield s


@pytest.fixture
def hotel_store(store):
    """A store with the hotel_room type defined."""
    store.define_type("hotel_room", HOTEL_ROOM_FIELDS)
    return store
