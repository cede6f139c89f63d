"""Pytest configuration and shared fixtures for the TextDiff Analyzer tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api import create_app
from domain.models import TextSource
from stores.groups import GroupStore
from stores.text_sets import TextSetStore


@pytest.fixture
def text_sets() -> TextSetStore:
    """Return an empty text set store."""
    return TextSetStore()


@pytest.fixture
def populated_text_sets() -> TextSetStore:
    """Return a store holding three text sets A, B, C in that order."""
    store = TextSetStore()
    store.add("A", "the cat sat")
    store.add("B", "the dog sat")
    store.add("C", "a cat sat down", TextSource.TRANSCRIBED)
    return store


@pytest.fixture
def group_store() -> GroupStore:
    """Return a fresh group store with its default group."""
    return GroupStore()


@pytest.fixture
def populated_group_store() -> GroupStore:
    """Return a store with two groups; the first has two selected text sets."""
    store = GroupStore()
    first = store.active_group
    a = first.sets.add("A", "the cat sat")
    b = first.sets.add("B", "the dog sat")
    first.sets.select(a.id)
    first.sets.select(b.id)

    second = store.add_group()
    second.sets.add("Call 1", "hello there, world", TextSource.TRANSCRIBED)
    store.set_active(first.id)
    return store


@pytest.fixture
def client() -> TestClient:
    """Return a test client for an in-memory app."""
    return TestClient(create_app(store=GroupStore()))
