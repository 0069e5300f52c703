"""Shared fixtures and fakes for blob-mirror tests."""

import logging
from pathlib import Path

import pytest

from blob_mirror.config import (
    CONNECTION_STRING_ENV,
    CONTAINER_ENV,
    DISCORD_WEBHOOK_ENV,
    ENVIRONMENT_ENV,
    NOTIFY_ON_ENV,
)
from blob_mirror.storage import RemoteObject, TransportError


class FakeStorage:
    """In-memory container implementing both lister and fetcher.

    Records every listing and fetch step in `events` so tests can check
    the order in which the engine pulls objects.
    """

    def __init__(self, objects, failing=(), list_error=None):
        # list of (name, content) pairs; names may repeat
        self.objects = list(objects)
        self.failing = set(failing)
        self.list_error = list_error
        self.events = []

    def list_objects(self):
        if self.list_error is not None:
            raise self.list_error
        for name, _ in self.objects:
            self.events.append(("list", name))
            yield RemoteObject(name=name)

    def fetch(self, name: str, destination: Path) -> int:
        self.events.append(("fetch", name))
        if name in self.failing:
            raise TransportError(f"connection reset while downloading '{name}'", name=name)
        content = next(c for n, c in self.objects if n == name)
        with open(destination, "xb") as f:
            f.write(content)
        return len(content)


@pytest.fixture
def fake_storage_factory():
    return FakeStorage


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in [CONNECTION_STRING_ENV, CONTAINER_ENV, DISCORD_WEBHOOK_ENV, NOTIFY_ON_ENV, ENVIRONMENT_ENV]:
        # setenv first so values loaded from .env files are removed on teardown
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)


@pytest.fixture(autouse=True)
def reset_root_handlers():
    """Drop handlers added by setup_logging so CLI tests don't accumulate them."""
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
