"""Shared fixtures: in-memory collections, a recording notifier and API clients."""
import pytest
from fastapi.testclient import TestClient

from chat_api.app.core.store import Store
from chat_api.app.main import create_app

from fakes import InMemoryCollection, RecordingNotifier


@pytest.fixture
def store() -> Store:
    return Store(users=InMemoryCollection("user"), messages=InMemoryCollection("message"))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def client(store, notifier):
    with TestClient(create_app(store=store, notifier=notifier)) as test_client:
        yield test_client


@pytest.fixture
def client_for(notifier):
    """Build a client over a custom store, e.g. one with a broken collection."""

    def build(custom_store: Store) -> TestClient:
        return TestClient(create_app(store=custom_store, notifier=notifier))

    return build
