import pytest
from fastapi.testclient import TestClient

from song_queue_service.config import SongQueueConfig
from song_queue_service.main import create_app
from song_queue_service.queue_store import SongQueueStore


@pytest.fixture()
def store():
    return SongQueueStore()


@pytest.fixture()
def config():
    return SongQueueConfig()


@pytest.fixture()
def app(config, store):
    return create_app(config, store)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
