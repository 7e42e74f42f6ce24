import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.container import build_services
from app.main import create_app

from tests.fakes import HAPPY_PAYLOAD, PHONETICS, SHARDS, FakeDictionary, FakeFetcher, FakeSynthesizer


@pytest.fixture
def fetcher():
    return FakeFetcher({"phonetics": PHONETICS, **SHARDS})


@pytest.fixture
def dictionary():
    return FakeDictionary({"happy": HAPPY_PAYLOAD})


@pytest.fixture
def synthesizer():
    return FakeSynthesizer()


@pytest.fixture
def services(fetcher, dictionary, synthesizer):
    return build_services(
        Settings(),
        fetcher=fetcher,
        definition_provider=dictionary,
        synthesizer=synthesizer,
    )


@pytest.fixture
def client(services):
    app = create_app(services=services)
    with TestClient(app) as test_client:
        yield test_client
