"""Shared test fixtures."""

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from pymongo import DESCENDING

from mongo_service import get_transfer_store
from rate_gateway import get_rate_gateway
from transfer_store import TransferStore


class FakeCursor:
    def __init__(self, documents):
        self._documents = documents

    def sort(self, key, direction):
        self._documents = sorted(self._documents, key=lambda document: document[key], reverse=direction == DESCENDING)
        return self

    async def to_list(self, length=None):
        return [dict(document) for document in self._documents]


class FakeCollection:
    """In-memory stand-in for the handful of Motor collection calls the store makes."""

    def __init__(self):
        self.documents = []

    async def insert_one(self, document):
        self.documents.append(dict(document))
        return SimpleNamespace(inserted_id=document["_id"])

    def find(self, query):
        return FakeCursor([document for document in self.documents if _matches(document, query)])

    async def find_one_and_delete(self, query):
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                return self.documents.pop(index)
        return None


def _matches(document, query):
    return all(document.get(key) == value for key, value in query.items())


class StubGateway:
    def __init__(self, rate=300.0, rates=None, error=None):
        self.rate = rate
        self.rates = rates or {"USD": 1.0, "LKR": 300.0, "AUD": 1.5, "INR": 83.0}
        self.error = error
        self.pair_calls = []

    async def fetch_pair_rate(self, from_currency, to_currency):
        self.pair_calls.append((from_currency, to_currency))
        if self.error is not None:
            raise self.error
        return self.rate

    async def fetch_all_rates(self):
        if self.error is not None:
            raise self.error
        return dict(self.rates)


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def store(collection):
    return TransferStore(collection)


@pytest.fixture
def gateway():
    return StubGateway()


@pytest.fixture
def api(store, gateway):
    from main import app

    app.dependency_overrides[get_transfer_store] = lambda: store
    app.dependency_overrides[get_rate_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()
