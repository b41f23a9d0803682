"""Pytest configuration and fixtures."""
import os

# Settings are read at import time; these must be set before importing app.
os.environ.setdefault("MONGO_URL", "mongodb://localhost:27017")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from types import SimpleNamespace

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import AsyncClient, ASGITransport
from pymongo import ReturnDocument
from pymongo.errors import ServerSelectionTimeoutError

from app.main import app
from app.config import settings
from app.database import get_database


class InMemoryCursor:
    """Cursor over a snapshot of documents."""

    def __init__(self, docs):
        self.docs = docs

    async def to_list(self, length=None):
        return list(self.docs if length is None else self.docs[:length])


class InMemoryUsersCollection:
    """Dict-backed collection implementing the Motor calls the service uses."""

    def __init__(self):
        self.docs = {}

    def _match(self, filter):
        doc = self.docs.get(filter.get("_id"))
        return dict(doc) if doc else None

    async def insert_one(self, doc):
        doc = dict(doc)
        doc["_id"] = ObjectId()
        self.docs[doc["_id"]] = doc
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, filter):
        return self._match(filter)

    async def find_one_and_update(self, filter, update, return_document=ReturnDocument.BEFORE):
        before = self._match(filter)
        if before is None:
            return None
        self.docs[before["_id"]].update(update["$set"])
        if return_document == ReturnDocument.AFTER:
            return dict(self.docs[before["_id"]])
        return before

    async def find_one_and_delete(self, filter):
        doc = self._match(filter)
        if doc is not None:
            del self.docs[doc["_id"]]
        return doc

    def find(self, filter):
        return InMemoryCursor([dict(doc) for doc in self.docs.values()])


class UnreachableUsersCollection:
    """Collection whose every call fails as if the server were down."""

    def _fail(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("localhost:27017: connection refused")

    async def insert_one(self, *args, **kwargs):
        self._fail()

    async def find_one(self, *args, **kwargs):
        self._fail()

    async def find_one_and_update(self, *args, **kwargs):
        self._fail()

    async def find_one_and_delete(self, *args, **kwargs):
        self._fail()

    def find(self, *args, **kwargs):
        self._fail()


@pytest.fixture
def users_collection():
    """Empty in-memory users collection."""
    return InMemoryUsersCollection()


async def _client_for(collection):
    """Yield an HTTP client whose database dependency serves `collection`."""
    db = {settings.mongo_users_collection: collection}
    app.dependency_overrides[get_database] = lambda: db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.pop(get_database, None)


@pytest_asyncio.fixture
async def app_client(users_collection):
    """
    Create a test client backed by an in-memory users collection.

    The lifespan is not run, so no MongoDB connection is opened.
    """
    async for client in _client_for(users_collection):
        yield client


@pytest_asyncio.fixture
async def broken_app_client():
    """Create a test client whose database calls all fail."""
    async for client in _client_for(UnreachableUsersCollection()):
        yield client
