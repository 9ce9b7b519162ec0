import os

# Must be set before app.core.config is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ADMIN_EMAILS", '["admin@example.com"]')

import copy
import re
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from app.db.mongo import get_database
from app.main import app


# ============================================================
# In-memory stand-in for the Motor collections the services use
# ============================================================

def _matches(doc, query):
    for key, condition in query.items():
        value = doc.get(key)
        if isinstance(condition, dict):
            if "$in" in condition and value not in condition["$in"]:
                return False
            if "$regex" in condition:
                flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
                if not isinstance(value, str) or not re.search(condition["$regex"], value, flags):
                    return False
        elif value != condition:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, key, direction=1):
        self._docs.sort(key=lambda doc: doc.get(key), reverse=direction == -1)
        return self

    def skip(self, count):
        self._docs = self._docs[count:]
        return self

    def limit(self, count):
        self._docs = self._docs[:count]
        return self

    async def to_list(self, length=None):
        docs = self._docs if length is None else self._docs[:length]
        return [copy.deepcopy(doc) for doc in docs]


class FakeCollection:
    def __init__(self):
        self.docs = []

    async def find_one(self, query):
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None):
        return FakeCursor([doc for doc in self.docs if _matches(doc, query or {})])

    async def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query, update, upsert=False):
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(copy.deepcopy(update.get("$set", {})))
                return SimpleNamespace(matched_count=1, modified_count=1, upserted_id=None)

        if upsert:
            doc = {key: value for key, value in query.items() if not isinstance(value, dict)}
            doc.update(copy.deepcopy(update.get("$setOnInsert", {})))
            doc.update(copy.deepcopy(update.get("$set", {})))
            doc["_id"] = ObjectId()
            self.docs.append(doc)
            return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=doc["_id"])

        return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


# ============================================================
# Fixtures
# ============================================================

SIGNUP_BODY = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "username": "ada",
    "password": "analytical-engine",
    "email": "ada@example.com",
    "phone": "+44 20 7946 0000",
    "address": {
        "street": "12 St James's Square",
        "city": "London",
        "state": "London",
        "zip_code": "SW1Y 4JH",
        "country": "UK"
    }
}

PRODUCT_BODY = {
    "name": "Mechanical Keyboard",
    "description": "Tenkeyless, brown switches",
    "price": 89.5,
    "rating": 4.5,
    "image": "https://cdn.example.com/keyboard.png"
}


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_database] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def signup_user(client):
    def _signup(**overrides):
        body = copy.deepcopy(SIGNUP_BODY)
        body.update(overrides)
        response = client.post("/users/signup", json=body)
        assert response.status_code == 201, response.json()
        return response.json()
    return _signup


@pytest.fixture
def user_auth(signup_user):
    return signup_user()


@pytest.fixture
def admin_auth(signup_user):
    return signup_user(username="admin", email="admin@example.com")


@pytest.fixture
def make_product(client, admin_auth):
    def _make(**overrides):
        body = dict(PRODUCT_BODY, **overrides)
        response = client.post("/admin/add_product", json=body, headers={"token": admin_auth["token"]})
        assert response.status_code == 201, response.json()
        return response.json()
    return _make


@pytest.fixture
def signup_body():
    return copy.deepcopy(SIGNUP_BODY)
