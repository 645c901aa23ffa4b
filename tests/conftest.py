import copy
from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace
from typing import List

import pytest
from bson import ObjectId

from app.domains.transactions.invalidation import ViewInvalidator
from app.domains.transactions.models import Transaction
from app.domains.transactions.services import TransactionService
from app.domains.transactions.store import TransactionStore


def _matches(doc: dict, query: dict) -> bool:
    return all(doc.get(key) == value for key, value in query.items())


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    async def to_list(self, length=None):
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    """In-memory stand-in for the handful of motor collection calls the store uses."""

    def __init__(self):
        self.docs: List[dict] = []

    async def insert_one(self, document):
        doc = copy.deepcopy(document)
        doc.setdefault("_id", ObjectId())
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, query):
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query):
        return FakeCursor([copy.deepcopy(doc) for doc in self.docs if _matches(doc, query)])

    async def replace_one(self, query, replacement):
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                self.docs[i] = {"_id": doc["_id"], **copy.deepcopy(replacement)}
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query):
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class BrokenCollection:
    """Every call fails as if the server were unreachable."""

    async def _fail(self, *args, **kwargs):
        raise ConnectionError("server unreachable")

    insert_one = _fail
    find_one = _fail
    replace_one = _fail
    delete_one = _fail

    def find(self, query):
        return SimpleNamespace(to_list=self._fail)


def make_transaction(amount, category="food", date=None, tx_id=None, user_id="user-1",
                     description="Test purchase") -> Transaction:
    return Transaction(
        id=tx_id or str(ObjectId()),
        user_id=user_id,
        amount=Decimal(str(amount)),
        category=category,
        description=description,
        date=date or datetime(2025, 1, 15),
    )


@pytest.fixture
def make_tx():
    """Factory for Transaction instances with sensible defaults"""
    return make_transaction


@pytest.fixture
def collection() -> FakeCollection:
    return FakeCollection()


@pytest.fixture
def store(collection) -> TransactionStore:
    return TransactionStore(collection, timeout_seconds=1.0)


@pytest.fixture
def invalidator() -> ViewInvalidator:
    return ViewInvalidator()


@pytest.fixture
def service(store, invalidator) -> TransactionService:
    return TransactionService(store, invalidator)


@pytest.fixture
def broken_service(invalidator) -> TransactionService:
    return TransactionService(TransactionStore(BrokenCollection(), timeout_seconds=1.0), invalidator)


@pytest.fixture
def valid_payload() -> dict:
    return {
        "description": "Weekly groceries",
        "amount": "42.50",
        "category": "groceries",
        "date": "2025-01-15T10:30:00",
    }


@pytest.fixture
def sample_transactions() -> List[Transaction]:
    return [
        make_transaction(10, "food", datetime(2025, 1, 1), tx_id="a"),
        make_transaction(5, "food", datetime(2025, 1, 2), tx_id="b"),
        make_transaction(20, "transport", datetime(2025, 1, 3), tx_id="c"),
    ]
