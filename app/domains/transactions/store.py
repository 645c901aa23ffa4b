import asyncio
import logging
from typing import List, Optional

from bson import ObjectId
from bson.decimal128 import Decimal128
from pydantic import ValidationError

from app.domains.transactions.models import Transaction, TransactionInput

logger = logging.getLogger(__name__)


class StoreUnavailableError(Exception):
    """Raised when the document store could not complete an operation."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Store operation '{operation}' failed: {cause}")


def to_document(user_id: str, fields: TransactionInput) -> dict:
    return {
        "user_id": user_id,
        "amount": Decimal128(fields.amount),
        "category": fields.category,
        "description": fields.description,
        "date": fields.date,
    }


def from_document(doc: dict) -> Transaction:
    amount = doc["amount"]
    if isinstance(amount, Decimal128):
        amount = amount.to_decimal()
    return Transaction(
        id=str(doc["_id"]),
        user_id=doc["user_id"],
        amount=amount,
        category=doc["category"],
        description=doc["description"],
        date=doc["date"],
    )


def parse_document(doc: dict) -> Optional[Transaction]:
    """Like from_document, but logs and returns None for a document missing fields or holding bad values."""
    try:
        return from_document(doc)
    except (KeyError, TypeError, ValidationError) as e:
        logger.warning(f"Skipping malformed transaction document {doc.get('_id')}: {e}")
        return None


def _object_id(transaction_id: str) -> Optional[ObjectId]:
    if not ObjectId.is_valid(transaction_id):
        return None
    return ObjectId(transaction_id)


class TransactionStore:
    """CRUD access to one collection of transaction documents.

    Every query filters on `user_id`, so a record owned by someone else
    behaves exactly like a missing one. No business rules are checked here.
    """

    def __init__(self, collection, timeout_seconds: float = 5.0):
        self.collection = collection
        self.timeout_seconds = timeout_seconds

    async def _call(self, operation: str, awaitable):
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_seconds)
        except Exception as e:
            logger.error(f"Transaction store '{operation}' failed: {e}")
            raise StoreUnavailableError(operation, e) from e

    async def create(self, user_id: str, fields: TransactionInput) -> str:
        result = await self._call("create", self.collection.insert_one(to_document(user_id, fields)))
        logger.info(f"Inserted transaction with ID: {result.inserted_id}")
        return str(result.inserted_id)

    async def read(self, user_id: str, transaction_id: str) -> Optional[Transaction]:
        oid = _object_id(transaction_id)
        if oid is None:
            return None
        doc = await self._call("read", self.collection.find_one({"_id": oid, "user_id": user_id}))
        if not doc:
            return None
        transaction = parse_document(doc)
        if transaction is None:
            raise StoreUnavailableError("read", ValueError(f"malformed document {transaction_id}"))
        return transaction

    async def list(self, user_id: str) -> List[Transaction]:
        cursor = self.collection.find({"user_id": user_id})
        docs = await self._call("list", cursor.to_list(length=None))
        transactions = (parse_document(doc) for doc in docs)
        return [tx for tx in transactions if tx is not None]

    async def update(self, user_id: str, transaction_id: str, fields: TransactionInput) -> bool:
        oid = _object_id(transaction_id)
        if oid is None:
            return False
        document = to_document(user_id, fields)
        result = await self._call(
            "update",
            self.collection.replace_one({"_id": oid, "user_id": user_id}, document),
        )
        return result.matched_count > 0

    async def delete(self, user_id: str, transaction_id: str) -> bool:
        oid = _object_id(transaction_id)
        if oid is None:
            return False
        result = await self._call("delete", self.collection.delete_one({"_id": oid, "user_id": user_id}))
        return result.deleted_count > 0
