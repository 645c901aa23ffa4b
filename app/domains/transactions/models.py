# app/domains/transactions/models.py

from datetime import datetime, timezone
from decimal import Decimal, DecimalException
from enum import Enum
from typing import Dict, List, Optional

from bson.decimal128 import Decimal128
from pydantic import BaseModel, Field, field_serializer, field_validator

MIN_TRANSACTION_DATE = datetime(1900, 1, 1)


class Category(str, Enum):
    GROCERIES = "groceries"
    TRANSPORT = "transport"
    ENTERTAINMENT = "entertainment"
    FOOD = "food"
    HEALTH = "health"
    SHOPPING = "shopping"
    UTILITIES = "utilities"
    OTHER = "other"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS = {
    Category.GROCERIES: "Groceries",
    Category.TRANSPORT: "Transport",
    Category.ENTERTAINMENT: "Entertainment",
    Category.FOOD: "Food & Dining",
    Category.HEALTH: "Health",
    Category.SHOPPING: "Shopping",
    Category.UTILITIES: "Utilities",
    Category.OTHER: "Other",
}


def category_label(code: str) -> str:
    """Display label for a category code; unknown codes are shown as-is."""
    try:
        return Category(code).label
    except ValueError:
        return code


class Transaction(BaseModel):
    """A stored expense as read back from the store.

    `category` stays a plain string so records written with codes that are
    no longer in `Category` can still be listed and summarized.
    """
    id: str
    user_id: str
    amount: Decimal
    category: str
    description: str
    date: datetime

    @property
    def category_label(self) -> str:
        return category_label(self.category)

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, amount: Decimal) -> float:
        return float(amount)


class TransactionInput(BaseModel):
    """Mutable fields of a transaction, validated before any store write."""
    description: str = Field(min_length=2, max_length=100)
    amount: Decimal = Field(gt=0)
    category: str = Field(min_length=1)
    date: datetime

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Description must be at least 2 characters.")
        return value

    @field_validator("category")
    @classmethod
    def known_category(cls, value: str) -> str:
        try:
            return Category(value).value
        except ValueError:
            raise ValueError("Please select a category.")

    @field_validator("amount")
    @classmethod
    def storable_amount(cls, value: Decimal) -> Decimal:
        # Must fit a BSON Decimal128 exactly: 34 significant digits, bounded exponent
        try:
            Decimal128(value)
        except DecimalException:
            raise ValueError("Amount has too many digits or is out of range.")
        return value

    @field_validator("date")
    @classmethod
    def date_in_range(cls, value: datetime) -> datetime:
        naive = value.astimezone(timezone.utc).replace(tzinfo=None) if value.tzinfo else value
        if naive > datetime.now(timezone.utc).replace(tzinfo=None):
            raise ValueError("Date cannot be in the future.")
        if naive < MIN_TRANSACTION_DATE:
            raise ValueError("Date cannot be before 1900-01-01.")
        return naive


class CategoryTotal(BaseModel):
    category: str
    label: str
    total: Decimal

    @field_serializer("total", when_used="json")
    def serialize_total(self, total: Decimal) -> float:
        return float(total)


class DashboardSummary(BaseModel):
    total_expenses: Decimal = Decimal("0")
    transaction_count: int = 0
    category_totals: List[CategoryTotal] = []
    recent_transactions: List[Transaction] = []

    @field_serializer("total_expenses", when_used="json")
    def serialize_total(self, total: Decimal) -> float:
        return float(total)


class TransactionPage(BaseModel):
    items: List[Transaction] = []
    page: int = 0
    page_size: int
    total_items: int = 0
    total_pages: int = 0
    has_previous: bool = False
    has_next: bool = False


class ActionResult(BaseModel):
    """Outcome of a mutation, returned instead of raising."""
    success: bool
    transaction_id: Optional[str] = None
    error: Optional[str] = None
    not_found: bool = False
    field_errors: Dict[str, str] = {}
    stale_views: List[str] = []

    @classmethod
    def ok(cls, transaction_id: str, stale_views: List[str]) -> "ActionResult":
        return cls(success=True, transaction_id=transaction_id, stale_views=stale_views)

    @classmethod
    def failed(cls, error: str, **kwargs) -> "ActionResult":
        return cls(success=False, error=error, **kwargs)
