import logging
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from app.domains.transactions.aggregation import summarize
from app.domains.transactions.invalidation import (
    DASHBOARD_VIEW,
    TRANSACTIONS_VIEW,
    ViewInvalidator,
    transaction_view,
)
from app.domains.transactions.listing import SortDirection, SortKey, paginate
from app.domains.transactions.models import (
    ActionResult,
    DashboardSummary,
    Transaction,
    TransactionInput,
    TransactionPage,
)
from app.domains.transactions.store import StoreUnavailableError, TransactionStore

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Transaction not found."
INVALID_INPUT_MESSAGE = "Invalid transaction data."

Payload = Union[TransactionInput, dict]


def field_errors(error: ValidationError) -> Dict[str, str]:
    """Flatten a pydantic error into one message per top-level field."""
    errors = {}
    for item in error.errors():
        field = str(item["loc"][0]) if item["loc"] else "__root__"
        message = item["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, message)
    return errors


class TransactionService:
    def __init__(self, store: TransactionStore, invalidator: Optional[ViewInvalidator] = None):
        self.store = store
        self.invalidator = invalidator or ViewInvalidator()

    @staticmethod
    def _validate(payload: Payload):
        if isinstance(payload, TransactionInput):
            return payload, None
        try:
            return TransactionInput.model_validate(payload), None
        except ValidationError as e:
            return None, ActionResult.failed(INVALID_INPUT_MESSAGE, field_errors=field_errors(e))

    # Mutations

    async def add_transaction(self, user_id: str, payload: Payload) -> ActionResult:
        fields, invalid = self._validate(payload)
        if invalid:
            return invalid
        try:
            transaction_id = await self.store.create(user_id, fields)
        except StoreUnavailableError:
            return ActionResult.failed("Failed to add transaction.")

        stale = self.invalidator.invalidate(user_id, [TRANSACTIONS_VIEW, DASHBOARD_VIEW])
        return ActionResult.ok(transaction_id, stale)

    async def update_transaction(self, user_id: str, transaction_id: str, payload: Payload) -> ActionResult:
        fields, invalid = self._validate(payload)
        if invalid:
            return invalid
        try:
            updated = await self.store.update(user_id, transaction_id, fields)
        except StoreUnavailableError:
            return ActionResult.failed("Failed to update transaction.")
        if not updated:
            return ActionResult.failed(NOT_FOUND_MESSAGE, not_found=True)

        stale = self.invalidator.invalidate(
            user_id, [TRANSACTIONS_VIEW, transaction_view(transaction_id), DASHBOARD_VIEW]
        )
        return ActionResult.ok(transaction_id, stale)

    async def delete_transaction(self, user_id: str, transaction_id: str) -> ActionResult:
        try:
            deleted = await self.store.delete(user_id, transaction_id)
        except StoreUnavailableError:
            return ActionResult.failed("Failed to delete transaction.")
        if not deleted:
            return ActionResult.failed(NOT_FOUND_MESSAGE, not_found=True)

        stale = self.invalidator.invalidate(user_id, [TRANSACTIONS_VIEW, DASHBOARD_VIEW])
        # a deleted record's view never becomes current again
        self.invalidator.discard(user_id, transaction_view(transaction_id))
        return ActionResult.ok(transaction_id, stale + [transaction_view(transaction_id)])

    # Reads. Failures degrade to an empty view instead of propagating.

    async def get_transactions(self, user_id: str) -> List[Transaction]:
        try:
            return await self.store.list(user_id)
        except StoreUnavailableError as e:
            logger.error(f"Error getting transactions for {user_id}: {e}")
            return []

    async def get_transaction(self, user_id: str, transaction_id: str) -> Optional[Transaction]:
        try:
            return await self.store.read(user_id, transaction_id)
        except StoreUnavailableError as e:
            logger.error(f"Error getting transaction {transaction_id}: {e}")
            return None

    async def get_dashboard(self, user_id: str) -> DashboardSummary:
        return summarize(await self.get_transactions(user_id))

    async def list_transactions(
        self,
        user_id: str,
        sort_by: SortKey = SortKey.DATE,
        direction: SortDirection = SortDirection.DESC,
        page_size: int = 10,
        page: int = 0,
    ) -> TransactionPage:
        transactions = await self.get_transactions(user_id)
        return paginate(transactions, sort_by, direction, page_size=page_size, page=page)
