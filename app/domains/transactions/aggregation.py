from decimal import Decimal
from typing import Dict, Iterable

from app.domains.transactions.models import CategoryTotal, DashboardSummary, category_label

RECENT_TRANSACTIONS_LIMIT = 5


def summarize(transactions: Iterable, recent_limit: int = RECENT_TRANSACTIONS_LIMIT) -> DashboardSummary:
    """
    Build the dashboard summary for one user's transactions.

    Pure: the result depends only on the input values. Category totals are
    ordered by total descending and, on equal totals, by the order in which
    each category first appears. Recent transactions are the latest
    `recent_limit` by date, ties kept in input order.
    """
    transactions = list(transactions)

    total = Decimal("0")
    by_category: Dict[str, Decimal] = {}
    for tx in transactions:
        total += tx.amount
        by_category[tx.category] = by_category.get(tx.category, Decimal("0")) + tx.amount

    # sorted() is stable, also with reverse=True
    category_totals = [
        CategoryTotal(category=category, label=category_label(category), total=amount)
        for category, amount in sorted(by_category.items(), key=lambda item: item[1], reverse=True)
    ]

    recent = sorted(transactions, key=lambda tx: tx.date, reverse=True)[:recent_limit]

    return DashboardSummary(
        total_expenses=total,
        transaction_count=len(transactions),
        category_totals=category_totals,
        recent_transactions=recent,
    )
