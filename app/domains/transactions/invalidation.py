import logging
from collections import defaultdict
from typing import Dict, Iterable, List

logger = logging.getLogger(__name__)

DASHBOARD_VIEW = "dashboard"
TRANSACTIONS_VIEW = "transactions"


def transaction_view(transaction_id: str) -> str:
    return f"transaction:{transaction_id}"


class ViewInvalidator:
    """
    Pull-based staleness signal for cached views.

    Each invalidate() bumps a per-user counter for every named view. Clients
    poll versions() and re-fetch any view whose counter moved; nothing is
    pushed to them.
    """

    def __init__(self):
        self._versions: Dict[str, Dict[str, int]] = defaultdict(dict)

    def invalidate(self, user_id: str, views: Iterable[str]) -> List[str]:
        views = list(views)
        user_versions = self._versions[user_id]
        for view in views:
            user_versions[view] = user_versions.get(view, 0) + 1
        logger.info(f"Views marked stale for user {user_id}: {', '.join(views)}")
        return views

    def discard(self, user_id: str, view: str) -> None:
        """Forget a view that can no longer be fetched, such as a deleted transaction."""
        user_versions = self._versions.get(user_id)
        if user_versions is not None:
            user_versions.pop(view, None)

    def versions(self, user_id: str) -> Dict[str, int]:
        return dict(self._versions.get(user_id, {}))
