"""Dashboard Stats — pure counts for the admin dashboard header.

Invariants:
    - Deactivated users are excluded from total_users
    - Never raises: empty inputs give zero counts
"""

from typing import Iterable

from trialengage.core.domain_types import UserStatus


def compute_dashboard_stats(
    user_statuses: Iterable[str], news_count: int,
) -> dict:
    """Compute header stats from user statuses and news count. Pure, no IO."""
    statuses = [s for s in user_statuses if s != UserStatus.DEACTIVATED.value]
    return {
        "total_users": len(statuses),
        "pending_approvals": sum(1 for s in statuses if s == UserStatus.PENDING.value),
        "active_users": sum(1 for s in statuses if s == UserStatus.APPROVED.value),
        "news_items": news_count,
    }
