"""Tests for compute_dashboard_stats — pure counts, no IO."""

from trialengage.core.dashboard_stats import compute_dashboard_stats


def test_empty_inputs_give_zeros():
    assert compute_dashboard_stats([], 0) == {
        "total_users": 0, "pending_approvals": 0, "active_users": 0, "news_items": 0,
    }


def test_counts_by_status_and_excludes_deactivated():
    stats = compute_dashboard_stats(
        ["pending", "approved", "approved", "rejected", "deactivated"], 4,
    )
    assert stats["total_users"] == 4
    assert stats["pending_approvals"] == 1
    assert stats["active_users"] == 2
    assert stats["news_items"] == 4
