"""Usage Analytics — folds mobile usage events into a user's analytics record.

Invariants:
    - Returns a new dict; the input record is never mutated
    - Missing keys are initialised (older records may lack tab_views)
    - tab_view without a tab is rejected by the schema before reaching here
"""

from datetime import datetime

from trialengage.core.domain_types import AnalyticsEvent, AppTab


def empty_analytics() -> dict:
    return {
        "last_app_open": None,
        "total_app_opens": 0,
        "tab_views": {tab.value: 0 for tab in AppTab},
    }


def apply_event(
    record: dict | None,
    event: AnalyticsEvent,
    at: datetime,
    tab: AppTab | None = None,
) -> dict:
    """Return the analytics record with one event applied. Pure, no IO."""
    base = empty_analytics()
    if record:
        base.update({k: v for k, v in record.items() if k != "tab_views"})
        base["tab_views"].update(record.get("tab_views") or {})

    if event == AnalyticsEvent.APP_OPEN:
        base["last_app_open"] = at.isoformat()
        base["total_app_opens"] = int(base.get("total_app_opens") or 0) + 1
    elif event == AnalyticsEvent.TAB_VIEW and tab is not None:
        views = base["tab_views"]
        views[tab.value] = int(views.get(tab.value) or 0) + 1
    return base
