"""Company Schemas — settings updates and the admin dashboard payload."""

from typing import Any

from pydantic import BaseModel


class SettingsUpdate(BaseModel):
    """Shallow-merged into the stored settings."""
    settings: dict[str, Any]


class DashboardStats(BaseModel):
    total_users: int
    pending_approvals: int
    active_users: int
    news_items: int
