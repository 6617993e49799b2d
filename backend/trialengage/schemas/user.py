"""User Schemas — investigator records as seen by admins, plus usage tracking."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, model_validator

from trialengage.core.domain_types import AnalyticsEvent, AppTab
from trialengage.schemas.common import ORMResponse


class UserResponse(ORMResponse):
    id: UUID
    company_id: str
    email: str
    first_name: str
    last_name: str
    site: str
    role: str
    status: str
    analytics: dict | None = None
    created_at: datetime
    approved_at: datetime | None = None


class TrackEventRequest(BaseModel):
    event: AnalyticsEvent
    tab: AppTab | None = None

    @model_validator(mode="after")
    def require_tab_for_tab_view(self):
        if self.event == AnalyticsEvent.TAB_VIEW and self.tab is None:
            raise ValueError("tab_view requires tab")
        return self
