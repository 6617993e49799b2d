"""Domain Types — enums and identity types shared across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching in routes
    - CompanyId is the tenant slug; all other ids are UUIDs

Design Decisions:
    - str Enums: serialize to JSON without custom encoders, store as plain strings
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

CompanyId = NewType("CompanyId", str)
HospitalId = NewType("HospitalId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Token roles. Admins manage a tenant; investigators use the mobile app."""
    ADMIN = "admin"
    INVESTIGATOR = "investigator"


class UserStatus(str, Enum):
    """Investigator account lifecycle — maps to users.status."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DEACTIVATED = "deactivated"


class EnrollmentStatus(str, Enum):
    """Patient progress through a trial at one site."""
    SCREENED = "screened"
    CONSENTED = "consented"
    RANDOMIZED = "randomized"
    FAILED_SCREENING = "failed_screening"
    WITHDRAWN = "withdrawn"
    COMPLETED = "completed"


class TrainingMaterialType(str, Enum):
    VIDEO = "video"
    PDF = "pdf"
    TEXT = "text"


class ProtocolType(str, Enum):
    PDF = "pdf"
    TEXT = "text"


class AnalyticsEvent(str, Enum):
    """Mobile client usage events."""
    APP_OPEN = "app_open"
    TAB_VIEW = "tab_view"


class AppTab(str, Enum):
    """Mobile app tabs whose views are counted."""
    LEADERBOARD = "leaderboard"
    NEWS = "news"
    RESOURCES = "resources"
    MESSAGING = "messaging"
