"""Domain Types — verifies enum values that are stored and sent over the wire.

Tests:
    - Enums serialize to their lower-case string values
    - Enrollment lifecycle has exactly six states
"""

from trialengage.core.domain_types import (
    AppTab, CompanyId, EnrollmentStatus, Role, TrainingMaterialType, UserStatus,
)


def test_company_id_wraps_slug():
    assert CompanyId("cerevasc") == "cerevasc"


def test_roles():
    assert {r.value for r in Role} == {"admin", "investigator"}


def test_user_status_values():
    assert {s.value for s in UserStatus} == {
        "pending", "approved", "rejected", "deactivated",
    }


def test_enrollment_status_has_six_states():
    assert len(EnrollmentStatus) == 6
    assert EnrollmentStatus("failed_screening") is EnrollmentStatus.FAILED_SCREENING


def test_enums_compare_equal_to_strings():
    assert UserStatus.APPROVED == "approved"
    assert TrainingMaterialType.VIDEO == "video"
    assert AppTab.MESSAGING.value == "messaging"
