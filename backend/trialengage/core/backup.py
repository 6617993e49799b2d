"""Backup Snapshot — pure validation and totals for tenant snapshots.

Invariants:
    - A snapshot maps company id -> company record with nested collections
    - Restore payloads must be {company_id: {...}} with list-valued collections
      whose rows are objects
    - Company fields in a payload have the types the companies table stores:
      settings is an object, logo_url a string or null, the rest non-empty strings
    - Totals count rows across all companies; missing collections count as 0

Design Decisions:
    - Restore is a merge, not a replace-all: collections present in the payload
      replace the stored ones, absent collections are left untouched
    - Replacing hospitals also clears enrollments (they hang off hospitals);
      enrollments in the same payload are then restored against the new rows
    - Collections are listed parents first so rows can be restored in order
"""

from trialengage.core.errors import InvalidRequestError

COLLECTIONS = (
    "hospitals", "clinical_trials", "users", "news", "pdfs",
    "training_materials", "study_protocols", "enrollments",
)
COMPANY_FIELDS = (
    "name", "primary_color", "logo_url",
    "admin_username", "admin_password_hash", "settings",
)
_NULLABLE_FIELDS = ("logo_url",)


def snapshot_totals(companies: dict[str, dict]) -> dict:
    """Row totals across all companies. Pure, no IO."""
    def total(key: str) -> int:
        return sum(len(c.get(key) or []) for c in companies.values())

    return {
        "total_hospitals": total("hospitals"),
        "total_users": total("users"),
        "total_pdfs": total("pdfs"),
    }


def _check_company_fields(company_id: str, record: dict) -> None:
    for key in COMPANY_FIELDS:
        if key not in record:
            continue
        value = record[key]
        field = f"companies.{company_id}.{key}"
        if key == "settings":
            if not isinstance(value, dict):
                raise InvalidRequestError(
                    f"'settings' of company '{company_id}' must be an object", field=field,
                )
        elif value is None and key in _NULLABLE_FIELDS:
            continue
        elif not isinstance(value, str) or not value.strip():
            raise InvalidRequestError(
                f"'{key}' of company '{company_id}' must be a non-empty string",
                field=field,
            )


def validate_restore_payload(payload: object) -> dict[str, dict]:
    """Check shape of a restore payload; raise InvalidRequestError if malformed."""
    if not isinstance(payload, dict) or not payload:
        raise InvalidRequestError("Invalid data format", field="companies")
    for company_id, record in payload.items():
        if not company_id.strip() or len(company_id) > 64:
            raise InvalidRequestError(
                f"Invalid company id '{company_id}'", field="companies",
            )
        if not isinstance(record, dict):
            raise InvalidRequestError(
                f"Company '{company_id}' must be an object", field="companies",
            )
        _check_company_fields(company_id, record)
        for key in COLLECTIONS:
            if key not in record:
                continue
            rows = record[key]
            if not isinstance(rows, list):
                raise InvalidRequestError(
                    f"'{key}' of company '{company_id}' must be a list",
                    field=f"companies.{company_id}.{key}",
                )
            for i, row in enumerate(rows):
                if not isinstance(row, dict):
                    raise InvalidRequestError(
                        f"'{key}' rows of company '{company_id}' must be objects",
                        field=f"companies.{company_id}.{key}[{i}]",
                    )
    return payload
