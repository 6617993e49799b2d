"""Backup Service — platform-wide snapshot, emergency export and merge restore.

Invariants:
    - Snapshot keys: company id -> company fields + one list per collection
    - Restore replaces only the collections present in the payload
    - Replacing hospitals or enrollments clears the tenant's enrollments first
    - Restored rows are forced onto the payload's company id
    - Every restored value is checked against its column before it is written;
      a bad row is a 400 naming companies.<id>.<collection>[i], never a 500
    - Rows copied from another tenant get fresh ids, and references between
      restored rows follow them
    - References (hospital_id, clinical_trial_id) must point at rows of the same tenant
    - Restored user emails are lower-cased like every other email in the system
    - Caller commits

Design Decisions:
    - Column-driven (de)serialization via the mapper: new columns are picked up
      without touching this module
    - Export file name carries a UTC timestamp so exports never overwrite each other
"""

import json
import logging
import uuid
from datetime import date, datetime, timezone
from pathlib import Path

from fastapi.encoders import jsonable_encoder
from sqlalchemy import (
    Boolean, Date, DateTime, Float, Integer, String, Uuid,
    delete, inspect, select, update,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trialengage.core.backup import (
    COLLECTIONS, COMPANY_FIELDS, validate_restore_payload,
)
from trialengage.core.domain_types import (
    EnrollmentStatus, ProtocolType, TrainingMaterialType, UserStatus,
)
from trialengage.core.errors import InvalidRequestError, StorageError
from trialengage.models import (
    ClinicalTrial, Company, Enrollment, Hospital, News, PdfDocument,
    StudyProtocol, TrainingMaterial, User,
)
from trialengage.models.base import Base

logger = logging.getLogger(__name__)

COLLECTION_MODELS = {
    "hospitals": Hospital,
    "clinical_trials": ClinicalTrial,
    "users": User,
    "news": News,
    "pdfs": PdfDocument,
    "training_materials": TrainingMaterial,
    "study_protocols": StudyProtocol,
    "enrollments": Enrollment,
}
_ENUM_COLUMNS = {
    (User, "status"): UserStatus,
    (Enrollment, "status"): EnrollmentStatus,
    (TrainingMaterial, "type"): TrainingMaterialType,
    (StudyProtocol, "type"): ProtocolType,
}
_REQUIRED_FOR_NEW_COMPANY = ("name", "admin_username", "admin_password_hash")


def _row_to_dict(row) -> dict:
    return {
        attr.key: getattr(row, attr.key)
        for attr in inspect(row).mapper.column_attrs
    }


def _model_for_table(table):
    for mapper in Base.registry.mappers:
        if mapper.local_table is table:
            return mapper.class_
    return None


def _coerce(column, value):
    """Convert a JSON value to what the column stores; ValueError if it cannot."""
    kind = column.type
    if isinstance(kind, Uuid):
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
    if isinstance(kind, DateTime):
        if isinstance(value, datetime):
            return value
        if not isinstance(value, str):
            raise ValueError("expected an ISO timestamp")
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(kind, Date):
        if isinstance(value, date):
            return value
        if not isinstance(value, str):
            raise ValueError("expected an ISO date")
        return date.fromisoformat(value)
    if isinstance(kind, Boolean):
        if not isinstance(value, bool):
            raise ValueError("expected true or false")
        return value
    if isinstance(kind, Integer):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError("expected an integer")
        return value
    if isinstance(kind, Float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("expected a number")
        return float(value)
    if isinstance(kind, String):
        if not isinstance(value, str):
            raise ValueError("expected a string")
        if kind.length and len(value) > kind.length:
            raise ValueError(f"longer than {kind.length} characters")
        return value
    return value


def _required(column) -> bool:
    return (
        not column.nullable
        and column.default is None
        and column.server_default is None
    )


def _row_values(model, record: dict, company_id: str, field: str) -> dict:
    values = {}
    for column in model.__table__.columns:
        if column.key == "company_id":
            continue
        value = record.get(column.key)
        if value is None:
            if _required(column):
                raise InvalidRequestError(
                    f"Missing required field '{column.key}'", field=field,
                )
            if column.nullable and column.key in record:
                values[column.key] = None
            continue
        try:
            value = _coerce(column, value)
            enum = _ENUM_COLUMNS.get((model, column.key))
            if enum:
                value = enum(value).value
        except ValueError as e:
            raise InvalidRequestError(
                f"Invalid value for '{column.key}': {e}", field=field,
            )
        values[column.key] = value
    if model is User:
        values["email"] = values["email"].strip().lower()
    values["company_id"] = company_id
    return values


async def _check_references(
    db: AsyncSession, model, values: dict, company_id: str, field: str,
) -> None:
    for column in model.__table__.columns:
        value = values.get(column.key)
        if column.key == "company_id" or value is None:
            continue
        for fk in column.foreign_keys:
            target_model = _model_for_table(fk.column.table)
            target = await db.get(target_model, value) if target_model else None
            if target is None or target.company_id != company_id:
                raise InvalidRequestError(
                    f"'{column.key}' does not name a row of company '{company_id}'",
                    field=field,
                )


async def build_snapshot(db: AsyncSession) -> dict[str, dict]:
    """Every company with its nested collections, JSON-ready."""
    companies = (await db.execute(select(Company).order_by(Company.id))).scalars().all()
    snapshot: dict[str, dict] = {c.id: _row_to_dict(c) for c in companies}
    for record in snapshot.values():
        for key in COLLECTIONS:
            record[key] = []

    for key, model in COLLECTION_MODELS.items():
        rows = (await db.execute(select(model))).scalars().all()
        for row in rows:
            if row.company_id in snapshot:
                snapshot[row.company_id][key].append(_row_to_dict(row))
    return jsonable_encoder(snapshot)


def write_export(snapshot: dict, backup_dir: str | Path) -> Path:
    """Write the snapshot to <backup_dir>/emergency-export-<ts>.json."""
    directory = Path(backup_dir)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    path = directory / f"emergency-export-{stamp}.json"
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(snapshot, indent=2), encoding="utf-8")
    except OSError as e:
        logger.error(f"Emergency export to {path} failed: {e}")
        raise StorageError("could not write export file", "export")
    logger.info(f"Emergency export written to {path}")
    return path


async def _company_for_restore(
    db: AsyncSession, company_id: str, record: dict,
) -> Company:
    company = await db.get(Company, company_id)
    if company:
        return company
    missing = [f for f in _REQUIRED_FOR_NEW_COMPANY if not record.get(f)]
    if missing:
        raise InvalidRequestError(
            f"New company '{company_id}' needs {', '.join(missing)}",
            field=f"companies.{company_id}",
        )
    company = Company(id=company_id)
    db.add(company)
    return company


async def _restore_rows(
    db: AsyncSession, company_id: str, key: str, rows: list[dict],
    id_map: dict[uuid.UUID, uuid.UUID],
) -> None:
    model = COLLECTION_MODELS[key]
    for i, row in enumerate(rows):
        field = f"companies.{company_id}.{key}[{i}]"
        values = _row_values(model, row, company_id, field)
        for column in model.__table__.columns:
            if column.foreign_keys and values.get(column.key) in id_map:
                values[column.key] = id_map[values[column.key]]
        if row.get("company_id") not in (None, company_id):
            fresh = uuid.uuid4()
            if "id" in values:
                id_map[values["id"]] = fresh
            values["id"] = fresh
        await _check_references(db, model, values, company_id, field)
        db.add(model(**values))
        try:
            await db.flush()
        except IntegrityError as e:
            logger.warning(f"Restore row rejected at {field}: {e.orig}")
            raise InvalidRequestError(
                "Row conflicts with existing data or constraints", field=field,
            )


async def _drop_dangling_trial_links(db: AsyncSession, company_id: str) -> None:
    trial_ids = select(ClinicalTrial.id).where(ClinicalTrial.company_id == company_id)
    for model in (News, Enrollment):
        await db.execute(
            update(model)
            .where(
                model.company_id == company_id,
                model.clinical_trial_id.is_not(None),
                model.clinical_trial_id.not_in(trial_ids),
            )
            .values(clinical_trial_id=None)
            .execution_options(synchronize_session=False),
        )


async def restore_snapshot(db: AsyncSession, payload: object) -> list[str]:
    """Merge a snapshot into the database; returns the restored company ids."""
    companies = validate_restore_payload(payload)
    restored = []
    for company_id, record in companies.items():
        company = await _company_for_restore(db, company_id, record)
        for field in COMPANY_FIELDS:
            if field in record:
                setattr(company, field, record[field])
        await db.flush()

        present = [key for key in COLLECTIONS if key in record]
        if "hospitals" in present or "enrollments" in present:
            await db.execute(
                delete(Enrollment).where(Enrollment.company_id == company_id),
            )
        for key in present:
            model = COLLECTION_MODELS[key]
            if model is not Enrollment:
                await db.execute(delete(model).where(model.company_id == company_id))

        id_map: dict[uuid.UUID, uuid.UUID] = {}
        for key in present:
            await _restore_rows(db, company_id, key, record[key], id_map)
        if "clinical_trials" in present:
            await _drop_dangling_trial_links(db, company_id)

        logger.info(
            f"Restored {', '.join(present) or 'company fields'}",
            extra={"company_id": company_id},
        )
        restored.append(company_id)
    return restored


def restored_hospital_total(payload: dict) -> int:
    return sum(len(r.get("hospitals") or []) for r in payload.values())
