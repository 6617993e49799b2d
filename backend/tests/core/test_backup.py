"""Tests for backup payload validation and snapshot totals."""

import pytest

from trialengage.core.backup import snapshot_totals, validate_restore_payload
from trialengage.core.errors import InvalidRequestError


def test_totals_count_rows_across_companies():
    totals = snapshot_totals({
        "a": {"hospitals": [{}, {}], "users": [{}], "pdfs": []},
        "b": {"hospitals": [{}], "news": [{}]},
    })
    assert totals == {"total_hospitals": 3, "total_users": 1, "total_pdfs": 0}


@pytest.mark.parametrize("payload", [None, [], {}, "companies", 3])
def test_rejects_non_dict_or_empty_payload(payload):
    with pytest.raises(InvalidRequestError):
        validate_restore_payload(payload)


def test_rejects_non_object_company():
    with pytest.raises(InvalidRequestError):
        validate_restore_payload({"a": ["hospitals"]})


def test_rejects_non_list_collection():
    with pytest.raises(InvalidRequestError) as excinfo:
        validate_restore_payload({"a": {"hospitals": {"id": 1}}})
    assert excinfo.value.field == "companies.a.hospitals"


def test_accepts_partial_company_record():
    payload = {"a": {"name": "Acme", "news": []}}
    assert validate_restore_payload(payload) is payload


def test_rejects_non_object_rows():
    with pytest.raises(InvalidRequestError) as excinfo:
        validate_restore_payload({"a": {"news": [{"title": "ok"}, "oops"]}})
    assert excinfo.value.field == "companies.a.news[1]"


@pytest.mark.parametrize("field,value", [
    ("settings", "oops"),
    ("settings", ["auto_approval"]),
    ("name", ""),
    ("name", 42),
    ("admin_username", None),
    ("primary_color", {"hex": "#fff"}),
    ("logo_url", 3),
])
def test_rejects_mistyped_company_fields(field, value):
    with pytest.raises(InvalidRequestError) as excinfo:
        validate_restore_payload({"a": {field: value}})
    assert excinfo.value.field == f"companies.a.{field}"


def test_logo_url_may_be_null():
    validate_restore_payload({"a": {"logo_url": None, "settings": {}}})


def test_rejects_overlong_company_id():
    with pytest.raises(InvalidRequestError):
        validate_restore_payload({"x" * 65: {"name": "X"}})
