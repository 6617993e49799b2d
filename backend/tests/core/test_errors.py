"""Tests for the error hierarchy's REST envelope and status mapping."""

from trialengage.core.errors import (
    AccountNotApprovedError, DatabaseError, DuplicateResourceError, ErrorContext,
    ResourceNotFoundError,
)


def test_envelope_shape():
    err = ResourceNotFoundError("Hospital", "h1", ErrorContext(company_id="acme"))
    body = err.to_response()
    assert body["success"] is False
    assert body["error"]["code"] == "RESOURCE_NOT_FOUND"
    assert body["error"]["category"] == "resource_not_found"
    assert body["error"]["context"]["company_id"] == "acme"
    assert "timestamp" in body["error"]
    assert err.http_status == 404


def test_status_codes():
    assert DuplicateResourceError("User", "a@b.com").http_status == 409
    assert DatabaseError("boom", "commit").http_status == 503


def test_not_approved_message_depends_on_status():
    assert AccountNotApprovedError("pending").message == "Account pending approval"
    assert AccountNotApprovedError("rejected").message == "Account is rejected"
