"""Tests for LoginCodeBook — issue, expiry, attempt limits, consumption."""

import pytest

from trialengage.core.errors import LoginCodeError
from trialengage.core.login_codes import LoginCodeBook, generate_code


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def book(clock):
    return LoginCodeBook(
        ttl_seconds=300, max_attempts=3, clock=clock, code_factory=lambda: "123456",
    )


def _error_code(excinfo) -> str:
    return excinfo.value.code


def test_generate_code_is_six_digits():
    for _ in range(50):
        code = generate_code()
        assert len(code) == 6
        assert code.isdigit()
        assert 100_000 <= int(code) <= 999_999


def test_verify_without_issue_fails(book):
    with pytest.raises(LoginCodeError) as excinfo:
        book.verify("a@b.com", "123456")
    assert _error_code(excinfo) == LoginCodeError.NOT_REQUESTED


def test_correct_code_is_consumed(book):
    book.issue("a@b.com")
    book.verify("a@b.com", "123456")
    with pytest.raises(LoginCodeError) as excinfo:
        book.verify("a@b.com", "123456")
    assert _error_code(excinfo) == LoginCodeError.NOT_REQUESTED


def test_email_is_case_insensitive(book):
    book.issue("Dr.Smith@Hospital.org")
    book.verify("dr.smith@hospital.org", "123456")


def test_expired_code_is_removed(book, clock):
    book.issue("a@b.com")
    clock.now += 301
    with pytest.raises(LoginCodeError) as excinfo:
        book.verify("a@b.com", "123456")
    assert _error_code(excinfo) == LoginCodeError.EXPIRED
    with pytest.raises(LoginCodeError) as excinfo:
        book.verify("a@b.com", "123456")
    assert _error_code(excinfo) == LoginCodeError.NOT_REQUESTED


def test_code_still_valid_at_ttl_boundary(book, clock):
    book.issue("a@b.com")
    clock.now += 300
    book.verify("a@b.com", "123456")


def test_mismatch_keeps_entry_until_attempts_exhausted(book):
    book.issue("a@b.com")
    for _ in range(2):
        with pytest.raises(LoginCodeError) as excinfo:
            book.verify("a@b.com", "000000")
        assert _error_code(excinfo) == LoginCodeError.MISMATCH

    with pytest.raises(LoginCodeError) as excinfo:
        book.verify("a@b.com", "000000")
    assert _error_code(excinfo) == LoginCodeError.EXHAUSTED
    with pytest.raises(LoginCodeError) as excinfo:
        book.verify("a@b.com", "123456")
    assert _error_code(excinfo) == LoginCodeError.NOT_REQUESTED


def test_correct_code_after_one_mismatch(book):
    book.issue("a@b.com")
    with pytest.raises(LoginCodeError):
        book.verify("a@b.com", "999999")
    book.verify("a@b.com", "123456")


def test_reissue_resets_attempts(book):
    book.issue("a@b.com")
    for _ in range(2):
        with pytest.raises(LoginCodeError):
            book.verify("a@b.com", "000000")
    book.issue("a@b.com")
    with pytest.raises(LoginCodeError) as excinfo:
        book.verify("a@b.com", "000000")
    assert _error_code(excinfo) == LoginCodeError.MISMATCH


def test_errors_are_client_errors(book):
    with pytest.raises(LoginCodeError) as excinfo:
        book.verify("nobody@b.com", "123456")
    assert excinfo.value.http_status == 400
