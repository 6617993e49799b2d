"""Tests for PBKDF2 password hashing."""

from trialengage.core.passwords import hash_password, verify_password


def test_roundtrip_and_wrong_password():
    stored = hash_password("CereVasc2024!", iterations=1000)
    assert verify_password("CereVasc2024!", stored)
    assert not verify_password("cerevasc2024!", stored)


def test_same_password_gets_different_salts():
    assert hash_password("pw", iterations=1000) != hash_password("pw", iterations=1000)


def test_stored_format():
    algorithm, iterations, salt, digest = hash_password("pw", iterations=1000).split("$")
    assert algorithm == "pbkdf2_sha256"
    assert iterations == "1000"
    assert len(salt) == 32


def test_malformed_or_missing_hash_never_verifies():
    assert not verify_password("pw", None)
    assert not verify_password("pw", "")
    assert not verify_password("pw", "plaintext")
    assert not verify_password("pw", "md5$1$00$00")
    assert not verify_password("pw", "pbkdf2_sha256$x$zz$00")
