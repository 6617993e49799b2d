"""Password Hashing — PBKDF2-SHA256 with per-password salt.

Invariants:
    - Stored format: "pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>"
    - verify_password never raises on malformed hashes (returns False)
    - Comparison is constant-time
"""

import hashlib
import secrets

_ALGORITHM = "pbkdf2_sha256"
_ITERATIONS = 260_000


def hash_password(password: str, iterations: int = _ITERATIONS) -> str:
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, iterations)
    return f"{_ALGORITHM}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str | None) -> bool:
    if not stored:
        return False
    try:
        algorithm, iterations, salt_hex, digest_hex = stored.split("$")
        if algorithm != _ALGORITHM:
            return False
        digest = hashlib.pbkdf2_hmac(
            "sha256", password.encode(), bytes.fromhex(salt_hex), int(iterations),
        )
    except ValueError:
        return False
    return secrets.compare_digest(digest.hex(), digest_hex)
