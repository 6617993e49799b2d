"""Login Code Book — one-time 6-digit codes for passwordless mobile sign-in.

Invariants:
    - At most one outstanding code per email (keys are lower-cased)
    - Issuing a new code replaces the previous one and resets attempts
    - An expired entry is removed on the verify that observes it
    - After max_attempts mismatches the entry is removed
    - A successful verify consumes the entry

Design Decisions:
    - In-memory, per-process: codes are lost on restart and not shared across
      workers (single-worker deployment, same as the rest of the in-process state)
    - Clock and code generator injected so tests control time and codes
"""

import secrets
import time
from dataclasses import dataclass
from typing import Callable

from trialengage.core.errors import LoginCodeError


def generate_code() -> str:
    """Six-digit numeric code, 100000..999999."""
    return str(100_000 + secrets.randbelow(900_000))


@dataclass
class _Entry:
    code: str
    expires_at: float
    attempts: int = 0


class LoginCodeBook:
    """Issues and verifies login codes."""

    def __init__(
        self,
        ttl_seconds: float = 300,
        max_attempts: int = 3,
        clock: Callable[[], float] = time.monotonic,
        code_factory: Callable[[], str] = generate_code,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_attempts = max_attempts
        self._clock = clock
        self._code_factory = code_factory
        self._entries: dict[str, _Entry] = {}

    def issue(self, email: str) -> str:
        code = self._code_factory()
        self._entries[email.lower()] = _Entry(
            code=code, expires_at=self._clock() + self.ttl_seconds,
        )
        return code

    def verify(self, email: str, code: str) -> None:
        """Consume the code or raise LoginCodeError."""
        key = email.lower()
        entry = self._entries.get(key)
        if entry is None:
            raise LoginCodeError(LoginCodeError.NOT_REQUESTED)
        if self._clock() > entry.expires_at:
            del self._entries[key]
            raise LoginCodeError(LoginCodeError.EXPIRED)
        if not secrets.compare_digest(entry.code, code.strip()):
            entry.attempts += 1
            if entry.attempts >= self.max_attempts:
                del self._entries[key]
                raise LoginCodeError(LoginCodeError.EXHAUSTED)
            raise LoginCodeError(LoginCodeError.MISMATCH)
        del self._entries[key]
