"""Notifier — delivers login codes and approval notices to investigators.

Invariants:
    - Notifier methods never raise for delivery problems they can log
    - LoggingNotifier is the default: it writes to the application log and
      keeps nothing in memory; the code itself only reaches DEBUG output

Design Decisions:
    - Protocol boundary so an email/SMS provider can replace
      get_notifier without touching the routes
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def send_login_code(self, email: str, code: str, ttl_minutes: int) -> None: ...
    async def send_approval(self, email: str, full_name: str) -> None: ...


class LoggingNotifier:
    """Writes notifications to the application log."""

    async def send_login_code(self, email: str, code: str, ttl_minutes: int) -> None:
        logger.info(f"Login code for {email} issued (expires in {ttl_minutes} min)")
        logger.debug(f"Login code for {email}: {code}")

    async def send_approval(self, email: str, full_name: str) -> None:
        logger.info(f"Approval notice queued for {full_name} <{email}>")


_notifier: Notifier = LoggingNotifier()


def get_notifier() -> Notifier:
    """FastAPI dependency for the active notifier."""
    return _notifier
