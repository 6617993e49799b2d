"""Tests for LoggingNotifier — log-only delivery, nothing retained."""

import logging

from trialengage.infrastructure.notifier import LoggingNotifier, get_notifier


async def test_login_code_is_logged_not_kept(caplog):
    notifier = LoggingNotifier()
    with caplog.at_level(logging.INFO, logger="trialengage.infrastructure.notifier"):
        for _ in range(3):
            await notifier.send_login_code("dana@acme.org", "123456", 5)
    assert vars(notifier) == {}
    assert "dana@acme.org" in caplog.text
    assert "123456" not in caplog.text


async def test_code_only_reaches_debug_output(caplog):
    with caplog.at_level(logging.DEBUG, logger="trialengage.infrastructure.notifier"):
        await LoggingNotifier().send_login_code("dana@acme.org", "654321", 5)
    debug = [r for r in caplog.records if r.levelno == logging.DEBUG]
    assert any("654321" in r.getMessage() for r in debug)


async def test_approval_notice_is_logged(caplog):
    with caplog.at_level(logging.INFO, logger="trialengage.infrastructure.notifier"):
        await get_notifier().send_approval("pat@acme.org", "Pat Lee")
    assert "Pat Lee <pat@acme.org>" in caplog.text
