"""Unit tests for utils/decorators.py."""

from __future__ import annotations

import logging

from html2md.utils.decorators import debug_timer


def test_debug_timer_logs_when_debug_enabled(caplog) -> None:
    logger = logging.getLogger("html2md.tests.timer")
    with caplog.at_level(logging.DEBUG, logger="html2md.tests.timer"):
        with debug_timer(logger, "HTML to Markdown conversion"):
            pass
    assert any("HTML to Markdown conversion completed in" in record.message for record in caplog.records)


def test_debug_timer_silent_above_debug(caplog) -> None:
    logger = logging.getLogger("html2md.tests.timer_quiet")
    logger.setLevel(logging.INFO)
    with caplog.at_level(logging.INFO, logger="html2md.tests.timer_quiet"):
        with debug_timer(logger, "quiet"):
            pass
    assert not caplog.records
