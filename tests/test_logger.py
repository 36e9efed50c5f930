"""
Tests for the context-bound loggers.
"""

import pytest
from loguru import logger

from desidub.utils.logger import format_log, get_logger, scraper_logger


def test_log_lines_carry_context_and_level():
    lines = []
    sink_id = logger.add(lines.append, format=format_log, colorize=False)
    try:
        scraper_logger.warning("Error decoding script 0")
    finally:
        logger.remove(sink_id)

    assert len(lines) == 1
    assert "WARNING" in lines[0]
    assert "SCRAPER" in lines[0]
    assert "Error decoding script 0" in lines[0]


def test_unknown_context_is_rejected():
    with pytest.raises(ValueError):
        get_logger("WORKER")
