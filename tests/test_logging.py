"""Tests for the console logging setup."""

import logging

from nextsemver.logging import NOTICE, setup_logging


def test_setup_is_reentrant():
    """Repeated setup only changes the level."""
    logger = logging.getLogger("nextsemver")

    setup_logging()
    setup_logging(verbose=True)

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logging.getLevelName(NOTICE) == "NOTICE"

    setup_logging()
    assert logger.level == NOTICE


def test_prefixes(capsys):
    """Warnings and errors are prefixed, progress messages are not."""
    setup_logging()
    logger = logging.getLogger("nextsemver.test")

    logger.debug("hidden")
    logger.log(NOTICE, "1.0.0 -> 1.1.0")
    logger.warning("careful")
    logger.error("broken")

    assert capsys.readouterr().err.splitlines() == [
        "1.0.0 -> 1.1.0",
        "warning: careful",
        "error: broken",
    ]
