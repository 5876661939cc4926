"""Local fixtures to stand in for the Bitbucket REST API."""

import logging

import pytest

from .fakes import FakeHostingService


@pytest.fixture(name="service")
def fake_service():
    """An empty fake service, to be filled in by each test."""
    return FakeHostingService()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by `setup_logging` so each test gets fresh streams."""
    yield
    logger = logging.getLogger("nextsemver")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
