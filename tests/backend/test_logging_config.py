"""Tests for routing stdlib logging through loguru."""

import logging
import sys

import pytest
from loguru import logger

from query_backend.logging_config import setup_logging


@pytest.fixture()
def captured():
    """Collect loguru output as plain strings; restore defaults afterwards."""
    messages: list[str] = []
    yield messages
    logger.remove()
    logger.add(sys.stderr)
    logging.root.handlers.clear()
    logging.root.setLevel(logging.WARNING)


class TestSetupLogging:
    def test_stdlib_records_reach_loguru(self, captured: list[str]):
        setup_logging(level="DEBUG")
        logger.add(captured.append, format="{level} {message}")

        logging.getLogger("uvicorn.error").warning("port in use")

        assert any(m.startswith("WARNING port in use") for m in captured)

    def test_stdlib_level_follows_setting(self, captured: list[str]):
        setup_logging(level="WARNING")
        logger.add(captured.append, format="{level} {message}")

        logging.getLogger("sqlalchemy.engine").info("BEGIN (implicit)")
        logging.getLogger("psycopg").error("connection lost")

        assert not any("BEGIN" in m for m in captured)
        assert any(m.startswith("ERROR connection lost") for m in captured)

    def test_third_party_handlers_are_replaced(self, captured: list[str]):
        noisy = logging.getLogger("uvicorn.access")
        noisy.addHandler(logging.StreamHandler())
        noisy.propagate = False

        setup_logging(level="INFO")

        assert noisy.handlers == []
        assert noisy.propagate is True
