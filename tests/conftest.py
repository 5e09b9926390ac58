"""
Pytest configuration for Opsight tests.
"""

import logging
import os

import pytest


def pytest_configure():
    """Keep tests independent of any local .env file."""
    os.environ.setdefault("OPSIGHT_TEST_MODE", "true")


class MockLogHandler(logging.Handler):
    """A custom handler to capture log records for testing."""

    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record):
        self.records.append(record)

    def clear(self):
        self.records.clear()


@pytest.fixture
def engine_log_handler():
    """
    Capture records from the opsight.engines logger.

    Attaches directly to the logger so it works whatever LOGGING config is
    active.
    """
    handler = MockLogHandler()
    handler.setLevel(logging.INFO)

    engines_logger = logging.getLogger("opsight.engines")
    previous_level = engines_logger.level
    engines_logger.addHandler(handler)
    engines_logger.setLevel(logging.INFO)

    yield handler

    engines_logger.removeHandler(handler)
    engines_logger.setLevel(previous_level)
    handler.clear()


@pytest.fixture
def engine():
    """Engine with default thresholds."""
    from opsight.opportunities.engines import OpportunityEngine

    return OpportunityEngine()


@pytest.fixture
def invoice_signals():
    """
    One process over the fte threshold, one high/high pain point on it and
    one use case sharing the pain point's category.
    """
    return {
        "processes": [
            {"id": "proc-1", "name": "Invoice processing", "fte": 8, "volume": 200},
        ],
        "painPoints": [
            {
                "id": "pp-1",
                "processId": "proc-1",
                "statement": "Invoices keyed by hand",
                "category": "Data Entry",
                "frequency": "high",
                "magnitude": "high",
            },
        ],
        "useCases": [
            {"id": "uc-1", "name": "Invoice OCR", "category": "data entry"},
        ],
    }
