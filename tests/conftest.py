import os

import pytest

from chat_gateway.logging_config import error_aggregator

# Event text assertions expect the compact (non-debug) format unless a test patches DEBUG
os.environ.setdefault("DEBUG", "false")


@pytest.fixture(autouse=True)
def _reset_error_aggregator():
    """Keep per-test error counts independent."""
    yield
    error_aggregator.reset()
