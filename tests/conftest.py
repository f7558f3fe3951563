"""
pytest configuration for platform app client tests.

Adds src directory to Python path for imports and isolates the config
singleton between tests.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))


@pytest.fixture(autouse=True)
def _reset_client_state():
    """Clear config singleton and log context around every test."""
    from clientcore.logging.context import clear_log_context
    from config.config import reset_config

    reset_config()
    clear_log_context()
    yield
    reset_config()
    clear_log_context()
