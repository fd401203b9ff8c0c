"""Pytest configuration and shared fixtures"""

import os
from unittest.mock import Mock

import httpx
import pytest

from moodle_downloader.config import Config, get_config
from tests.helpers import write_settings


@pytest.fixture
def settings_file(tmp_path):
    """Settings file with an empty token"""
    return write_settings(tmp_path / "settings.json")


@pytest.fixture
def config():
    """Config fixture for client tests"""
    return Config(timeout_seconds=10, log_level="DEBUG")


@pytest.fixture
def mock_http_client():
    """Mock httpx Client"""
    return Mock(spec=httpx.Client)


@pytest.fixture
def clean_env():
    """Fixture that temporarily clears MOODLEDL_* environment variables.

    This ensures Config tests see the true defaults without interference
    from environment variables that might be set in the user's shell.
    """
    moodledl_vars = {
        key: value for key, value in os.environ.items() if key.startswith("MOODLEDL_")
    }

    for key in moodledl_vars:
        os.environ.pop(key, None)
    get_config.cache_clear()

    try:
        yield
    finally:
        for key, value in moodledl_vars.items():
            os.environ[key] = value
        get_config.cache_clear()


@pytest.fixture
def clean_config(clean_env):
    """Fixture that provides a Config instance with clean environment."""
    return Config()
