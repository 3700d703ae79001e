"""
Global pytest fixtures and configuration for test suite.

This module provides reusable fixtures for:
- Test settings/configuration
- Sample email data
- Temporary files
"""

import os
from typing import Generator

import pytest

from mime_utility.config import Settings
from .fixtures.emails import SAMPLE_EMAILS


@pytest.fixture
def mock_settings() -> Settings:
    """
    Create settings for testing with safe defaults.

    Returns:
        Settings instance with test configuration
    """
    return Settings(
        log_level="DEBUG",
        log_json=False,  # Easier to read in tests
        header_fold_width=76,
        max_part_depth=64,
    )


@pytest.fixture
def sample_eml_bytes() -> bytes:
    """Simple plain text email bytes for basic tests."""
    return SAMPLE_EMAILS["simple_plain_text"]


@pytest.fixture
def nested_multipart_eml() -> bytes:
    """Multipart/mixed email with related, alternative, inline image and attachment."""
    return SAMPLE_EMAILS["nested_multipart"]


@pytest.fixture
def tmp_eml_file(tmp_path) -> Generator[str, None, None]:
    """
    Create temporary .eml file for file-based tests.

    Args:
        tmp_path: pytest's temporary directory fixture

    Yields:
        Path to temporary .eml file
    """
    eml_path = tmp_path / "test_email.eml"
    eml_path.write_bytes(SAMPLE_EMAILS["simple_plain_text"])
    yield str(eml_path)


@pytest.fixture(autouse=True)
def reset_env_vars():
    """
    Reset environment variables before each test.

    This prevents test pollution from env var changes.
    """
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


def pytest_configure(config):
    """
    Configure pytest with custom markers.
    """
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (end-to-end over parsed .eml messages)"
    )
