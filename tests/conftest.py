"""Pytest configuration and fixtures for faucet tests."""

import logging
import os

import pytest
import structlog


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Clear faucet-related environment variables before each test."""
    for key in list(os.environ.keys()):
        if key.startswith("FAUCET_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop log handlers installed by configure_logging during a test."""
    yield
    structlog.contextvars.clear_contextvars()
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
