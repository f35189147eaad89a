"""Pytest configuration and fixtures for linkedool tests."""

import logging

import pytest

from linkedool.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(ollama_host="http://ollama.test:11434")


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    """Keep ambient credentials and disabled-logging state out of tests."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OLLAMA_HOST", raising=False)
    monkeypatch.delenv("LINKEDOOL_LOG", raising=False)
    logging.disable(logging.NOTSET)
    yield
    logging.disable(logging.NOTSET)
    for handler in list(logging.root.handlers):
        if isinstance(handler, logging.FileHandler):
            logging.root.removeHandler(handler)
            handler.close()
