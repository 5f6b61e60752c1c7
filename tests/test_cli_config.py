"""Tests for logging configuration helpers."""

from __future__ import annotations

import io
import logging
from typing import Any

import pytest

from cirunner.cli import config as cli_config


def test_setup_logging_calls_basic_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure setup_logging configures handlers, style and forced reconfiguration."""
    captured: dict[str, Any] = {}

    def fake_basic_config(**kwargs: Any) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(logging, "basicConfig", fake_basic_config)

    cli_config.setup_logging()

    assert captured["level"] == logging.INFO
    assert captured["style"] == "{"
    assert captured["force"] is True
    assert isinstance(captured["handlers"][0], logging.StreamHandler)


def test_setup_logging_forwards_level_and_stream(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure explicit level and stream reach the handler configuration."""
    captured: dict[str, Any] = {}
    stream = io.StringIO()

    def fake_basic_config(**kwargs: Any) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(logging, "basicConfig", fake_basic_config)

    cli_config.setup_logging(level=logging.DEBUG, stream=stream)

    assert captured["level"] == logging.DEBUG
    assert captured["handlers"][0].stream is stream


def test_get_logger_returns_named_logger() -> None:
    """Ensure get_logger returns a logger configured with the requested name."""
    logger = cli_config.get_logger("cirunner.tests")
    assert logger.name == "cirunner.tests"
