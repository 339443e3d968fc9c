"""Tests for logging helpers."""

import logging

import pytest

from career_assistant.core import logging_config
from career_assistant.core.logging_config import LoggerMixin, preview, setup_logging


@pytest.fixture
def clean_root(monkeypatch):
    """Run setup_logging against a fresh root handler list."""
    root = logging.getLogger()
    saved = list(root.handlers)
    monkeypatch.setattr(logging_config, "_configured", False)
    yield root
    for handler in root.handlers:
        if handler not in saved:
            handler.close()
    root.handlers = saved


def test_preview_short_text_unchanged() -> None:
    assert preview("hello") == "hello"


def test_preview_flattens_and_truncates() -> None:
    assert preview("I want to become a nurse\nand work nights", limit=12) == "I want to be..."


def test_preview_none() -> None:
    assert preview(None) == ""


def test_setup_logging_writes_daily_file(clean_root, tmp_path) -> None:
    setup_logging("WARNING", log_dir=tmp_path)

    assert len(list(tmp_path.glob("assistant_*.log"))) == 1
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_setup_logging_without_file(clean_root, tmp_path) -> None:
    before = len(clean_root.handlers)
    setup_logging("INFO", log_dir=tmp_path, log_to_file=False)

    assert len(clean_root.handlers) == before + 1
    assert list(tmp_path.iterdir()) == []


def test_setup_logging_is_idempotent(clean_root, tmp_path) -> None:
    setup_logging("INFO", log_dir=tmp_path)
    count = len(clean_root.handlers)
    setup_logging("INFO", log_dir=tmp_path)

    assert len(clean_root.handlers) == count


def test_logger_mixin_named_after_class() -> None:
    class SampleGateway(LoggerMixin):
        pass

    assert SampleGateway().logger.name == "SampleGateway"
