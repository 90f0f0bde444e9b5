"""Unit tests for femtologging integration helpers.

Run with:
    pytest tests/unit/test_logging.py
"""

from __future__ import annotations

import pytest

from quayside.logging import (
    format_log_message,
    log_debug,
    log_error,
    log_exception,
    log_info,
    log_warning,
    normalize_log_level,
)
from tests.helpers import RecordingLogger


@pytest.mark.parametrize(
    ("input_level", "expected_level", "expected_invalid"),
    [
        ("warning", "WARNING", False),
        (" debug ", "DEBUG", False),
        (None, "INFO", True),
        ("", "INFO", True),
        ("nope", "INFO", True),
    ],
)
def test_normalize_log_level(
    input_level: str | None, expected_level: str, expected_invalid: bool
) -> None:
    """Normalize log levels and flag invalid inputs."""
    level, invalid = normalize_log_level(input_level)
    assert level == expected_level, (
        f"Expected {input_level!r} to normalize to {expected_level}."
    )
    assert invalid is expected_invalid, (
        f"Expected invalid flag to be {expected_invalid} for {input_level!r}."
    )


def test_format_log_message_uses_percent_formatting() -> None:
    """Percent formatting produces the expected message."""
    assert format_log_message("pushed %s:%s", "busybox", "latest") == (
        "pushed busybox:latest"
    )


def test_format_log_message_without_args_keeps_template() -> None:
    """Templates without arguments are not interpolated."""
    assert format_log_message("100% done") == "100% done"


def test_log_info_formats_and_passes_level() -> None:
    """log_info formats messages and emits INFO level."""
    logger = RecordingLogger()

    log_info(logger, "hello %s", "world")

    assert logger.calls == [("INFO", "hello world", None, False)]


def test_log_debug_and_warning_levels() -> None:
    """Each helper emits its own level."""
    logger = RecordingLogger()
    exc = ValueError("boom")

    log_debug(logger, "debug")
    log_warning(logger, "warning: %s", "oops", exc_info=exc)

    assert logger.calls == [
        ("DEBUG", "debug", None, False),
        ("WARNING", "warning: oops", exc, False),
    ]


def test_log_error_defaults_stack_info_false() -> None:
    """log_error defaults stack_info to False."""
    logger = RecordingLogger()

    log_error(logger, "error: %s", "oops")

    assert logger.calls == [("ERROR", "error: oops", None, False)]


def test_log_exception_passes_exc_info() -> None:
    """log_exception forwards the exception payload to the logger."""
    logger = RecordingLogger()
    exc = ValueError("boom")

    log_exception(logger, "failed at 100%", exc)

    assert logger.calls == [("ERROR", "failed at 100%", exc, False)]
