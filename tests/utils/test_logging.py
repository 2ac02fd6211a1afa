# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the structured JSON logger.

We verify:
  - output is valid JSON
  - all mandatory fields are present (ts, level, module, msg)
  - log levels filter correctly, and set_log_level reaches existing loggers
  - extra context fields get merged into the JSON
"""

import json
import logging
from pathlib import Path

import pytest

from crossrel.logging.logger import get_logger, set_log_level


@pytest.fixture(autouse=True)
def _reset_loggers() -> None:
    """
    Clear handlers and levels between tests so get_logger's handler-stacking
    guard and set_log_level don't leak into other tests.
    """
    yield  # type: ignore[misc]
    for name in list(logging.Logger.manager.loggerDict):
        if name.startswith("crossrel.test"):
            logger = logging.getLogger(name)
            logger.handlers.clear()
    set_log_level("INFO")


class TestJsonOutput:
    def test_output_is_valid_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("crossrel.test.json", log_level="INFO")
        logger.info("hello")
        captured = capsys.readouterr()

        parsed = json.loads(captured.out.strip())
        assert isinstance(parsed, dict)

    def test_mandatory_fields_are_present(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("crossrel.test.fields", log_level="INFO")
        logger.info("test message")
        captured = capsys.readouterr()

        parsed = json.loads(captured.out.strip())
        assert "ts" in parsed
        assert parsed["level"] == "INFO"
        assert parsed["module"] == "crossrel.test.fields"
        assert parsed["msg"] == "test message"

    def test_extra_fields_are_included(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("crossrel.test.extra", log_level="DEBUG")
        logger.info("Archiving", extra={"platform": "linux-amd64", "executables": 5})
        captured = capsys.readouterr()

        parsed = json.loads(captured.out.strip())
        assert parsed["platform"] == "linux-amd64"
        assert parsed["executables"] == 5

    def test_non_json_values_are_stringified(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("crossrel.test.paths", log_level="INFO")
        logger.info("Manifest written", extra={"path": Path("archive/manifest-v1.txt")})
        captured = capsys.readouterr()

        assert json.loads(captured.out.strip())["path"] == "archive/manifest-v1.txt"

    def test_exceptions_land_in_exc_field(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("crossrel.test.exc", log_level="INFO")
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logger.error("Release failed", exc_info=True)
        captured = capsys.readouterr()

        assert "RuntimeError: boom" in json.loads(captured.out.strip())["exc"]


class TestLogLevelFiltering:
    def test_debug_messages_hidden_at_info_level(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        logger = get_logger("crossrel.test.level_filter", log_level="INFO")
        logger.debug("this should not appear")
        captured = capsys.readouterr()
        assert captured.out.strip() == ""

    def test_info_messages_shown_at_info_level(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        logger = get_logger("crossrel.test.level_show", log_level="INFO")
        logger.info("this should appear")
        captured = capsys.readouterr()
        assert "this should appear" in captured.out

    def test_set_log_level_reaches_existing_loggers(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        logger = get_logger("crossrel.test.late_level", log_level="INFO")
        set_log_level("DEBUG")
        logger.debug("now visible")
        captured = capsys.readouterr()
        assert "now visible" in captured.out

    def test_set_log_level_leaves_foreign_loggers_alone(self) -> None:
        foreign = logging.getLogger("someone.else")
        foreign.setLevel(logging.WARNING)
        set_log_level("DEBUG")
        assert foreign.level == logging.WARNING


class TestFileOutput:
    def test_logs_are_written_to_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "test.log"
        logger = get_logger("crossrel.test.file_output", log_level="INFO", log_file=log_file)
        logger.info("file log test")

        assert log_file.exists()
        content = log_file.read_text(encoding="utf-8")
        parsed = json.loads(content.strip())
        assert parsed["msg"] == "file log test"


class TestInvalidLogLevel:
    def test_invalid_level_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            get_logger("crossrel.test.invalid", log_level="INVALID")
