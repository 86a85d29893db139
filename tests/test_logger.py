"""
Logging Setup Test Suite.
"""

import io
import json

import pytest

from logger import LogManager


@pytest.fixture
def stream():
    return io.StringIO()


def test_json_output_keeps_structured_fields(stream):
    logger = LogManager("test-json", log_dir="", stream=stream).logger

    logger.info({"message": "Merged", "pull_request": 12})

    record = json.loads(stream.getvalue())
    assert record["message"] == "Merged"
    assert record["pull_request"] == 12
    assert record["level"] == "INFO"
    assert record["logger"] == "test-json"


def test_development_output_is_readable(stream):
    logger = LogManager("test-dev", log_dir="", development=True, stream=stream).logger

    logger.info({"message": "Merged", "pull_request": 12})
    logger.info("Attempting merge")

    assert stream.getvalue().splitlines() == [
        "Merged pull_request=12",
        "Attempting merge",
    ]


def test_workflow_commands_group_and_annotate(stream):
    log_manager = LogManager(
        "test-actions", log_dir="", workflow_commands=True, stream=stream
    )

    with log_manager.group("Handling #1"):
        log_manager.logger.error("Merge failed: 100% broken\nreally")

    lines = stream.getvalue().splitlines()
    assert lines == [
        "::group::Handling #1",
        "::error::Merge failed: 100%25 broken%0Areally",
        "::endgroup::",
    ]


def test_workflow_commands_write_warnings_once(stream):
    logger = LogManager(
        "test-actions-once", log_dir="", workflow_commands=True, stream=stream
    ).logger

    logger.info("Attempting merge")
    logger.warning("Search has incomplete results")

    assert stream.getvalue().splitlines() == [
        "Attempting merge",
        "::warning::Search has incomplete results",
    ]


def test_group_logs_title_outside_actions(stream):
    log_manager = LogManager("test-group", log_dir="", development=True, stream=stream)

    with log_manager.group("Handling #2"):
        pass

    assert stream.getvalue().splitlines() == ["Handling #2"]


def test_file_handler_writes_json_lines(tmp_path, stream):
    logger = LogManager("test-file", log_dir=str(tmp_path), stream=stream).logger

    logger.warning("Search has incomplete results")
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "test-file.log").read_text().splitlines()
    assert json.loads(lines[0])["message"] == "Search has incomplete results"


def test_handlers_are_not_duplicated(stream):
    LogManager("test-reinit", log_dir="", stream=stream)
    logger = LogManager("test-reinit", log_dir="", stream=stream).logger

    logger.info("once")

    assert len(stream.getvalue().splitlines()) == 1
