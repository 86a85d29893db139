"""
Logging Setup Module.

Builds the application logger used across the code base. Messages can be
plain strings or dictionaries carrying a ``message`` key plus structured
fields, e.g. ``logger.info({"message": "Merged", "pull_request": 12})``.

Features:
- Readable console output for development and GitHub Actions logs
- JSON lines output for log aggregation
- Rotating log files
- GitHub Actions workflow commands (log groups and annotations)
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Iterator, Optional, TextIO


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Split a log record message into a dictionary of fields."""
    if isinstance(record.msg, dict):
        fields = dict(record.msg)
        fields.setdefault("message", "")
        return fields
    return {"message": record.getMessage()}


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }
        payload.update(_record_fields(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Format log records as ``message key=value ...`` lines."""

    def format(self, record: logging.LogRecord) -> str:
        fields = _record_fields(record)
        message = str(fields.pop("message"))
        extras = " ".join(f"{key}={value}" for key, value in fields.items())
        line = f"{message} {extras}" if extras else message
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class WorkflowCommandHandler(logging.Handler):
    """
    Emit GitHub Actions annotations for warnings and errors.

    See https://docs.github.com/en/actions/using-workflows/workflow-commands-for-github-actions
    """

    COMMANDS = {
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__(level=logging.WARNING)
        self.stream = stream or sys.stdout

    def emit(self, record: logging.LogRecord) -> None:
        try:
            command = self.COMMANDS.get(record.levelno, "warning")
            message = str(_record_fields(record)["message"])
            # Workflow command data must stay on one line
            message = (
                message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
            )
            self.stream.write(f"::{command}::{message}\n")
            self.stream.flush()
        except Exception:
            self.handleError(record)


class LogManager:
    """
    Configure and expose the application logger.

    Attributes:
        logger (logging.Logger): Configured application logger
        workflow_commands (bool): Whether GitHub Actions workflow commands are emitted
    """

    def __init__(
        self,
        app_name: str,
        log_dir: str = "logs",
        development: bool = False,
        level: int = logging.INFO,
        workflow_commands: bool = False,
        stream: Optional[TextIO] = None,
    ):
        """Initialize the logger and its handlers.

        Args:
            app_name (str): Logger name, also used for the log file name
            log_dir (str): Directory for rotating log files, empty to disable
            development (bool): Use readable console output instead of JSON
            level (int): Logging level
            workflow_commands (bool): Emit GitHub Actions groups and annotations
            stream (Optional[TextIO]): Console stream, defaults to stdout
        """
        self.workflow_commands = workflow_commands
        self.stream = stream or sys.stdout

        self.logger = logging.getLogger(app_name)
        self.logger.setLevel(level)
        self.logger.propagate = False
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        console = logging.StreamHandler(self.stream)
        if development or workflow_commands:
            console.setFormatter(ConsoleFormatter())
        else:
            console.setFormatter(JsonFormatter())
        self.logger.addHandler(console)

        if workflow_commands:
            # Warnings and errors are written once, as annotations
            console.addFilter(lambda record: record.levelno < logging.WARNING)
            self.logger.addHandler(WorkflowCommandHandler(self.stream))

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(log_dir, f"{app_name}.log"),
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
            file_handler.setFormatter(JsonFormatter())
            self.logger.addHandler(file_handler)

        # PyGithub logs every request at debug level
        logging.getLogger("github").setLevel(logging.WARNING)
        logging.getLogger("urllib3").setLevel(logging.WARNING)

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        """
        Group the log lines emitted inside the block.

        In GitHub Actions the lines are folded under ``title``; elsewhere the
        title is logged as a regular line.

        Args:
            title (str): Group title
        """
        if self.workflow_commands:
            self.stream.write(f"::group::{title}\n")
            self.stream.flush()
        else:
            self.logger.info(title)
        try:
            yield
        finally:
            if self.workflow_commands:
                self.stream.write("::endgroup::\n")
                self.stream.flush()
