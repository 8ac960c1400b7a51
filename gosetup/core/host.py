"""
Application of setup results to the running process and the CI host.

The host is told about new PATH entries, exported variables and outputs by
appending to the files named in ``GITHUB_PATH``, ``GITHUB_ENV``,
``GITHUB_OUTPUT`` and ``GITHUB_STATE``. When those variables are absent
(local runs, other CI systems) only the current process environment is
updated and outputs are logged.
"""

import logging
import os
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, MutableMapping, Optional, Union

from gosetup.core.environment import EnvironmentMutation

logger = logging.getLogger(__name__)


def is_github_actions(environ: Optional[MutableMapping[str, str]] = None) -> bool:
    """Check whether we are running as a GitHub Actions step."""
    environ = os.environ if environ is None else environ
    return environ.get("GITHUB_ACTIONS", "").lower() == "true"


class WorkflowCommandFormatter(logging.Formatter):
    """
    Render log records as GitHub Actions workflow commands.

    Warnings, errors and debug records become ``::warning::``, ``::error::``
    and ``::debug::`` lines so the runner turns them into annotations.
    """

    _COMMANDS = {
        logging.DEBUG: "debug",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = self._COMMANDS.get(record.levelno)
        if not command:
            return message
        escaped = (
            message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        )
        return f"::{command}::{escaped}"


class HostEnvironment:
    """
    Writes environment changes, outputs and state for the current run.

    Attributes:
        environ: Environment mapping that is updated in place
        outputs: Outputs published during this run
    """

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None):
        """
        Args:
            environ: Environment to update (default: ``os.environ``)
        """
        self.environ = os.environ if environ is None else environ
        self.outputs: Dict[str, str] = {}

    def apply(self, mutation: EnvironmentMutation) -> None:
        """
        Apply a mutation to the process environment and the host files.

        Args:
            mutation: Accumulated path prepends and variables
        """
        for directory in mutation.paths:
            self._append_file_command("GITHUB_PATH", f"{directory}{os.linesep}")
            current = self.environ.get("PATH", "")
            self.environ["PATH"] = (
                f"{directory}{os.pathsep}{current}" if current else str(directory)
            )
            logger.debug(f"Added to PATH: {directory}")

        for name, value in mutation.variables.items():
            self._append_file_command("GITHUB_ENV", _key_value_message(name, value))
            self.environ[name] = value
            logger.debug(f"Exported {name}={value}")

    def set_output(self, name: str, value: Union[str, bool]) -> None:
        """Publish a named output of the run."""
        value = _to_command_value(value)
        self.outputs[name] = value
        if not self._append_file_command("GITHUB_OUTPUT", _key_value_message(name, value)):
            logger.info(f"{name}={value}")

    def save_state(self, name: str, value: Union[str, bool]) -> None:
        """Persist a value for a later step of the same job (e.g. save-cache)."""
        value = _to_command_value(value)
        self._append_file_command("GITHUB_STATE", _key_value_message(name, value))
        self.environ[f"STATE_{name}"] = value

    def get_state(self, name: str) -> str:
        """Read a value saved by :meth:`save_state` in an earlier step."""
        return self.environ.get(f"STATE_{name}", "")

    def add_matcher(self, matcher_path: Path) -> None:
        """Register a problem matcher file with the runner."""
        logger.info(f"##[add-matcher]{matcher_path}")

    @contextmanager
    def group(self, name: str):
        """Fold the enclosed log output into a collapsible group."""
        grouped = is_github_actions(self.environ)
        if grouped:
            logger.info(f"::group::{name}")
        try:
            yield
        finally:
            if grouped:
                logger.info("::endgroup::")

    def _append_file_command(self, variable: str, message: str) -> bool:
        file_path = self.environ.get(variable)
        if not file_path:
            return False

        with open(file_path, "a", encoding="utf-8") as f:
            f.write(message)
        return True


def _to_command_value(value: Union[str, bool]) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _key_value_message(name: str, value: str) -> str:
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}{os.linesep}{value}{os.linesep}{delimiter}{os.linesep}"


__all__ = [
    "HostEnvironment",
    "WorkflowCommandFormatter",
    "is_github_actions",
]
