"""
Subprocess invocation behind the :class:`CommandRunner` capability.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

from gosetup.core.exceptions import ExternalToolError
from gosetup.core.interfaces import CommandRunner

logger = logging.getLogger(__name__)


class SubprocessRunner(CommandRunner):
    """
    Run real processes with :mod:`subprocess`.

    Example:
        >>> runner = SubprocessRunner()
        >>> go = runner.which("go")
        >>> runner.invoke(str(go), ["version"])
        'go version go1.21.0 linux/amd64\\n'
    """

    def __init__(self, timeout: Optional[int] = None):
        """
        Args:
            timeout: Optional per-command timeout in seconds
        """
        self.timeout = timeout

    def which(self, name: str, env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
        search_path = env.get("PATH") if env is not None else None
        found = shutil.which(name, path=search_path)
        logger.debug(f"which {name} :{found}:")
        return Path(found) if found else None

    def invoke(
        self,
        command: str,
        args: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
    ) -> str:
        cmdline = " ".join([command, *args])
        logger.debug(f"Running: {cmdline}")

        try:
            result = subprocess.run(
                [command, *args],
                capture_output=True,
                text=True,
                env=dict(env) if env is not None else None,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ExternalToolError(cmdline, f"timed out after {self.timeout}s") from e
        except OSError as e:
            raise ExternalToolError(cmdline, str(e)) from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise ExternalToolError(
                cmdline,
                f"exited with code {result.returncode}"
                + (f": {stderr}" if stderr else ""),
                returncode=result.returncode,
            )

        return result.stdout


__all__ = ["SubprocessRunner"]
