"""
Caller-owned environment mutations.

Setup steps never touch ``os.environ`` directly. Each step records the
directories it wants in front of ``PATH`` and the variables it wants exported
in an :class:`EnvironmentMutation`; the orchestrator applies the accumulated
mutation once through :class:`gosetup.core.host.HostEnvironment`.

Usage:
    mutation = EnvironmentMutation()
    mutation.prepend_path(Path("/opt/go/bin"))
    mutation.set_variable("GOROOT", "/opt/go")

    env = mutation.environ(os.environ)  # what later steps will see
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class EnvironmentMutation:
    """
    Accumulated search-path prepends and variable exports.

    Attributes:
        paths: Directories to prepend, in the order they were added
        variables: Variables to export
    """

    paths: List[Path] = field(default_factory=list)
    variables: Dict[str, str] = field(default_factory=dict)

    def prepend_path(self, directory: Union[str, Path]) -> bool:
        """
        Record a directory to prepend to the search path.

        Args:
            directory: Directory to add

        Returns:
            True if the directory was newly added, False if already recorded
        """
        directory = Path(directory)
        if directory in self.paths:
            logger.debug(f"Path already added: {directory}")
            return False

        self.paths.append(directory)
        return True

    def set_variable(self, name: str, value: Union[str, Path]) -> None:
        """Record a variable to export."""
        self.variables[name] = str(value)

    def merge(self, other: "EnvironmentMutation") -> "EnvironmentMutation":
        """
        Fold another mutation into this one.

        Paths keep their insertion order and are not duplicated; variables
        from ``other`` win.
        """
        for directory in other.paths:
            self.prepend_path(directory)
        self.variables.update(other.variables)
        return self

    def search_path(self, base_path: str = "") -> str:
        """
        Compute the PATH value after applying this mutation.

        The most recently prepended directory comes first, as if each
        prepend had been applied to the live environment in turn.
        """
        entries = [str(p) for p in reversed(self.paths)]
        if base_path:
            entries.append(base_path)
        return os.pathsep.join(entries)

    def environ(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Compute the full environment after applying this mutation.

        Args:
            base: Starting environment (default: ``os.environ``)

        Returns:
            New environment dictionary; ``base`` is not modified
        """
        env = dict(os.environ if base is None else base)
        env.update(self.variables)
        env["PATH"] = self.search_path(env.get("PATH", ""))
        return env

    def is_empty(self) -> bool:
        """Check whether the mutation would change anything."""
        return not self.paths and not self.variables


__all__ = ["EnvironmentMutation"]
