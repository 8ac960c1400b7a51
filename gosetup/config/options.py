"""
Setup options.

Options are read, highest precedence first, from:

1. command-line flags
2. ``INPUT_<NAME>`` environment variables (how GitHub Actions passes
   ``with:`` inputs, e.g. ``INPUT_GO-VERSION``)
3. a YAML file (``--config``, or ``.gosetup.yaml`` in the working directory)

Example ``.gosetup.yaml``:

    version-file: go.mod
    cache: true
    cache-dependency-path: |
      go.sum
      tools/go.sum
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from gosetup.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".gosetup.yaml"

# Accepted spellings -> option name
OPTION_ALIASES = {
    "go-version": "version",
    "go-version-file": "version-file",
}

_TRUE_VALUES = ("true", "yes", "1", "on")
_FALSE_VALUES = ("false", "no", "0", "off", "")


@dataclass
class SetupOptions:
    """
    Options consumed at the start of a setup run.

    Attributes:
        version: Explicit version spec (e.g. '1.21', '^1.20', 'stable')
        version_file: File declaring the version (go.mod, .go-version, ...)
        cache: Restore the Go module/build cache
        check_latest: Resolve the newest matching release before using the tool cache
        architecture: Target architecture (default: host architecture)
        token: Credential sent to the release manifest host
        cache_dependency_path: Glob(s) of files keying the cache (default: go.sum)
        tool_cache: Tool cache root override
        cache_dir: Dependency cache store override
    """

    version: Optional[str] = None
    version_file: Optional[str] = None
    cache: bool = False
    check_latest: bool = False
    architecture: Optional[str] = None
    token: Optional[str] = None
    cache_dependency_path: Optional[str] = None
    tool_cache: Optional[str] = None
    cache_dir: Optional[str] = None

    @property
    def auth(self) -> Optional[str]:
        """Authorization header value for the manifest host."""
        return f"token {self.token}" if self.token else None


def option_names() -> Dict[str, str]:
    """Map option names ('check-latest') to dataclass fields ('check_latest')."""
    return {f.name.replace("_", "-"): f.name for f in fields(SetupOptions)}


def parse_bool(name: str, value: Any) -> bool:
    """
    Parse a boolean option value.

    Raises:
        ConfigurationError: If the value is not a recognized boolean
    """
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Invalid boolean value for {name}: {value!r}. "
        f"Use one of: {', '.join(_TRUE_VALUES + _FALSE_VALUES[:-1])}"
    )


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigurationError: If the file is required and missing, or is invalid
    """
    if not config_file.exists():
        if required:
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration in {config_file} must be a mapping")
    return config


def _canonical(name: str) -> str:
    name = name.strip().lower().replace("_", "-")
    return OPTION_ALIASES.get(name, name)


def _from_environment(environ: Mapping[str, str]) -> Dict[str, str]:
    values = {}
    for key, value in environ.items():
        if key.upper().startswith("INPUT_") and value.strip():
            values[_canonical(key[len("INPUT_"):])] = value.strip()
    return values


def load_options(
    cli_values: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    config_file: Optional[Path] = None,
) -> SetupOptions:
    """
    Merge option sources into SetupOptions.

    Args:
        cli_values: Values from command-line flags; None values are ignored
        environ: Environment holding INPUT_* variables (default: os.environ)
        config_file: YAML file; when None, ``.gosetup.yaml`` is used if present

    Raises:
        ConfigurationError: For unknown options in the YAML file, a missing
            explicit config file, or invalid boolean values
    """
    environ = os.environ if environ is None else environ
    names = option_names()

    if config_file is not None:
        file_values = load_yaml_config(Path(config_file), required=True)
    else:
        file_values = load_yaml_config(Path.cwd() / DEFAULT_CONFIG_FILE)

    merged: Dict[str, Any] = {}
    for key, value in file_values.items():
        name = _canonical(str(key))
        if name not in names:
            raise ConfigurationError(f"Unknown option in configuration file: {key}")
        if value is not None:
            merged[name] = value

    for name, value in _from_environment(environ).items():
        if name in names:
            merged[name] = value

    for key, value in (cli_values or {}).items():
        if value is not None:
            merged[_canonical(key)] = value

    options = SetupOptions()
    for name, value in merged.items():
        field_name = names.get(name)
        if field_name is None:
            continue
        if field_name in ("cache", "check_latest"):
            value = parse_bool(name, value)
        else:
            value = str(value).strip() or None
        setattr(options, field_name, value)

    logger.debug(f"Options: {_redacted(options)}")
    return options


def _redacted(options: SetupOptions) -> Dict[str, Any]:
    values = {f.name: getattr(options, f.name) for f in fields(options)}
    if values.get("token"):
        values["token"] = "***"
    return values


__all__ = [
    "SetupOptions",
    "DEFAULT_CONFIG_FILE",
    "load_options",
    "load_yaml_config",
    "parse_bool",
]
