"""
Shared utilities for CLI commands.
"""

import argparse
import logging
import traceback
from typing import Any, Dict

from gosetup.config.options import option_names

logger = logging.getLogger(__name__)


def cli_values(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Collect option values given on the command line.

    Flags that were not given are None and do not override other sources.
    """
    values = {}
    for name, field_name in option_names().items():
        value = getattr(args, field_name, None)
        if value is not None:
            values[name] = value
    return values


def report_failure(error: BaseException, verbose: bool = False) -> int:
    """
    Log an error as the run's failure and return the exit code.

    Args:
        error: The error that aborted the run
        verbose: Also print the traceback

    Returns:
        Exit code 1
    """
    logger.error(str(error) or error.__class__.__name__)
    if verbose:
        traceback.print_exc()
    return 1
