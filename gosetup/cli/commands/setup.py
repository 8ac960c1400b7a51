"""
Setup command implementation.

Installs and activates the requested Go version.
"""

import logging
from pathlib import Path

from gosetup.cache.restore import DirectoryCacheTrigger
from gosetup.cli.utils import cli_values, report_failure
from gosetup.config.options import load_options
from gosetup.core.host import HostEnvironment
from gosetup.core.process import SubprocessRunner
from gosetup.toolchain.installer import GoInstaller
from gosetup.workflow import run_setup

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the setup command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    logger.debug(f"Arguments: {args}")

    try:
        options = load_options(cli_values(args), config_file=args.config)

        host = HostEnvironment()
        runner = SubprocessRunner()
        installer = GoInstaller(
            tool_cache_dir=Path(options.tool_cache) if options.tool_cache else None
        )
        cache_trigger = DirectoryCacheTrigger(
            runner,
            host,
            cache_dir=Path(options.cache_dir) if options.cache_dir else None,
        )

        run_setup(options, installer, cache_trigger, runner, host)
    except Exception as e:
        return report_failure(e, verbose=args.verbose)

    return 0
