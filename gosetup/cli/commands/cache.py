"""
Save-cache command implementation.

Archives the Go module and build cache after the job's build steps.
"""

import logging
from pathlib import Path

from gosetup.cache.restore import DirectoryCacheTrigger
from gosetup.cli.utils import report_failure
from gosetup.config.options import load_options
from gosetup.core.host import HostEnvironment
from gosetup.core.process import SubprocessRunner

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the save-cache command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    try:
        options = load_options({"cache-dir": args.cache_dir}, config_file=args.config)
        cache_trigger = DirectoryCacheTrigger(
            SubprocessRunner(),
            HostEnvironment(),
            cache_dir=Path(options.cache_dir) if options.cache_dir else None,
        )
        if not cache_trigger.is_cache_feature_available():
            return 0
        cache_trigger.save()
    except Exception as e:
        return report_failure(e, verbose=args.verbose)

    return 0
