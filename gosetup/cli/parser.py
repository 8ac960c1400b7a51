"""
gosetup CLI argument parser.

This module implements the command-line interface for gosetup using argparse.
"""

import argparse
import importlib
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from gosetup.core.host import WorkflowCommandFormatter, is_github_actions

try:
    from importlib.metadata import version

    __version__ = version("gosetup")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """gosetup command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="gosetup",
            description="gosetup - Provision a Go toolchain for CI jobs",
            epilog='Use "gosetup COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"gosetup {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./.gosetup.yaml)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_setup_command(subparsers)
        self._add_save_cache_command(subparsers)

        return parser

    def _add_setup_command(self, subparsers):
        """Add 'setup' subcommand."""
        parser = subparsers.add_parser(
            "setup",
            help="Install and activate a Go version",
            description=(
                "Resolve, install and activate a Go version, optionally restoring "
                "the module cache. Options may also come from INPUT_* variables "
                "or the configuration file."
            ),
        )
        parser.add_argument(
            "--go-version",
            dest="version",
            metavar="SPEC",
            help="Version or range to install (e.g. 1.21, ^1.20, stable)",
        )
        parser.add_argument(
            "--go-version-file",
            dest="version_file",
            metavar="PATH",
            help="File declaring the version (go.mod, go.work, .go-version, .tool-versions)",
        )
        parser.add_argument(
            "--cache",
            action="store_true",
            default=None,
            help="Restore the Go module and build cache",
        )
        parser.add_argument(
            "--cache-dependency-path",
            metavar="GLOB",
            help="Dependency file(s) keying the cache (default: go.sum)",
        )
        parser.add_argument(
            "--check-latest",
            action="store_true",
            default=None,
            help="Resolve the newest matching release instead of using the tool cache",
        )
        parser.add_argument(
            "--architecture",
            metavar="ARCH",
            help="Target architecture (default: host architecture)",
        )
        parser.add_argument(
            "--token",
            metavar="TOKEN",
            help="Token for the release manifest host (default: INPUT_TOKEN)",
        )
        parser.add_argument(
            "--tool-cache",
            metavar="PATH",
            help="Tool cache root (default: RUNNER_TOOL_CACHE or ~/.gosetup/tools)",
        )
        parser.add_argument(
            "--cache-dir",
            metavar="PATH",
            help="Dependency cache store (default: ~/.gosetup/cache)",
        )

    def _add_save_cache_command(self, subparsers):
        """Add 'save-cache' subcommand."""
        parser = subparsers.add_parser(
            "save-cache",
            help="Save the Go module and build cache",
            description="Archive the cache folders under the key computed by 'setup'",
        )
        parser.add_argument(
            "--cache-dir",
            metavar="PATH",
            help="Dependency cache store (default: ~/.gosetup/cache)",
        )

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (default: sys.argv[1:])

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (default: sys.argv[1:])

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        try:
            parsed_args = self.parse_args(args)
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        return self._dispatch_command(parsed_args)

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        handler = logging.StreamHandler(sys.stdout)
        if is_github_actions(os.environ):
            # The runner renders its own annotations; keep messages bare
            handler.setFormatter(WorkflowCommandFormatter("%(message)s"))
        else:
            handler.setFormatter(logging.Formatter(format_str))

        logging.basicConfig(
            level=level,
            handlers=[handler],
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "setup": "gosetup.cli.commands.setup",
            "save-cache": "gosetup.cli.commands.cache",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
