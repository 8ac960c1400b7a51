"""
Entry point for running gosetup as a module.

Usage: python -m gosetup [command] [options]
"""

from gosetup.cli.parser import main

if __name__ == "__main__":
    main()
