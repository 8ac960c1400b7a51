"""
Entry point for running the gosetup CLI as a module.

Usage: python -m gosetup.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
