"""
Entry point for running envdoc as a module.

Usage:
    python -m envdoc [path] [options]
"""

import sys

from envdoc.cli import main

if __name__ == "__main__":
    sys.exit(main())
