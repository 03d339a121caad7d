"""
CLI package main module for direct execution.

This allows the CLI to be run with: python -m experia_v10_exporter.cli

License: MIT
"""

import sys

from .main import main

if __name__ == "__main__":
    if sys.argv and sys.argv[0].endswith("__main__.py"):
        sys.argv[0] = "experia-v10-exporter"

    sys.exit(main() or 0)
