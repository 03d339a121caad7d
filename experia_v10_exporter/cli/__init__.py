"""
Command Line Interface Package for the Experia Box V10 Exporter

- args.py: Argument parsing and validation
- logging_setup.py: Logging configuration
- main.py: Main orchestration and entry point

License: MIT
"""

from .main import main

__all__ = ["main"]
