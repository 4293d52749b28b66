"""Dirty Data analyzer -- application entry point.

Usage:
    python main.py analyze data/ledger.xlsx
    python main.py serve --port 8000

Run after ``pip install -e .``; see dirty_data.cli for the startup sequence.
"""

import sys

from dirty_data.cli import main

if __name__ == "__main__":
    sys.exit(main() or 0)
