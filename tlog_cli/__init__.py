"""
tlog CLI

Command-line interface for offline transparency log proof checking.

Usage:
    python -m tlog_cli consistency --first a.json --second b.json --proof proof.json
    python -m tlog_cli inclusion --sth sth.json --proof proof.json --leaf-input B64
    python -m tlog_cli tree entries.json --sth sth.json
    python -m tlog_cli path consistency 3 7
"""

__version__ = "0.1.0"
