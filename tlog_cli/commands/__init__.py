"""
CLI command modules.
"""

from tlog_cli.commands import tree, verify

__all__ = ["tree", "verify"]
