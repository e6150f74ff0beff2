"""
Services package - Process-level services for Cold Wallet.

Contains:
- Logging configuration and daily log file retention
"""

from .logging import configure_logging, get_log_file_path, cleanup_old_logs

__all__ = [
    "configure_logging",
    "get_log_file_path",
    "cleanup_old_logs",
]
