"""
Common utilities package for the Daily Tasks application.

Authentication helpers live in `app.utils.auth` and the calendar clock in
`app.utils.clock`; both read `app.config` and are imported from their modules.
"""

from app.utils.logger import setup_logger

__all__ = [
    # Logging utilities
    "setup_logger",
]
