"""
Coursekit Utils - Helper functions and utilities.
"""

from coursekit_core.utils.logging import (
    configure_from_config,
    get_logger,
    log_error,
    log_operation,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "configure_from_config",
    "get_logger",
    "log_operation",
    "log_error",
]
