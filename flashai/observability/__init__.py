"""
Observability module: logging setup and correlation ID propagation.
"""

from flashai.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from flashai.observability.logger import configure_logging, get_logger

__all__ = [
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
]
