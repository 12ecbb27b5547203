"""
Observability package.

Logging configuration, correlation IDs and request middleware.
"""

from waine.observability.correlation import get_correlation_id, set_correlation_id
from waine.observability.logger import configure_logging

__all__ = [
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]
