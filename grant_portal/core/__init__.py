"""
Core utilities for Grant Portal.

This package provides shared functionality: logging configuration,
monitoring, the database layer and the domain/I-O models.
"""

from grant_portal.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
