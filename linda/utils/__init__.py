"""Utility modules for Linda."""

from linda.utils.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
