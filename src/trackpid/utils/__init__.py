"""Utility functions."""

from .seed import get_rng
from .logging import setup_logging, get_logger

__all__ = [
    "get_rng",
    "setup_logging",
    "get_logger",
]
