"""Utility functions and classes."""

from .config import load_config, save_config, Config
from .logging_utils import setup_logging, get_logger

__all__ = [
    "load_config",
    "save_config",
    "Config",
    "setup_logging",
    "get_logger",
]
