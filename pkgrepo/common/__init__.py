"""Common utilities for pkgrepo."""

from .logger import setup_logger, get_logger
from .config import load_config, load_typed_config, IndexConfig

__all__ = ["IndexConfig", "get_logger", "load_config", "load_typed_config", "setup_logger"]
