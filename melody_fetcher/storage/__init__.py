"""
Storage Layer.

This package handles the configuration file and the on-disk placement of
fetched artifacts.
"""

from .cache import ScratchRoot, derive_key, resolve_path
from .config_manager import ConfigManager

__all__ = ["ConfigManager", "ScratchRoot", "derive_key", "resolve_path"]
