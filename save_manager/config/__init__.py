"""Configuration management for save-manager."""

from .types import DEFAULT_DATE_FORMAT, SaveManagerConfig
from .loader import ConfigLoader

__all__ = [
    "DEFAULT_DATE_FORMAT",
    "SaveManagerConfig",
    "ConfigLoader",
]
