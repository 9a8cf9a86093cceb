"""Configuration module for the productivity archive."""

from productivity_archive.config.base import Settings
from productivity_archive.config.loader import get_settings

__all__ = ["Settings", "get_settings"]
