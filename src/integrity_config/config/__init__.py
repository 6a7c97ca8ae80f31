"""
Integrity Configuration Settings Module

Settings are read from config/integrity.yaml (or $INTEGRITY_CONFIG_PATH)
with environment variable overrides.
"""

from .settings import (
    IntegritySettings,
    get_settings,
    load_settings,
    reset_settings,
)

__all__ = [
    "IntegritySettings",
    "get_settings",
    "load_settings",
    "reset_settings",
]
