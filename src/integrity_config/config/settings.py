"""
Integrity Configuration Settings

Loads service settings from a YAML file with environment variable overrides.
Settings cover the backend rule names that need special whitelist editing,
rule summary pagination defaults, and the country catalog.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ..logging import get_logger
from ..utils.constants import (
    COUNTRY_RULE_TYPE,
    DEFAULT_COUNTRIES,
    DEFAULT_PAGE_SIZE,
    REDIRECT_RULE_TYPE,
)
from ..whitelist.models import CountryOption, RuleKind

logger = get_logger("integrity.settings")

# Path: src/integrity_config/config/settings.py -> 4 parents to reach the project root
DEFAULT_SETTINGS_PATH = (
    Path(__file__).parent.parent.parent.parent / "config" / "integrity.yaml"
)


def _default_countries() -> list[CountryOption]:
    return [CountryOption.from_dict(c) for c in DEFAULT_COUNTRIES]


@dataclass
class IntegritySettings:
    """Settings for the integrity configuration service."""

    country_rule_name: str = COUNTRY_RULE_TYPE
    redirect_rule_name: str = REDIRECT_RULE_TYPE
    default_page_size: int = DEFAULT_PAGE_SIZE
    countries: list[CountryOption] = field(default_factory=_default_countries)

    def __post_init__(self):
        """Validate pagination defaults."""
        if self.default_page_size < 1:
            raise ValueError(
                f"default_page_size must be at least 1, got {self.default_page_size}"
            )

    def rule_kind(self, rule_name: str) -> RuleKind:
        """Get the whitelist editing kind for a backend rule name."""
        return RuleKind.from_rule_name(
            rule_name,
            country_rule_name=self.country_rule_name,
            redirect_rule_name=self.redirect_rule_name,
        )

    def country_values(self) -> list[str]:
        """Get all configured country codes."""
        return [country.value for country in self.countries]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "rule_types": {
                "country": self.country_rule_name,
                "redirect": self.redirect_rule_name,
            },
            "pagination": {"default_page_size": self.default_page_size},
            "countries": [country.to_dict() for country in self.countries],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IntegritySettings":
        """Create from dictionary (the YAML file layout)."""
        rule_types = data.get("rule_types", {}) or {}
        pagination = data.get("pagination", {}) or {}
        countries = data.get("countries")

        return cls(
            country_rule_name=rule_types.get("country", COUNTRY_RULE_TYPE),
            redirect_rule_name=rule_types.get("redirect", REDIRECT_RULE_TYPE),
            default_page_size=int(
                pagination.get("default_page_size", DEFAULT_PAGE_SIZE)
            ),
            countries=(
                [CountryOption.from_dict(c) for c in countries]
                if countries
                else _default_countries()
            ),
        )


def _apply_env_overrides(settings: IntegritySettings) -> IntegritySettings:
    """Apply environment variable overrides."""
    settings.country_rule_name = os.environ.get(
        "COUNTRY_RULE_NAME", settings.country_rule_name
    )
    settings.redirect_rule_name = os.environ.get(
        "REDIRECT_RULE_NAME", settings.redirect_rule_name
    )
    page_size = os.environ.get("DEFAULT_PAGE_SIZE")
    if page_size:
        try:
            settings.default_page_size = max(1, int(page_size))
        except ValueError:
            logger.warning("invalid_page_size_override", value=page_size)
    return settings


def load_settings(path: str | Path | None = None) -> IntegritySettings:
    """
    Load settings from YAML.

    Args:
        path: Settings file. Defaults to $INTEGRITY_CONFIG_PATH, then
              config/integrity.yaml at the project root.

    Returns:
        IntegritySettings (built-in defaults if the file is missing or invalid)
    """
    if path is None:
        path = os.environ.get("INTEGRITY_CONFIG_PATH", str(DEFAULT_SETTINGS_PATH))
    path = Path(path)

    settings = IntegritySettings()
    if path.exists():
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
            if data:
                settings = IntegritySettings.from_dict(data)
        except (yaml.YAMLError, ValueError, TypeError) as e:
            logger.error("settings_load_failed", path=str(path), error=str(e))
    else:
        logger.debug("settings_file_missing", path=str(path))

    return _apply_env_overrides(settings)


# Global instance for easy access
_settings: IntegritySettings | None = None


def get_settings() -> IntegritySettings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop the global settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
