"""
Whitelist Configuration Models

Value types shared by the whitelist codec and the rule editor:
rule kinds, the editor's pending parameter rows and configuration blocks,
country options, and the result of decoding a stored whitelist.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..utils.constants import COUNTRY_RULE_TYPE, REDIRECT_RULE_TYPE

# Synthetic key -> value. Values are strings, or string lists for "country".
FlatPairMap = dict[str, Any]

# Ordered list of whitelist configuration objects as sent to the API.
RuleWhitelistEntry = list[dict[str, Any]]


class RuleKind(str, Enum):
    """How new whitelist entries are collected for a rule."""

    COUNTRY = "country rule"  # parameter rows, countries required
    REDIRECT = "redirect rule"  # parameter rows, optional threshold
    GENERIC = "generic rule"  # configuration blocks

    @property
    def uses_parameter_rows(self) -> bool:
        """Whether pending entries are parameter rows rather than blocks."""
        return self in (RuleKind.COUNTRY, RuleKind.REDIRECT)

    @classmethod
    def from_rule_name(
        cls,
        rule_name: str,
        country_rule_name: str = COUNTRY_RULE_TYPE,
        redirect_rule_name: str = REDIRECT_RULE_TYPE,
    ) -> "RuleKind":
        """Map a backend rule name onto its kind."""
        if rule_name == country_rule_name:
            return cls.COUNTRY
        if rule_name == redirect_rule_name:
            return cls.REDIRECT
        return cls.GENERIC


@dataclass
class CountryOption:
    """A selectable country."""

    value: str
    label: str = ""

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for serialization."""
        return {"label": self.label, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CountryOption":
        """Create from dictionary."""
        return cls(
            value=data.get("value", "") or "",
            label=data.get("label", "") or "",
        )


@dataclass
class ParameterCountryRow:
    """
    A pending whitelist entry for country and redirect rules.

    Attributes:
        id: Editor-assigned row identifier
        parameter: Whitelisted field name (e.g. "isp")
        value: Whitelisted value for the field
        countries: Country codes the exception applies to (country rules)
        threshold: Optional threshold (redirect rules)
    """

    id: str
    parameter: str = ""
    value: str = ""
    countries: list[str] = field(default_factory=list)
    threshold: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "parameter": self.parameter,
            "value": self.value,
            "countries": list(self.countries),
            "threshold": self.threshold,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ParameterCountryRow":
        """Create from dictionary."""
        return cls(
            id=str(data.get("id", "")),
            parameter=data.get("parameter", "") or "",
            value=data.get("value", "") or "",
            countries=list(data.get("countries") or []),
            threshold=data.get("threshold", "") or "",
        )


@dataclass
class ConfigurationBlock:
    """
    A pending whitelist entry for generic rules.

    Attributes:
        id: Editor-assigned block identifier
        parameters: Selected field names
        values: Field name -> value for the selected fields
    """

    id: str
    parameters: list[str] = field(default_factory=list)
    values: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "parameters": list(self.parameters),
            "values": dict(self.values),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConfigurationBlock":
        """Create from dictionary."""
        return cls(
            id=str(data.get("id", "")),
            parameters=list(data.get("parameters") or []),
            values=dict(data.get("values") or {}),
        )


@dataclass
class PendingAdditions:
    """New whitelist entries collected during an add session."""

    rule_kind: RuleKind
    parameter_rows: list[ParameterCountryRow] = field(default_factory=list)
    configuration_blocks: list[ConfigurationBlock] = field(default_factory=list)

    @property
    def mode(self) -> str:
        """Which row shape is consumed: "parameterRows" or "configBlocks"."""
        return "parameterRows" if self.rule_kind.uses_parameter_rows else "configBlocks"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PendingAdditions":
        """
        Create from dictionary.

        Raises:
            ValueError: If the rule kind is unknown or the rows or blocks
                are not lists of objects
        """
        return cls(
            rule_kind=RuleKind(data.get("rule_kind", RuleKind.GENERIC.value)),
            parameter_rows=[
                ParameterCountryRow.from_dict(row)
                for row in _object_list(data, "parameter_rows")
            ],
            configuration_blocks=[
                ConfigurationBlock.from_dict(block)
                for block in _object_list(data, "configuration_blocks")
            ],
        )


def _object_list(data: dict[str, Any], name: str) -> list[dict[str, Any]]:
    """Get a list-of-objects field, absent meaning empty."""
    items = data.get(name)
    if items is None:
        return []
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise ValueError(f"{name} must be a list of objects")
    return items


@dataclass
class DecodeResult:
    """Outcome of decoding a stored whitelist configuration."""

    pairs: FlatPairMap = field(default_factory=dict)
    extracted_countries: list[str] = field(default_factory=list)
    error: str | None = None  # diagnostic when the input could not be used

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "pairs": self.pairs,
            "extracted_countries": self.extracted_countries,
            "error": self.error,
        }
