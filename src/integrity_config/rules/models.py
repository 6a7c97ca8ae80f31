"""
Rule Configuration Models

Table-row and payload shapes for the integrity custom configuration:
fraud rules with their whitelist configuration, source/target mappings,
and the package-level custom configuration.
"""

import json
import math
from dataclasses import dataclass, field
from typing import Any

from ..utils.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, STATUS_FALSE, STATUS_TRUE


def to_json_text(value: Any) -> str:
    """Serialize to compact JSON text as stored in table rows."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


@dataclass
class ConfigRule:
    """
    A fraud rule as shown in the rules table and opened in the editor.

    Attributes:
        id: 1-based row number
        rule_name: Backend rule name (e.g. "mf_rule_redirect")
        status: "True" or "False"
        whitelist_configuration: Whitelist as JSON text ("" when empty)
        rule_configuration: Rule settings as JSON text
    """

    id: int
    rule_name: str
    status: str = STATUS_FALSE
    whitelist_configuration: str = ""
    rule_configuration: str = ""

    @property
    def is_enabled(self) -> bool:
        return self.status == STATUS_TRUE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "rule_name": self.rule_name,
            "status": self.status,
            "whitelist_configuration": self.whitelist_configuration,
            "rule_configuration": self.rule_configuration,
        }

    @classmethod
    def from_api(cls, item: dict[str, Any], index: int) -> "ConfigRule":
        """
        Create a table row from a rule summary item.

        Args:
            item: API item with rule_name, status (bool), whitelist_configuration
                  (list) and rule_configuration (dict)
            index: 0-based position in the page
        """
        whitelist = item.get("whitelist_configuration") or []
        return cls(
            id=index + 1,
            rule_name=item.get("rule_name", ""),
            status=STATUS_TRUE if item.get("status") else STATUS_FALSE,
            whitelist_configuration=to_json_text(whitelist) if whitelist else "",
            rule_configuration=to_json_text(item.get("rule_configuration") or {}),
        )


@dataclass
class MappingRule:
    """A source -> target mapping row."""

    id: int
    source: str
    target: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"id": self.id, "source": self.source, "target": self.target}

    @classmethod
    def from_api(cls, item: dict[str, Any], index: int) -> "MappingRule":
        """Create a table row from a mapping item."""
        return cls(
            id=index + 1,
            source=item.get("source", ""),
            target=item.get("target", ""),
        )


def build_mapping_payload(package_name: str, source: str, target: str) -> dict[str, Any]:
    """Build the update payload for a single mapping."""
    return {
        "package_name": package_name,
        "update_data": {source: target},
    }


def _parse_threshold(value: Any) -> int:
    """Parse a fraud threshold entered as text; 0 when blank or invalid."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


@dataclass
class CustomConfig:
    """Package-level custom configuration."""

    fraud_threshold: str = ""
    target_url: str = ""
    target_blocked_url: str = ""
    redirection: bool = False

    def to_update_payload(self, package_name: str) -> dict[str, Any]:
        """Build the payload for the custom configuration update API."""
        return {
            "package_name": package_name,
            "config_type": "rule_config",
            "update_data": self.to_api(),
        }

    def to_api(self) -> dict[str, Any]:
        """Convert to the API field layout."""
        return {
            "fraud_threshold": _parse_threshold(self.fraud_threshold),
            "target_url": self.target_url or "",
            "target_blocked_url": self.target_blocked_url or "",
            "redirection_status": bool(self.redirection),
        }

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CustomConfig":
        """Create from the API field layout."""
        threshold = data.get("fraud_threshold")
        return cls(
            fraud_threshold="" if threshold is None else str(threshold),
            target_url=data.get("target_url", "") or "",
            target_blocked_url=data.get("target_blocked_url", "") or "",
            redirection=bool(data.get("redirection_status", False)),
        )


@dataclass
class ConfigSummaryPage:
    """One page of the rule summary listing."""

    data: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0
    page_number: int = DEFAULT_PAGE
    record_limit: int = DEFAULT_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        if self.record_limit <= 0:
            return 0
        return math.ceil(self.total / self.record_limit)

    def rows(self) -> list[ConfigRule]:
        """Get the table rows for this page."""
        return [ConfigRule.from_api(item, i) for i, item in enumerate(self.data)]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "data": self.data,
            "total": self.total,
            "page_number": self.page_number,
            "record_limit": self.record_limit,
            "total_pages": self.total_pages,
        }
