"""
In-memory rule configuration store.

Holds, per package, the fraud rules (in API shape), the configuration
parameter names offered in the whitelist editor, the source/target
mappings, and the custom configuration. Can be seeded from YAML.

Seed file layout:
    packages:
      com.example.app:
        custom_config: {fraud_threshold: 70, target_url: ..., ...}
        parameters: [isp, ip, event_path]
        mappings: {source_a: target_a}
        rules:
          - rule_name: mf_rule_redirect
            status: true
            whitelist_configuration: [{event_path: /x, threshold: "5"}]
            rule_configuration: {window: 60}
"""

import copy
import threading
from pathlib import Path
from typing import Any, Optional

import yaml

from ..logging import store_logger
from ..utils.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from .models import ConfigSummaryPage, CustomConfig


class RuleStoreError(Exception):
    """Base exception for rule store errors."""
    pass


class PackageNotFoundError(RuleStoreError):
    """Raised when a package is not found."""
    pass


class RuleNotFoundError(RuleStoreError):
    """Raised when a rule is not found in a package."""
    pass


class RuleStore:
    """Thread-safe in-memory store of rule configuration per package."""

    def __init__(self):
        self._lock = threading.Lock()
        self._packages: dict[str, dict[str, Any]] = {}

    # =========================================
    # Packages
    # =========================================

    def register_package(
        self,
        package_name: str,
        rules: Optional[list[dict[str, Any]]] = None,
        parameters: Optional[list[str]] = None,
        mappings: Optional[dict[str, str]] = None,
        custom_config: Optional[dict[str, Any]] = None,
    ) -> None:
        """Add or replace a package."""
        normalized_rules = [_normalize_rule(rule) for rule in rules or []]
        with self._lock:
            self._packages[package_name] = {
                "rules": {rule["rule_name"]: rule for rule in normalized_rules},
                "parameters": list(parameters or []),
                "mappings": dict(mappings or {}),
                "custom_config": CustomConfig.from_api(custom_config or {}).to_api(),
            }
        store_logger().info(
            "package_registered",
            package_name=package_name,
            rules=len(normalized_rules),
        )

    def list_packages(self) -> list[str]:
        with self._lock:
            return sorted(self._packages)

    def _package(self, package_name: str) -> dict[str, Any]:
        """Get a package's state. Caller must hold the lock."""
        package = self._packages.get(package_name)
        if package is None:
            raise PackageNotFoundError(f"Package not found: {package_name}")
        return package

    # =========================================
    # Rules
    # =========================================

    def get_summary(
        self,
        package_name: str,
        page_number: int = DEFAULT_PAGE,
        record_limit: int = DEFAULT_PAGE_SIZE,
        search_term: str = "",
    ) -> ConfigSummaryPage:
        """
        Get one page of a package's rules.

        Args:
            package_name: Package to list
            page_number: 1-based page number
            record_limit: Rules per page
            search_term: Case-insensitive substring filter on rule name
        """
        page_number = max(1, page_number)
        record_limit = max(1, record_limit)
        needle = (search_term or "").strip().lower()

        with self._lock:
            rules = [
                copy.deepcopy(rule)
                for rule in self._package(package_name)["rules"].values()
                if needle in rule["rule_name"].lower()
            ]

        start = (page_number - 1) * record_limit
        return ConfigSummaryPage(
            data=rules[start:start + record_limit],
            total=len(rules),
            page_number=page_number,
            record_limit=record_limit,
        )

    def get_rule(self, package_name: str, rule_name: str) -> dict[str, Any]:
        with self._lock:
            rule = self._package(package_name)["rules"].get(rule_name)
            if rule is None:
                raise RuleNotFoundError(f"Rule not found: {rule_name}")
            return copy.deepcopy(rule)

    def update_rule(
        self, package_name: str, rule_name: str, update_data: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Update a rule's status, whitelist and rule configuration.

        Fields missing from update_data are left unchanged.

        Raises:
            PackageNotFoundError: If the package is unknown
            RuleNotFoundError: If the rule is unknown
            ValueError: If a field has the wrong shape
        """
        whitelist = update_data.get("whitelist_configuration")
        if whitelist is not None and not isinstance(whitelist, list):
            raise ValueError("whitelist_configuration must be a list")
        rule_config = update_data.get("rule_configuration")
        if rule_config is not None and not isinstance(rule_config, dict):
            raise ValueError("rule_configuration must be an object")

        with self._lock:
            rule = self._package(package_name)["rules"].get(rule_name)
            if rule is None:
                raise RuleNotFoundError(f"Rule not found: {rule_name}")

            if "status" in update_data:
                rule["status"] = bool(update_data["status"])
            if whitelist is not None:
                rule["whitelist_configuration"] = copy.deepcopy(whitelist)
            if rule_config is not None:
                rule["rule_configuration"] = copy.deepcopy(rule_config)
            result = copy.deepcopy(rule)

        store_logger().info(
            "rule_updated",
            package_name=package_name,
            rule_name=rule_name,
            whitelist_entries=len(result["whitelist_configuration"]),
        )
        return result

    def get_parameters(self, package_name: str) -> list[str]:
        with self._lock:
            return list(self._package(package_name)["parameters"])

    # =========================================
    # Mappings
    # =========================================

    def get_mappings(self, package_name: str) -> list[dict[str, str]]:
        with self._lock:
            mappings = self._package(package_name)["mappings"]
            return [{"source": s, "target": t} for s, t in mappings.items()]

    def update_mappings(self, package_name: str, update_data: dict[str, str]) -> None:
        """Merge source -> target pairs into a package's mappings."""
        with self._lock:
            self._package(package_name)["mappings"].update(update_data)
        store_logger().info(
            "mappings_updated", package_name=package_name, count=len(update_data)
        )

    # =========================================
    # Custom configuration
    # =========================================

    def get_custom_config(self, package_name: str) -> dict[str, Any]:
        with self._lock:
            return dict(self._package(package_name)["custom_config"])

    def update_custom_config(
        self, package_name: str, update_data: dict[str, Any]
    ) -> dict[str, Any]:
        """Replace a package's custom configuration."""
        config = CustomConfig.from_api(update_data).to_api()
        with self._lock:
            self._package(package_name)["custom_config"] = config
        store_logger().info("custom_config_updated", package_name=package_name)
        return dict(config)

    # =========================================
    # Seeding
    # =========================================

    def load_yaml(self, path: str | Path) -> int:
        """
        Register every package in a YAML seed file.

        Returns:
            Number of packages loaded
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        packages = data.get("packages", {}) or {}
        for package_name, package_data in packages.items():
            package_data = package_data or {}
            self.register_package(
                package_name,
                rules=package_data.get("rules"),
                parameters=package_data.get("parameters"),
                mappings=package_data.get("mappings"),
                custom_config=package_data.get("custom_config"),
            )
        return len(packages)


def _normalize_rule(rule: dict[str, Any]) -> dict[str, Any]:
    """Fill a rule record with the fields the API returns."""
    if not rule.get("rule_name"):
        raise ValueError("Rule record needs a rule_name")
    return {
        "rule_name": rule["rule_name"],
        "status": bool(rule.get("status", False)),
        "whitelist_configuration": copy.deepcopy(
            rule.get("whitelist_configuration") or []
        ),
        "rule_configuration": copy.deepcopy(rule.get("rule_configuration") or {}),
    }


# Global instance for easy access
_store: Optional[RuleStore] = None


def get_rule_store() -> RuleStore:
    """Get the global rule store instance."""
    global _store
    if _store is None:
        _store = RuleStore()
    return _store
