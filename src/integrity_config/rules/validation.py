"""Validation for the rule, mapping and new-whitelist-entry forms."""

from dataclasses import dataclass, field
from typing import Any

from ..whitelist.models import ConfigurationBlock, ParameterCountryRow, RuleKind


@dataclass
class ValidationErrors:
    """Field -> message errors, grouped by form."""

    rule_form: dict[str, str] = field(default_factory=dict)
    mapping_form: dict[str, str] = field(default_factory=dict)
    new_key_values: dict[str, str] = field(default_factory=dict)
    selected_countries: str | None = None

    @property
    def has_errors(self) -> bool:
        return bool(
            self.rule_form
            or self.mapping_form
            or self.new_key_values
            or self.selected_countries
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "rule_form": self.rule_form,
            "mapping_form": self.mapping_form,
            "new_key_values": self.new_key_values,
        }
        if self.selected_countries:
            result["selected_countries"] = self.selected_countries
        return result


def validate_rule_form(rule_name: str, status: str) -> dict[str, str]:
    """Validate the rule name and status."""
    errors = {}

    name = (rule_name or "").strip()
    if not name:
        errors["rule_name"] = "Rule name is required"
    elif len(name) < 3:
        errors["rule_name"] = "Rule name must be at least 3 characters"

    if not status:
        errors["status"] = "Status is required"

    return errors


def validate_mapping_form(source: str, target: str) -> dict[str, str]:
    """Validate a mapping's source and target."""
    errors = {}

    if not (source or "").strip():
        errors["source"] = "Source is required"
    if not (target or "").strip():
        errors["target"] = "Target is required"

    return errors


def validate_new_key_values(
    rule_kind: RuleKind,
    rows: list[ParameterCountryRow],
    blocks: list[ConfigurationBlock],
    edit_mode: bool,
) -> dict[str, str]:
    """
    Validate whitelist entries pending in an add session.

    Row errors are keyed ``<row.id>_<field>``; block errors ``<block.id>``
    (no parameter selected) or ``<block.id>_<parameter>`` (missing value).
    Outside edit mode at least one row or block is required.
    """
    errors: dict[str, str] = {}

    if rule_kind.uses_parameter_rows:
        if not rows and not edit_mode:
            errors["general"] = "At least one parameter block is required"
            return errors

        for row in rows:
            if not row.parameter:
                errors[f"{row.id}_parameter"] = "Parameter is required"
            if not (row.value or "").strip():
                errors[f"{row.id}_value"] = "Value is required"
            if rule_kind == RuleKind.COUNTRY and not row.countries:
                errors[f"{row.id}_countries"] = "At least one country is required"
            if rule_kind == RuleKind.REDIRECT and not (row.threshold or "").strip():
                errors[f"{row.id}_threshold"] = "Threshold is required"
    else:
        if not blocks and not edit_mode:
            errors["general"] = "At least one configuration block is required"
            return errors

        for block in blocks:
            if not block.parameters:
                errors[block.id] = "At least one parameter is required"
                continue
            for param in block.parameters:
                if not (block.values.get(param) or "").strip():
                    errors[f"{block.id}_{param}"] = f"{param} value is required"

    return errors
