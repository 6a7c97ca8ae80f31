"""
Rule Editor Session

Holds the state of one rule edit: the whitelist as editable key/value
pairs, the rule configuration pairs, the country selection, and any new
whitelist entries pending in an add session. Produces the update payload
for the rule configuration API.
"""

import json
from dataclasses import dataclass, field, fields
from typing import Any, Optional

from ..config.settings import IntegritySettings, get_settings
from ..logging import editor_logger
from ..utils.constants import STATUS_FALSE, STATUS_TRUE
from ..utils.id_generator import generate_block_id, generate_row_id
from ..whitelist.codec import decode, delete_key, encode, normalize_country_selection
from ..whitelist.models import (
    ConfigurationBlock,
    CountryOption,
    FlatPairMap,
    ParameterCountryRow,
    PendingAdditions,
    RuleKind,
    RuleWhitelistEntry,
)
from .models import ConfigRule
from .validation import ValidationErrors, validate_new_key_values, validate_rule_form


class EditorError(Exception):
    """Base exception for rule editor errors."""
    pass


class EditorStateError(EditorError):
    """Raised when an operation needs a rule open for editing."""
    pass


class EditorValidationError(EditorError):
    """Raised when the rule form or pending entries are invalid."""

    def __init__(self, errors: ValidationErrors):
        super().__init__("Rule configuration is invalid")
        self.errors = errors


@dataclass
class RuleForm:
    """Rule name and status being edited."""

    rule_name: str = ""
    status: str = STATUS_FALSE


@dataclass
class RuleEditorSession:
    """
    Edit state for a single rule.

    Typical flow:
        session.begin_edit(rule)
        session.delete_pair("isp_1")
        session.initialize_add_mode()
        session.update_row(row_id, parameter="isp", value="Jio", countries=["IN"])
        payload = session.build_update_payload("com.example.app")
    """

    settings: IntegritySettings = field(default_factory=get_settings)

    form: RuleForm = field(default_factory=RuleForm)
    edit_mode: bool = False
    editing_rule_id: Optional[int] = None
    whitelist_pairs: FlatPairMap = field(default_factory=dict)
    rule_config_pairs: dict[str, Any] = field(default_factory=dict)
    selected_countries: list[str] = field(default_factory=list)

    add_mode: bool = False
    parameter_rows: list[ParameterCountryRow] = field(default_factory=list)
    configuration_blocks: list[ConfigurationBlock] = field(default_factory=list)

    @property
    def rule_kind(self) -> RuleKind:
        return self.settings.rule_kind(self.form.rule_name)

    # =========================================
    # Session lifecycle
    # =========================================

    def begin_edit(self, rule: ConfigRule) -> None:
        """Open a rule for editing, decoding its stored configuration."""
        log = editor_logger(rule.rule_name)
        self.reset()

        self.form = RuleForm(rule_name=rule.rule_name, status=rule.status)

        try:
            parsed = json.loads(rule.rule_configuration or "{}")
        except ValueError as e:
            log.warning("rule_configuration_parse_failed", error=str(e))
            parsed = {}
        self.rule_config_pairs = parsed if isinstance(parsed, dict) else {}

        decoded = decode(rule.whitelist_configuration or "[]")
        self.whitelist_pairs = decoded.pairs
        self.selected_countries = decoded.extracted_countries

        self.edit_mode = True
        self.editing_rule_id = rule.id
        log.debug("rule_edit_started", pairs=len(self.whitelist_pairs))

    def reset(self) -> None:
        """Clear all edit state."""
        self.form = RuleForm()
        self.edit_mode = False
        self.editing_rule_id = None
        self.whitelist_pairs = {}
        self.rule_config_pairs = {}
        self.selected_countries = []
        self.reset_additions()

    def reset_additions(self) -> None:
        """Leave add mode and discard pending rows and blocks."""
        self.add_mode = False
        self.parameter_rows = []
        self.configuration_blocks = []

    # =========================================
    # Existing entries
    # =========================================

    def update_pair(self, key: str, value: Any) -> None:
        """Set the value of one whitelist key."""
        self.whitelist_pairs = {**self.whitelist_pairs, key: value}

    def delete_pair(self, key: str) -> None:
        """Delete one whitelist key, renumbering the remaining objects."""
        self.whitelist_pairs = delete_key(self.whitelist_pairs, key)

    def update_rule_config(self, key: str, value: Any) -> None:
        """Set one rule configuration value."""
        self.rule_config_pairs = {**self.rule_config_pairs, key: value}

    def select_countries(
        self,
        values: list[str],
        all_countries: Optional[list[CountryOption]] = None,
    ) -> list[str]:
        """Store a country selection, collapsing a full selection to ["all"]."""
        countries = all_countries if all_countries is not None else self.settings.countries
        self.selected_countries = normalize_country_selection(values, countries)
        return self.selected_countries

    # =========================================
    # Pending additions
    # =========================================

    def initialize_add_mode(self) -> None:
        """Enter add mode with one empty row or block for the rule kind."""
        self.add_mode = True
        self.parameter_rows = []
        self.configuration_blocks = []
        if self.rule_kind.uses_parameter_rows:
            self.add_row()
        else:
            self.add_block()

    def add_row(self) -> ParameterCountryRow:
        row = ParameterCountryRow(id=generate_row_id())
        self.parameter_rows.append(row)
        return row

    def remove_row(self, row_id: str) -> None:
        self.parameter_rows = [r for r in self.parameter_rows if r.id != row_id]

    def update_row(self, row_id: str, **updates: Any) -> None:
        """Update fields of a pending row (parameter, value, countries, threshold)."""
        editable = {f.name for f in fields(ParameterCountryRow)} - {"id"}
        unknown = set(updates) - editable
        if unknown:
            raise ValueError(f"Unknown row field: {', '.join(sorted(unknown))}")

        for row in self.parameter_rows:
            if row.id == row_id:
                for name, value in updates.items():
                    setattr(row, name, value)

    def add_block(self) -> ConfigurationBlock:
        block = ConfigurationBlock(id=generate_block_id())
        self.configuration_blocks.append(block)
        return block

    def remove_block(self, block_id: str) -> None:
        self.configuration_blocks = [
            b for b in self.configuration_blocks if b.id != block_id
        ]

    def update_block_parameters(self, block_id: str, parameters: list[str]) -> None:
        """Set a block's selected parameters, dropping values of deselected ones."""
        for block in self.configuration_blocks:
            if block.id == block_id:
                block.parameters = list(parameters)
                block.values = {
                    k: v for k, v in block.values.items() if k in parameters
                }

    def update_block_value(self, block_id: str, parameter: str, value: str) -> None:
        for block in self.configuration_blocks:
            if block.id == block_id:
                block.values = {**block.values, parameter: value}

    def pending_additions(self) -> Optional[PendingAdditions]:
        """Get the pending entries, or None outside add mode."""
        if not self.add_mode:
            return None
        return PendingAdditions(
            rule_kind=self.rule_kind,
            parameter_rows=list(self.parameter_rows),
            configuration_blocks=list(self.configuration_blocks),
        )

    # =========================================
    # Submission
    # =========================================

    def validate(self) -> ValidationErrors:
        """Validate the rule form and, in add mode, the pending entries."""
        errors = ValidationErrors(
            rule_form=validate_rule_form(self.form.rule_name, self.form.status)
        )
        if self.add_mode:
            errors.new_key_values = validate_new_key_values(
                self.rule_kind,
                self.parameter_rows,
                self.configuration_blocks,
                self.edit_mode,
            )
        return errors

    def build_whitelist(self) -> RuleWhitelistEntry:
        """Encode existing pairs and pending entries into the stored shape."""
        return encode(self.whitelist_pairs, self.pending_additions())

    def build_update_payload(self, package_name: str) -> dict[str, Any]:
        """
        Build the payload for the rule update API.

        Args:
            package_name: Package the rule belongs to

        Returns:
            Payload with package_name, rule_name and update_data

        Raises:
            EditorStateError: If no rule is open for editing
            EditorValidationError: If the form or pending entries are invalid
        """
        if not self.edit_mode or self.editing_rule_id is None:
            raise EditorStateError("No rule is open for editing")

        errors = self.validate()
        if errors.has_errors:
            editor_logger(self.form.rule_name).info(
                "rule_validation_failed", errors=errors.to_dict()
            )
            raise EditorValidationError(errors)

        whitelist = self.build_whitelist()
        editor_logger(self.form.rule_name).info(
            "rule_update_prepared",
            package_name=package_name,
            whitelist_entries=len(whitelist),
        )

        return {
            "package_name": package_name,
            "rule_name": self.form.rule_name,
            "update_data": {
                "status": self.form.status == STATUS_TRUE,
                "whitelist_configuration": whitelist,
                "rule_configuration": dict(self.rule_config_pairs),
            },
        }
