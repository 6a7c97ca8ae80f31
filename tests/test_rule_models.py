"""Tests for rule configuration models and form validation."""

import pytest

from integrity_config.rules.models import (
    ConfigRule,
    ConfigSummaryPage,
    CustomConfig,
    MappingRule,
    build_mapping_payload,
)
from integrity_config.rules.validation import (
    ValidationErrors,
    validate_mapping_form,
    validate_new_key_values,
    validate_rule_form,
)
from integrity_config.whitelist.models import (
    ConfigurationBlock,
    ParameterCountryRow,
    PendingAdditions,
    RuleKind,
)


class TestConfigRule:
    """Test conversion of API rule items to table rows."""

    def test_from_api(self):
        item = {
            "rule_name": "mf_rule_redirect",
            "status": True,
            "whitelist_configuration": [{"event_path": "/x", "threshold": "5"}],
            "rule_configuration": {"window": 60},
        }

        rule = ConfigRule.from_api(item, 0)

        assert rule.id == 1
        assert rule.rule_name == "mf_rule_redirect"
        assert rule.status == "True"
        assert rule.is_enabled is True
        assert rule.whitelist_configuration == '[{"event_path":"/x","threshold":"5"}]'
        assert rule.rule_configuration == '{"window":60}'

    def test_from_api_empty_whitelist(self):
        item = {
            "rule_name": "mf_rule_click_spam",
            "status": False,
            "whitelist_configuration": [],
            "rule_configuration": {},
        }

        rule = ConfigRule.from_api(item, 4)

        assert rule.id == 5
        assert rule.status == "False"
        assert rule.whitelist_configuration == ""
        assert rule.rule_configuration == "{}"


class TestMappingRule:
    """Test mapping rows and payloads."""

    def test_from_api(self):
        mapping = MappingRule.from_api({"source": "a", "target": "b"}, 2)
        assert mapping.to_dict() == {"id": 3, "source": "a", "target": "b"}

    def test_build_mapping_payload(self):
        payload = build_mapping_payload("com.example.app", "pub_a", "publisher_a")
        assert payload == {
            "package_name": "com.example.app",
            "update_data": {"pub_a": "publisher_a"},
        }


class TestCustomConfig:
    """Test custom configuration payloads."""

    def test_update_payload(self):
        config = CustomConfig(
            fraud_threshold="70",
            target_url="https://example.com",
            target_blocked_url="https://example.com/blocked",
            redirection=True,
        )

        payload = config.to_update_payload("com.example.app")

        assert payload == {
            "package_name": "com.example.app",
            "config_type": "rule_config",
            "update_data": {
                "fraud_threshold": 70,
                "target_url": "https://example.com",
                "target_blocked_url": "https://example.com/blocked",
                "redirection_status": True,
            },
        }

    @pytest.mark.parametrize("threshold", ["", "abc", None])
    def test_unparsable_threshold_is_zero(self, threshold):
        config = CustomConfig(fraud_threshold=threshold)
        assert config.to_api()["fraud_threshold"] == 0

    def test_from_api_round_trip(self):
        data = {
            "fraud_threshold": 40,
            "target_url": "u",
            "target_blocked_url": "b",
            "redirection_status": False,
        }
        assert CustomConfig.from_api(data).to_api() == data


class TestConfigSummaryPage:
    """Test rule summary pages."""

    def test_total_pages(self):
        assert ConfigSummaryPage(total=21, record_limit=10).total_pages == 3
        assert ConfigSummaryPage(total=20, record_limit=10).total_pages == 2
        assert ConfigSummaryPage(total=0, record_limit=10).total_pages == 0

    def test_rows(self):
        page = ConfigSummaryPage(
            data=[
                {"rule_name": "a", "status": True,
                 "whitelist_configuration": [], "rule_configuration": {}},
                {"rule_name": "b", "status": False,
                 "whitelist_configuration": [], "rule_configuration": {}},
            ],
            total=2,
        )

        rows = page.rows()

        assert [r.id for r in rows] == [1, 2]
        assert [r.rule_name for r in rows] == ["a", "b"]


class TestRuleFormValidation:
    """Test rule form validation."""

    def test_valid(self):
        assert validate_rule_form("mf_rule_redirect", "True") == {}

    def test_missing_name(self):
        errors = validate_rule_form("   ", "True")
        assert errors["rule_name"] == "Rule name is required"

    def test_short_name(self):
        errors = validate_rule_form("ab", "True")
        assert errors["rule_name"] == "Rule name must be at least 3 characters"

    def test_missing_status(self):
        assert validate_rule_form("rule", "") == {"status": "Status is required"}


class TestMappingFormValidation:
    """Test mapping form validation."""

    def test_valid(self):
        assert validate_mapping_form("a", "b") == {}

    def test_missing_both(self):
        assert validate_mapping_form("", " ") == {
            "source": "Source is required",
            "target": "Target is required",
        }


class TestNewKeyValidation:
    """Test validation of pending whitelist entries."""

    def test_country_rows_required_outside_edit_mode(self):
        errors = validate_new_key_values(RuleKind.COUNTRY, [], [], edit_mode=False)
        assert errors == {"general": "At least one parameter block is required"}

    def test_no_rows_allowed_in_edit_mode(self):
        assert validate_new_key_values(RuleKind.COUNTRY, [], [], edit_mode=True) == {}

    def test_country_row_errors(self):
        row = ParameterCountryRow(id="r1")

        errors = validate_new_key_values(RuleKind.COUNTRY, [row], [], edit_mode=True)

        assert errors == {
            "r1_parameter": "Parameter is required",
            "r1_value": "Value is required",
            "r1_countries": "At least one country is required",
        }

    def test_redirect_row_needs_threshold(self):
        row = ParameterCountryRow(id="r1", parameter="path", value="/x")

        errors = validate_new_key_values(RuleKind.REDIRECT, [row], [], edit_mode=True)

        assert errors == {"r1_threshold": "Threshold is required"}

    def test_valid_country_row(self):
        row = ParameterCountryRow(id="r1", parameter="isp", value="Jio", countries=["IN"])
        assert validate_new_key_values(RuleKind.COUNTRY, [row], [], edit_mode=True) == {}

    def test_blocks_required_outside_edit_mode(self):
        errors = validate_new_key_values(RuleKind.GENERIC, [], [], edit_mode=False)
        assert errors == {"general": "At least one configuration block is required"}

    def test_block_errors(self):
        blocks = [
            ConfigurationBlock(id="b1"),
            ConfigurationBlock(id="b2", parameters=["isp", "ip"], values={"isp": "Jio"}),
        ]

        errors = validate_new_key_values(RuleKind.GENERIC, [], blocks, edit_mode=True)

        assert errors == {
            "b1": "At least one parameter is required",
            "b2_ip": "ip value is required",
        }


class TestValidationErrors:
    """Test the aggregated validation errors."""

    def test_empty(self):
        assert ValidationErrors().has_errors is False

    def test_has_errors(self):
        errors = ValidationErrors(new_key_values={"general": "x"})
        assert errors.has_errors is True
        assert errors.to_dict()["new_key_values"] == {"general": "x"}


class TestPendingAdditions:
    """Test building pending additions from request data."""

    def test_from_dict(self):
        additions = PendingAdditions.from_dict(
            {
                "rule_kind": "redirect rule",
                "parameter_rows": [{"id": "r1", "parameter": "path", "value": "/x"}],
            }
        )

        assert additions.rule_kind == RuleKind.REDIRECT
        assert additions.mode == "parameterRows"
        assert additions.parameter_rows[0].value == "/x"
        assert additions.configuration_blocks == []

    def test_defaults_to_generic(self):
        additions = PendingAdditions.from_dict({"configuration_blocks": None})

        assert additions.rule_kind == RuleKind.GENERIC
        assert additions.mode == "configBlocks"
        assert additions.configuration_blocks == []

    @pytest.mark.parametrize(
        "data",
        [
            {"rule_kind": "unknown"},
            {"parameter_rows": ["x"]},
            {"parameter_rows": "rows"},
            {"configuration_blocks": [{"id": "b1"}, 3]},
        ],
    )
    def test_rejects_bad_shapes(self, data):
        with pytest.raises(ValueError):
            PendingAdditions.from_dict(data)
