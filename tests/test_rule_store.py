"""Tests for the in-memory rule store and settings loading."""

import pytest

from integrity_config.config.settings import (
    IntegritySettings,
    get_settings,
    load_settings,
    reset_settings,
)
from integrity_config.rules.store import (
    PackageNotFoundError,
    RuleNotFoundError,
    RuleStore,
)
from integrity_config.whitelist.models import RuleKind

PACKAGE = "com.example.shop"


@pytest.fixture
def store():
    """Store with one package of three rules."""
    store = RuleStore()
    store.register_package(
        PACKAGE,
        rules=[
            {
                "rule_name": "mf_rule_incorrect_region_country",
                "status": True,
                "whitelist_configuration": [{"isp": "AT&T", "country": ["US"]}],
                "rule_configuration": {"window_minutes": 60},
            },
            {"rule_name": "mf_rule_redirect"},
            {"rule_name": "mf_rule_click_spam", "status": True},
        ],
        parameters=["isp", "ip"],
        mappings={"pub_a": "publisher_a"},
        custom_config={"fraud_threshold": 70, "redirection_status": True},
    )
    return store


class TestRuleStore:
    """Test rule store operations."""

    def test_summary_all(self, store):
        page = store.get_summary(PACKAGE)

        assert page.total == 3
        assert page.total_pages == 1
        assert [r["rule_name"] for r in page.data] == [
            "mf_rule_incorrect_region_country",
            "mf_rule_redirect",
            "mf_rule_click_spam",
        ]

    def test_summary_pagination(self, store):
        page = store.get_summary(PACKAGE, page_number=2, record_limit=2)

        assert page.total == 3
        assert page.total_pages == 2
        assert [r["rule_name"] for r in page.data] == ["mf_rule_click_spam"]

    def test_summary_search(self, store):
        page = store.get_summary(PACKAGE, search_term="REDIRECT")

        assert page.total == 1
        assert page.data[0]["rule_name"] == "mf_rule_redirect"

    def test_rule_defaults_filled(self, store):
        rule = store.get_rule(PACKAGE, "mf_rule_redirect")

        assert rule == {
            "rule_name": "mf_rule_redirect",
            "status": False,
            "whitelist_configuration": [],
            "rule_configuration": {},
        }

    def test_update_rule(self, store):
        updated = store.update_rule(
            PACKAGE,
            "mf_rule_redirect",
            {
                "status": True,
                "whitelist_configuration": [{"path": "/x", "threshold": "5"}],
            },
        )

        assert updated["status"] is True
        assert updated["whitelist_configuration"] == [{"path": "/x", "threshold": "5"}]
        assert updated["rule_configuration"] == {}

    def test_update_rule_rejects_bad_whitelist(self, store):
        with pytest.raises(ValueError):
            store.update_rule(
                PACKAGE, "mf_rule_redirect", {"whitelist_configuration": "[]"}
            )

    def test_returned_rules_are_copies(self, store):
        rule = store.get_rule(PACKAGE, "mf_rule_incorrect_region_country")
        rule["whitelist_configuration"].append({"isp": "x"})

        again = store.get_rule(PACKAGE, "mf_rule_incorrect_region_country")
        assert len(again["whitelist_configuration"]) == 1

    def test_unknown_package(self, store):
        with pytest.raises(PackageNotFoundError):
            store.get_summary("com.unknown")

    def test_unknown_rule(self, store):
        with pytest.raises(RuleNotFoundError):
            store.update_rule(PACKAGE, "nope", {"status": True})

    def test_rule_without_name_rejected(self):
        with pytest.raises(ValueError):
            RuleStore().register_package(PACKAGE, rules=[{"status": True}])

    def test_mappings_merge(self, store):
        store.update_mappings(PACKAGE, {"pub_b": "publisher_b"})

        assert store.get_mappings(PACKAGE) == [
            {"source": "pub_a", "target": "publisher_a"},
            {"source": "pub_b", "target": "publisher_b"},
        ]

    def test_custom_config(self, store):
        assert store.get_custom_config(PACKAGE) == {
            "fraud_threshold": 70,
            "target_url": "",
            "target_blocked_url": "",
            "redirection_status": True,
        }

        updated = store.update_custom_config(PACKAGE, {"fraud_threshold": "55"})

        assert updated["fraud_threshold"] == 55
        assert updated["redirection_status"] is False

    def test_parameters(self, store):
        assert store.get_parameters(PACKAGE) == ["isp", "ip"]

    def test_load_yaml(self, tmp_path):
        seed = tmp_path / "packages.yaml"
        seed.write_text(
            "packages:\n"
            "  com.a:\n"
            "    rules:\n"
            "      - rule_name: mf_rule_redirect\n"
            "        status: true\n"
            "  com.b: {}\n"
        )
        store = RuleStore()

        assert store.load_yaml(seed) == 2
        assert store.list_packages() == ["com.a", "com.b"]
        assert store.get_rule("com.a", "mf_rule_redirect")["status"] is True


class TestSettings:
    """Test settings loading."""

    def test_defaults(self):
        settings = IntegritySettings()

        assert settings.default_page_size == 10
        assert "IN" in settings.country_values()
        assert settings.rule_kind("mf_rule_incorrect_region_country") == RuleKind.COUNTRY
        assert settings.rule_kind("mf_rule_redirect") == RuleKind.REDIRECT
        assert settings.rule_kind("anything_else") == RuleKind.GENERIC

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            IntegritySettings(default_page_size=0)

    def test_load_yaml(self, tmp_path, monkeypatch):
        monkeypatch.delenv("COUNTRY_RULE_NAME", raising=False)
        monkeypatch.delenv("REDIRECT_RULE_NAME", raising=False)
        monkeypatch.delenv("DEFAULT_PAGE_SIZE", raising=False)
        path = tmp_path / "integrity.yaml"
        path.write_text(
            "rule_types:\n"
            "  country: geo_rule\n"
            "pagination:\n"
            "  default_page_size: 25\n"
            "countries:\n"
            "  - {label: India, value: IN}\n"
        )

        settings = load_settings(path)

        assert settings.country_rule_name == "geo_rule"
        assert settings.redirect_rule_name == "mf_rule_redirect"
        assert settings.default_page_size == 25
        assert settings.country_values() == ["IN"]

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "missing.yaml")
        assert settings.country_rule_name == "mf_rule_incorrect_region_country"

    def test_invalid_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "integrity.yaml"
        path.write_text("rule_types: [unclosed\n")

        settings = load_settings(path)

        assert settings.default_page_size == 10

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("REDIRECT_RULE_NAME", "redirect_v2")
        monkeypatch.setenv("DEFAULT_PAGE_SIZE", "50")

        settings = load_settings(tmp_path / "missing.yaml")

        assert settings.redirect_rule_name == "redirect_v2"
        assert settings.default_page_size == 50

    def test_global_settings_from_env_path(self, tmp_path, monkeypatch):
        path = tmp_path / "integrity.yaml"
        path.write_text("pagination:\n  default_page_size: 7\n")
        monkeypatch.setenv("INTEGRITY_CONFIG_PATH", str(path))
        monkeypatch.delenv("DEFAULT_PAGE_SIZE", raising=False)
        reset_settings()

        try:
            assert get_settings().default_page_size == 7
        finally:
            reset_settings()
