"""
Rule Configuration API

REST API endpoints for the integrity custom configuration: package custom
config, fraud rules and their whitelist configuration, mappings, country
options, and whitelist codec helpers for the rule editor.

Every endpoint is a POST taking a JSON body with ``package_name``.
"""

from typing import Any

from flask import Blueprint, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..config.settings import IntegritySettings
from ..logging import api_logger
from ..rules.store import PackageNotFoundError, RuleNotFoundError, RuleStore
from ..rules.validation import validate_mapping_form
from ..utils.constants import DEFAULT_PAGE
from ..whitelist.codec import decode, delete_key, encode
from ..whitelist.models import PendingAdditions


class BadRequestError(ValueError):
    """Raised when a request body is missing required fields."""
    pass


def create_rules_api_blueprint(
    store: RuleStore, settings: IntegritySettings
) -> Blueprint:
    """Create Flask blueprint for the rule configuration API."""
    bp = Blueprint("rules_api", __name__, url_prefix="/api/v1/integrity")

    def _error(message: str, status_code: int):
        return jsonify({"status": "error", "message": message}), status_code

    def _body() -> dict[str, Any]:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise BadRequestError("Request body must be a JSON object")
        log_context = g.get("log_context")
        if log_context is not None and isinstance(data.get("package_name"), str):
            log_context.bind(package_name=data["package_name"])
        return data

    def _require(data: dict[str, Any], name: str) -> Any:
        value = data.get(name)
        if value is None or value == "":
            raise BadRequestError(f"{name} is required")
        return value

    @bp.errorhandler(BadRequestError)
    def handle_bad_request(error: BadRequestError):
        return _error(str(error), 400)

    @bp.errorhandler(PackageNotFoundError)
    @bp.errorhandler(RuleNotFoundError)
    def handle_not_found(error: Exception):
        return _error(str(error), 404)

    @bp.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        if isinstance(error, HTTPException):
            return error
        api_logger().error(
            "request_failed", path=request.path, error=str(error), exc_info=True
        )
        return _error("Internal error", 500)

    # =========================================
    # Custom Configuration
    # =========================================

    @bp.route("/custom-config", methods=["POST"])
    def get_custom_config():
        """Get a package's custom configuration."""
        package_name = _require(_body(), "package_name")
        return jsonify(
            {"status": "success", "config": store.get_custom_config(package_name)}
        )

    @bp.route("/custom-config/edit", methods=["POST"])
    def edit_custom_config():
        """Update a package's custom configuration."""
        data = _body()
        package_name = _require(data, "package_name")
        update_data = _require(data, "update_data")
        if not isinstance(update_data, dict):
            raise BadRequestError("update_data must be an object")

        config = store.update_custom_config(package_name, update_data)
        return jsonify(
            {
                "status": "success",
                "message": "Custom configuration updated",
                "config": config,
            }
        )

    # =========================================
    # Rules
    # =========================================

    @bp.route("/rules/summary", methods=["POST"])
    def get_rules_summary():
        """Get one page of a package's rules."""
        data = _body()
        package_name = _require(data, "package_name")
        try:
            page_number = int(data.get("page_number", DEFAULT_PAGE))
            record_limit = int(data.get("record_limit", settings.default_page_size))
        except (TypeError, ValueError):
            raise BadRequestError("page_number and record_limit must be integers")

        page = store.get_summary(
            package_name,
            page_number=page_number,
            record_limit=record_limit,
            search_term=data.get("search_term", "") or "",
        )
        return jsonify({"status": "success", **page.to_dict()})

    @bp.route("/rules/edit", methods=["POST"])
    def edit_rule():
        """Update a rule's status, whitelist and rule configuration."""
        data = _body()
        package_name = _require(data, "package_name")
        rule_name = _require(data, "rule_name")
        update_data = _require(data, "update_data")
        if not isinstance(update_data, dict):
            raise BadRequestError("update_data must be an object")

        try:
            rule = store.update_rule(package_name, rule_name, update_data)
        except ValueError as e:
            raise BadRequestError(str(e)) from e

        return jsonify(
            {
                "status": "success",
                "message": f"Rule {rule_name} updated",
                "rule": rule,
            }
        )

    @bp.route("/rules/parameters", methods=["POST"])
    def get_rule_parameters():
        """Get the configuration parameter names for a package."""
        package_name = _require(_body(), "package_name")
        return jsonify(
            {"status": "success", "parameters": store.get_parameters(package_name)}
        )

    # =========================================
    # Mappings
    # =========================================

    @bp.route("/mapping", methods=["POST"])
    def get_mapping():
        """Get a package's source -> target mappings."""
        package_name = _require(_body(), "package_name")
        return jsonify(
            {"status": "success", "mappings": store.get_mappings(package_name)}
        )

    @bp.route("/mapping/update", methods=["POST"])
    def update_mapping():
        """Merge source -> target mappings into a package."""
        data = _body()
        package_name = _require(data, "package_name")
        update_data = _require(data, "update_data")
        if not isinstance(update_data, dict):
            raise BadRequestError("update_data must be an object")
        for source, target in update_data.items():
            if not isinstance(target, str):
                raise BadRequestError(f"Target for {source} must be a string")
            errors = validate_mapping_form(source, target)
            if errors:
                raise BadRequestError("; ".join(errors.values()))

        store.update_mappings(package_name, update_data)
        return jsonify({"status": "success", "message": "Mappings updated"})

    # =========================================
    # Countries
    # =========================================

    @bp.route("/countries", methods=["POST"])
    def get_countries():
        """Get the selectable country options."""
        return jsonify(
            {
                "status": "success",
                "countries": [c.to_dict() for c in settings.countries],
            }
        )

    # =========================================
    # Whitelist codec
    # =========================================

    @bp.route("/whitelist/decode", methods=["POST"])
    def decode_whitelist():
        """Decode stored whitelist text into editor key/value pairs."""
        data = _body()
        text = data.get("whitelist_configuration", "")
        if not isinstance(text, str):
            raise BadRequestError("whitelist_configuration must be JSON text")
        return jsonify({"status": "success", **decode(text).to_dict()})

    @bp.route("/whitelist/encode", methods=["POST"])
    def encode_whitelist():
        """Encode editor pairs plus pending additions into the stored shape."""
        data = _body()
        pairs = data.get("pairs", {})
        if not isinstance(pairs, dict):
            raise BadRequestError("pairs must be an object")

        additions = None
        if data.get("additions"):
            if not isinstance(data["additions"], dict):
                raise BadRequestError("additions must be an object")
            rule_name = data.get("rule_name", "")
            additions_data = dict(data["additions"])
            additions_data.setdefault(
                "rule_kind", settings.rule_kind(rule_name).value
            )
            try:
                additions = PendingAdditions.from_dict(additions_data)
            except ValueError as e:
                raise BadRequestError(f"Invalid additions: {e}") from e

        return jsonify(
            {"status": "success", "whitelist_configuration": encode(pairs, additions)}
        )

    @bp.route("/whitelist/delete-key", methods=["POST"])
    def delete_whitelist_key():
        """Delete one editor key and renumber the remaining pairs."""
        data = _body()
        pairs = data.get("pairs", {})
        if not isinstance(pairs, dict):
            raise BadRequestError("pairs must be an object")
        key = _require(data, "key")
        return jsonify({"status": "success", "pairs": delete_key(pairs, key)})

    return bp
