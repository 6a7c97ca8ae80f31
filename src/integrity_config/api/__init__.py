"""Integrity Configuration REST API."""

from .app import create_app, run_api
from .rules_api import BadRequestError, create_rules_api_blueprint

__all__ = [
    "BadRequestError",
    "create_app",
    "create_rules_api_blueprint",
    "run_api",
]
