"""Integrity Configuration Utilities."""

from .constants import (
    ALL_COUNTRIES_SENTINEL,
    COUNTRY_FIELD,
    COUNTRY_RULE_TYPE,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    REDIRECT_RULE_TYPE,
)
from .id_generator import (
    generate_alphanumeric_id,
    generate_block_id,
    generate_row_id,
)

__all__ = [
    'ALL_COUNTRIES_SENTINEL',
    'COUNTRY_FIELD',
    'COUNTRY_RULE_TYPE',
    'DEFAULT_PAGE',
    'DEFAULT_PAGE_SIZE',
    'REDIRECT_RULE_TYPE',
    'generate_alphanumeric_id',
    'generate_block_id',
    'generate_row_id',
]
