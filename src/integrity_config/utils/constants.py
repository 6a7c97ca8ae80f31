"""Integrity Configuration Constants."""

# Backend rule names that need parameter-row editing instead of blocks
COUNTRY_RULE_TYPE = "mf_rule_incorrect_region_country"
REDIRECT_RULE_TYPE = "mf_rule_redirect"

# Reserved whitelist field names
COUNTRY_FIELD = "country"
THRESHOLD_FIELD = "threshold"
SCALAR_ITEM_FIELD = "item"

# Stored in place of a country list that covers every known country
ALL_COUNTRIES_SENTINEL = "all"

# Rule summary pagination
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

# Rule status as shown in the rules table
STATUS_TRUE = "True"
STATUS_FALSE = "False"

# Country options used when no catalog is configured
DEFAULT_COUNTRIES: list[dict[str, str]] = [
    {"label": "India", "value": "IN"},
    {"label": "United States", "value": "US"},
    {"label": "United Kingdom", "value": "GB"},
    {"label": "France", "value": "FR"},
    {"label": "Germany", "value": "DE"},
    {"label": "Indonesia", "value": "ID"},
    {"label": "Brazil", "value": "BR"},
    {"label": "Singapore", "value": "SG"},
    {"label": "United Arab Emirates", "value": "AE"},
    {"label": "Australia", "value": "AU"},
]
