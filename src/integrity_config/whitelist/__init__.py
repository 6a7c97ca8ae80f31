"""
Whitelist Configuration Module

Converts rule whitelist configurations between the stored JSON array of
objects and the flat, index-suffixed key/value pairs the rule editor works on.
"""

from .codec import (
    WhitelistDecodeError,
    decode,
    delete_key,
    encode,
    expand_country_selection,
    normalize_country_selection,
    parse_whitelist,
    split_synthetic_key,
    synthetic_key,
)
from .models import (
    ConfigurationBlock,
    CountryOption,
    DecodeResult,
    FlatPairMap,
    ParameterCountryRow,
    PendingAdditions,
    RuleKind,
    RuleWhitelistEntry,
)

__all__ = [
    # Codec
    "WhitelistDecodeError",
    "decode",
    "delete_key",
    "encode",
    "expand_country_selection",
    "normalize_country_selection",
    "parse_whitelist",
    "split_synthetic_key",
    "synthetic_key",

    # Models
    "ConfigurationBlock",
    "CountryOption",
    "DecodeResult",
    "FlatPairMap",
    "ParameterCountryRow",
    "PendingAdditions",
    "RuleKind",
    "RuleWhitelistEntry",
]
