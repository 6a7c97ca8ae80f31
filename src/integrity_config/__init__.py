"""
Integrity Configuration service.

Backend for the integrity console's custom configuration: fraud rules and
their whitelist exceptions, source/target mappings, and package settings.
The whitelist codec converts stored whitelist configurations to and from
the flat key/value pairs the rule editor works on.
"""

__version__ = '1.0.0'

from .config import IntegritySettings, get_settings
from .rules import ConfigRule, RuleEditorSession, RuleStore
from .whitelist import (
    DecodeResult,
    RuleKind,
    decode,
    delete_key,
    encode,
    normalize_country_selection,
)

__all__ = [
    'IntegritySettings',
    'get_settings',
    'ConfigRule',
    'RuleEditorSession',
    'RuleStore',
    'DecodeResult',
    'RuleKind',
    'decode',
    'delete_key',
    'encode',
    'normalize_country_selection',
]
