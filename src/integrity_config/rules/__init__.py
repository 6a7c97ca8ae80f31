"""
Rule Configuration Module

Fraud rule records, mappings and custom configuration, the edit session
used to change a rule's whitelist, form validation, and the in-memory
rule store backing the API.
"""

from .editor import (
    EditorError,
    EditorStateError,
    EditorValidationError,
    RuleEditorSession,
    RuleForm,
)
from .models import (
    ConfigRule,
    ConfigSummaryPage,
    CustomConfig,
    MappingRule,
    build_mapping_payload,
)
from .store import (
    PackageNotFoundError,
    RuleNotFoundError,
    RuleStore,
    RuleStoreError,
    get_rule_store,
)
from .validation import (
    ValidationErrors,
    validate_mapping_form,
    validate_new_key_values,
    validate_rule_form,
)

__all__ = [
    # Editor
    "EditorError",
    "EditorStateError",
    "EditorValidationError",
    "RuleEditorSession",
    "RuleForm",

    # Models
    "ConfigRule",
    "ConfigSummaryPage",
    "CustomConfig",
    "MappingRule",
    "build_mapping_payload",

    # Store
    "PackageNotFoundError",
    "RuleNotFoundError",
    "RuleStore",
    "RuleStoreError",
    "get_rule_store",

    # Validation
    "ValidationErrors",
    "validate_mapping_form",
    "validate_new_key_values",
    "validate_rule_form",
]
