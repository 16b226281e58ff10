"""Rule schema: parsing, defaults and storage of formatting rules."""

from .defaults import DEFAULT_RULE_RECORD, default_rule_record, default_schema
from .models import (
    AllowedValues,
    ExactValue,
    HeadingStyleMap,
    MarginBounds,
    NumericRange,
    RuleSchema,
    ValidationResult,
)
from .rule_store import ReadWriteLock, RuleStore
from .schema_parser import load_rule_schema, parse_rule_schema

__all__ = [
    "DEFAULT_RULE_RECORD",
    "default_rule_record",
    "default_schema",
    "AllowedValues",
    "ExactValue",
    "HeadingStyleMap",
    "MarginBounds",
    "NumericRange",
    "RuleSchema",
    "ValidationResult",
    "ReadWriteLock",
    "RuleStore",
    "load_rule_schema",
    "parse_rule_schema",
]
