"""
Word Formatting Checker

Checks .docx documents against configurable formatting rules, marks every
violation with a Word comment, and infers rules from exemplar documents.
"""

__version__ = "0.1.0"

# Export main components
from .exceptions import (
    DecodeError,
    FormatCheckError,
    IntegrityError,
    PassStateError,
    SchemaError,
)
from .models.document import FormattedDocument
from .models.enums import PassState, RuleCategory, Severity
from .models.violation import ElementRef, Violation
from .parsers import FormattingResolver, PackageCodec, load_document, save_document
from .rules import RuleSchema, RuleStore, default_schema, parse_rule_schema
from .extractors import RuleExtractor
from .validation import ValidationEngine
from .generators import AnnotationConfig, AnnotationWriter, ReportRenderer
from .pipeline import (
    PassResult,
    ValidationPass,
    check_document,
    extract_rules,
    run_pass,
)

__all__ = [
    # Errors
    "DecodeError",
    "FormatCheckError",
    "IntegrityError",
    "PassStateError",
    "SchemaError",
    # Models
    "FormattedDocument",
    "PassState",
    "RuleCategory",
    "Severity",
    "ElementRef",
    "Violation",
    # Package codec
    "FormattingResolver",
    "PackageCodec",
    "load_document",
    "save_document",
    # Rules
    "RuleSchema",
    "RuleStore",
    "default_schema",
    "parse_rule_schema",
    # Components
    "RuleExtractor",
    "ValidationEngine",
    "AnnotationConfig",
    "AnnotationWriter",
    "ReportRenderer",
    # Pipeline
    "PassResult",
    "ValidationPass",
    "check_document",
    "extract_rules",
    "run_pass",
]
