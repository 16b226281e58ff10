"""Data models for the formatting checker."""

from .document import (
    BUILTIN_DEFAULTS,
    DocumentParagraph,
    DocumentSection,
    FormatProperties,
    FormattedDocument,
    LineSpacing,
    NumberingLevel,
    NumberingTable,
    PageMargins,
    StyleDefinition,
    StyleTable,
    TextRun,
)
from .enums import (
    Alignment,
    ElementKind,
    LineSpacingRule,
    PassState,
    RuleCategory,
    Severity,
)
from .violation import ElementRef, Violation

__all__ = [
    "BUILTIN_DEFAULTS",
    "DocumentParagraph",
    "DocumentSection",
    "FormatProperties",
    "FormattedDocument",
    "LineSpacing",
    "NumberingLevel",
    "NumberingTable",
    "PageMargins",
    "StyleDefinition",
    "StyleTable",
    "TextRun",
    "Alignment",
    "ElementKind",
    "LineSpacingRule",
    "PassState",
    "RuleCategory",
    "Severity",
    "ElementRef",
    "Violation",
]
