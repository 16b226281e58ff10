"""Enumerations for the formatting checker."""

from enum import Enum


class RuleCategory(Enum):
    """Categories of formatting rules a document is checked against."""
    BODY_FONT = "bodyFont"
    BODY_FONT_SIZE = "bodyFontSize"
    HEADING_FONT = "headingFont"
    HEADING_FONT_SIZE = "headingFontSize"
    INDENTATION = "indentation"
    LINE_SPACING = "lineSpacing"
    ALIGNMENT = "alignment"
    MARGINS = "margins"
    HEADING_STYLE = "headingStyle"


# Document order of categories, used to break ties between violations
# reported on the same element.
CATEGORY_ORDER = {category: position for position, category in enumerate(RuleCategory)}


class Severity(Enum):
    """How serious a violation is."""
    ERROR = "error"
    WARNING = "warning"


class ElementKind(Enum):
    """Kinds of document elements a violation can point at."""
    SECTION = "section"
    PARAGRAPH = "paragraph"
    RUN = "run"


class Alignment(Enum):
    """Paragraph alignment values understood by the rules."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"

    @classmethod
    def from_jc(cls, value: str) -> "Alignment":
        """Map a ``w:jc`` value to an alignment."""
        return _JC_MAP.get(value, cls.LEFT)


_JC_MAP = {
    "left": Alignment.LEFT,
    "start": Alignment.LEFT,
    "center": Alignment.CENTER,
    "right": Alignment.RIGHT,
    "end": Alignment.RIGHT,
    "both": Alignment.JUSTIFY,
    "distribute": Alignment.JUSTIFY,
    "justify": Alignment.JUSTIFY,
}


class LineSpacingRule(Enum):
    """Line spacing rules from ``w:spacing/@w:lineRule``."""
    AUTO = "auto"
    EXACT = "exact"
    AT_LEAST = "atLeast"


class PassState(Enum):
    """Lifecycle of a single checking pass."""
    LOADED = "loaded"
    VALIDATING = "validating"
    ANNOTATED = "annotated"
    SERIALIZED = "serialized"
