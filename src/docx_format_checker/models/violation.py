"""Violation records produced by a validation pass."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .enums import CATEGORY_ORDER, ElementKind, RuleCategory, Severity


@dataclass(frozen=True)
class ElementRef:
    """
    Stable reference to a section, paragraph or run of a document.

    ``paragraph_index`` is global across sections. Section references
    carry the index of the first paragraph of the section so that they
    sort ahead of the paragraphs they contain.
    """
    kind: ElementKind
    section_index: int
    paragraph_index: Optional[int] = None
    run_index: Optional[int] = None

    @property
    def order_key(self) -> Tuple[int, int, int]:
        paragraph = self.paragraph_index if self.paragraph_index is not None else -1
        if self.kind is ElementKind.SECTION:
            return (paragraph, 0, 0)
        if self.kind is ElementKind.PARAGRAPH:
            return (paragraph, 1, 0)
        return (paragraph, 2, self.run_index or 0)

    def __str__(self) -> str:
        if self.kind is ElementKind.SECTION:
            return f"section {self.section_index + 1}"
        if self.kind is ElementKind.PARAGRAPH:
            return f"paragraph {self.paragraph_index + 1}"
        return f"paragraph {self.paragraph_index + 1}, run {self.run_index + 1}"


@dataclass(frozen=True)
class Violation:
    """A single mismatch between effective formatting and a rule."""
    element: ElementRef
    category: RuleCategory
    expected: str
    actual: Any
    severity: Severity = Severity.ERROR
    attribute: Optional[str] = None  # margin side or heading level

    @property
    def sort_key(self) -> Tuple[Tuple[int, int, int], int, str]:
        return (self.element.order_key, CATEGORY_ORDER[self.category], self.attribute or "")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "element": str(self.element),
            "kind": self.element.kind.value,
            "category": self.category.value,
            "attribute": self.attribute,
            "expected": self.expected,
            "actual": self.actual if isinstance(self.actual, (int, float, str, bool)) or self.actual is None else str(self.actual),
            "severity": self.severity.value,
        }
