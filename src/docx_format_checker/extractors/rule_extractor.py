"""Inference of a rule set from an exemplar document."""

import logging
from typing import Any, Dict, Generic, Hashable, Optional, TypeVar

from ..interfaces.rules import IRuleExtractor
from ..models.document import FormattedDocument
from ..models.enums import RuleCategory
from ..parsers.resolver import FormattingResolver
from ..rules.models import (
    AllowedValues,
    Constraint,
    ExactValue,
    HeadingStyleMap,
    MarginBounds,
    RuleSchema,
)
from ..rules.schema_parser import MARGIN_SIDES


logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)

# Rounding applied before counting, per unit
CM_PRECISION = 2
MM_PRECISION = 2
PT_PRECISION = 1
MULTIPLE_PRECISION = 2


class ValueTally(Generic[T]):
    """Counts observed values and reports the most frequent one."""

    def __init__(self):
        self._counts: Dict[T, int] = {}

    def __len__(self) -> int:
        return sum(self._counts.values())

    def add(self, value: Optional[T]) -> None:
        if value is None:
            return
        self._counts[value] = self._counts.get(value, 0) + 1

    def mode(self) -> Optional[T]:
        """
        Return the most frequent value.

        Ties go to the value seen first; dicts keep insertion order and
        ``max`` keeps the first of equal keys.
        """
        if not self._counts:
            return None
        return max(self._counts.items(), key=lambda item: item[1])[0]


class RuleExtractor(IRuleExtractor):
    """
    Derives a RuleSchema from the dominant formatting of a document.

    For each category the most frequent effective value over the
    qualifying elements becomes the constraint. Only paragraphs and runs
    with visible text count. Categories without samples are left out of
    the schema instead of being defaulted.
    """

    def extract(self, document: FormattedDocument) -> RuleSchema:
        """
        Infer the rules the document follows.

        Args:
            document: The exemplar document.

        Returns:
            RuleSchema with one exact constraint per observed category.
        """
        resolver = FormattingResolver(document)
        tallies: Dict[RuleCategory, ValueTally] = {category: ValueTally() for category in RuleCategory}
        heading_styles: Dict[int, ValueTally] = {}
        margins: Dict[str, ValueTally] = {side: ValueTally() for side in MARGIN_SIDES}

        for paragraph in document.paragraphs:
            if not paragraph.has_text:
                continue
            paragraph_format = resolver.paragraph_format(paragraph)
            properties = paragraph_format.properties

            if paragraph_format.is_heading:
                level = paragraph_format.outline_level
                heading_styles.setdefault(level, ValueTally()).add(paragraph_format.style_name)
                font_category = RuleCategory.HEADING_FONT
                size_category = RuleCategory.HEADING_FONT_SIZE
            else:
                tallies[RuleCategory.INDENTATION].add(_round(properties.first_line_indent, CM_PRECISION))
                spacing = properties.line_spacing
                if spacing is not None:
                    tallies[RuleCategory.LINE_SPACING].add(_round(spacing.multiple, MULTIPLE_PRECISION))
                if properties.alignment is not None:
                    tallies[RuleCategory.ALIGNMENT].add(properties.alignment.value)
                font_category = RuleCategory.BODY_FONT
                size_category = RuleCategory.BODY_FONT_SIZE

            for run in paragraph.runs:
                if not run.has_text:
                    continue
                run_format = resolver.run_format(paragraph, run)
                tallies[font_category].add(run_format.font_name)
                tallies[size_category].add(_round(run_format.font_size, PT_PRECISION))

        for section in document.sections:
            for side, value in section.margins.as_dict().items():
                margins[side].add(_round(value, MM_PRECISION))

        constraints: Dict[RuleCategory, Constraint] = {}
        for category, tally in tallies.items():
            value = tally.mode()
            if value is None:
                continue
            if isinstance(value, str):
                constraints[category] = AllowedValues(values=(value,))
            else:
                constraints[category] = ExactValue(value=value)

        sides = tuple(
            (side, ExactValue(value=tally.mode()))
            for side, tally in margins.items()
            if tally.mode() is not None
        )
        if sides:
            constraints[RuleCategory.MARGINS] = MarginBounds(sides=sides)

        levels = tuple(
            (level, AllowedValues(values=(tally.mode(),)))
            for level, tally in sorted(heading_styles.items())
            if tally.mode() is not None
        )
        if levels:
            constraints[RuleCategory.HEADING_STYLE] = HeadingStyleMap(levels=levels)

        logger.info(
            f"Extracted {len(constraints)} rule categories: "
            f"{[category.value for category in RuleCategory if category in constraints]}"
        )
        return RuleSchema(constraints=constraints)

    def extract_record(self, document: FormattedDocument) -> Dict[str, Any]:
        """Infer the rules and return them as a portable record."""
        return self.extract(document).to_record()


def _round(value: Optional[float], precision: int) -> Optional[float]:
    if value is None:
        return None
    # +0.0 folds -0.0 into 0.0 so both count as one value
    return round(value, precision) + 0.0
