"""Validation engine: compares effective formatting with a rule schema."""

import logging
from typing import Any, List, Optional, Tuple, Union

from ..interfaces.validation import IValidationEngine
from ..models.document import DocumentParagraph, DocumentSection, FormattedDocument
from ..models.enums import ElementKind, RuleCategory
from ..models.violation import ElementRef, Violation
from ..parsers.resolver import FormattingResolver, ParagraphFormat
from ..rules.models import (
    AllowedValues,
    ExactValue,
    HeadingStyleMap,
    MarginBounds,
    NumericRange,
    RuleSchema,
    format_number,
)


logger = logging.getLogger(__name__)

DISPLAY_PRECISION = 2


class ValidationEngine(IValidationEngine):
    """
    Checks every section, paragraph and run of a document against a schema.

    - Font name and size rules apply per run (body or heading rules
      depending on the paragraph).
    - Indentation, line spacing and alignment rules apply per body
      paragraph.
    - Margin rules apply per section and side.
    - Heading style rules apply per heading paragraph.

    Paragraphs and runs without visible text are skipped. The document is
    only read; violations are returned in document order.
    """

    def validate(
        self,
        document: FormattedDocument,
        schema: RuleSchema,
    ) -> Tuple[FormattedDocument, List[Violation]]:
        """
        Validate a document against a rule schema.

        Args:
            document: The document to check.
            schema: The rules to check against.

        Returns:
            Tuple of (the unchanged document, violations in document order).
        """
        violations: List[Violation] = []
        if schema.is_empty:
            logger.debug("Rule schema has no constraints, skipping checks")
            return document, violations

        resolver = FormattingResolver(document)
        next_paragraph = 0
        for section in document.sections:
            anchor = section.paragraphs[0].index if section.paragraphs else next_paragraph
            self._check_section(section, anchor, schema, violations)
            for paragraph in section.paragraphs:
                self._check_paragraph(paragraph, resolver, schema, violations)
                next_paragraph = paragraph.index + 1

        violations.sort(key=lambda v: v.sort_key)
        logger.info(f"Validation found {len(violations)} violations")
        return document, violations

    def _check_section(
        self,
        section: DocumentSection,
        anchor: int,
        schema: RuleSchema,
        violations: List[Violation],
    ) -> None:
        constraint = schema.effective_constraint(RuleCategory.MARGINS)
        if not isinstance(constraint, MarginBounds):
            return
        ref = ElementRef(ElementKind.SECTION, section.index, paragraph_index=anchor)
        margins = section.margins.as_dict()
        for side, bound in constraint.sides:
            actual = margins[side]
            if actual is None:
                logger.warning(f"Section {section.index + 1} does not declare its {side} margin")
                continue
            self._compare(RuleCategory.MARGINS, bound, actual, ref, violations, attribute=side)

    def _check_paragraph(
        self,
        paragraph: DocumentParagraph,
        resolver: FormattingResolver,
        schema: RuleSchema,
        violations: List[Violation],
    ) -> None:
        if not paragraph.has_text:
            return

        paragraph_format = resolver.paragraph_format(paragraph)
        ref = ElementRef(ElementKind.PARAGRAPH, paragraph.section_index, paragraph_index=paragraph.index)

        if paragraph_format.is_heading:
            self._check_heading_style(paragraph_format, ref, schema, violations)
            font_category = RuleCategory.HEADING_FONT
            size_category = RuleCategory.HEADING_FONT_SIZE
        else:
            self._check_body_layout(paragraph_format, ref, schema, violations)
            font_category = RuleCategory.BODY_FONT
            size_category = RuleCategory.BODY_FONT_SIZE

        font_rule = schema.effective_constraint(font_category)
        size_rule = schema.effective_constraint(size_category)
        if font_rule is None and size_rule is None:
            return

        for run in paragraph.runs:
            if not run.has_text:
                continue
            run_format = resolver.run_format(paragraph, run)
            run_ref = ElementRef(
                ElementKind.RUN,
                paragraph.section_index,
                paragraph_index=paragraph.index,
                run_index=run.index,
            )
            if font_rule is not None:
                self._compare(font_category, font_rule, run_format.font_name, run_ref, violations)
            if size_rule is not None:
                self._compare(size_category, size_rule, run_format.font_size, run_ref, violations)

    def _check_body_layout(
        self,
        paragraph_format: ParagraphFormat,
        ref: ElementRef,
        schema: RuleSchema,
        violations: List[Violation],
    ) -> None:
        properties = paragraph_format.properties

        indentation = schema.effective_constraint(RuleCategory.INDENTATION)
        if indentation is not None:
            self._compare(RuleCategory.INDENTATION, indentation, properties.first_line_indent, ref, violations)

        spacing_rule = schema.effective_constraint(RuleCategory.LINE_SPACING)
        if spacing_rule is not None:
            spacing = properties.line_spacing
            self._compare(
                RuleCategory.LINE_SPACING,
                spacing_rule,
                spacing.multiple,
                ref,
                violations,
                display=str(spacing) if spacing.multiple is None else None,
            )

        alignment = schema.effective_constraint(RuleCategory.ALIGNMENT)
        if alignment is not None:
            self._compare(RuleCategory.ALIGNMENT, alignment, properties.alignment.value, ref, violations)

    def _check_heading_style(
        self,
        paragraph_format: ParagraphFormat,
        ref: ElementRef,
        schema: RuleSchema,
        violations: List[Violation],
    ) -> None:
        constraint = schema.effective_constraint(RuleCategory.HEADING_STYLE)
        if not isinstance(constraint, HeadingStyleMap):
            return
        level = paragraph_format.outline_level
        allowed = constraint.for_level(level)
        if allowed is None:
            return
        if allowed.allows(paragraph_format.style_name) or allowed.allows(paragraph_format.style_id):
            return
        violations.append(
            Violation(
                element=ref,
                category=RuleCategory.HEADING_STYLE,
                expected=allowed.describe(),
                actual=paragraph_format.style_name,
                severity=allowed.severity,
                attribute=str(level),
            )
        )

    def _compare(
        self,
        category: RuleCategory,
        constraint: Union[AllowedValues, ExactValue, NumericRange],
        actual: Any,
        ref: ElementRef,
        violations: List[Violation],
        attribute: Optional[str] = None,
        display: Optional[str] = None,
    ) -> None:
        if constraint.allows(actual):
            return
        if display is None:
            display = actual
            if isinstance(actual, float):
                display = format_number(round(actual, DISPLAY_PRECISION))
        violations.append(
            Violation(
                element=ref,
                category=category,
                expected=constraint.describe(),
                actual=display,
                severity=constraint.severity,
                attribute=attribute,
            )
        )
