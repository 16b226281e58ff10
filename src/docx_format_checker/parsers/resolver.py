"""Resolution of effective formatting through the inheritance chain."""

from dataclasses import dataclass
from typing import Optional

from ..models.document import (
    BUILTIN_DEFAULTS,
    DocumentParagraph,
    FormatProperties,
    FormattedDocument,
    TextRun,
)


@dataclass(frozen=True)
class ParagraphFormat:
    """Effective formatting of a paragraph."""
    style_id: Optional[str]
    style_name: Optional[str]
    properties: FormatProperties

    @property
    def outline_level(self) -> Optional[int]:
        level = self.properties.outline_level
        return level if level else None

    @property
    def is_heading(self) -> bool:
        return self.outline_level is not None


class FormattingResolver:
    """
    Computes effective formatting for paragraphs and runs.

    A property is taken from the first level that sets it:

    - run direct formatting
    - run character style and its ancestors
    - paragraph direct formatting (indentation, spacing, alignment, outline)
    - numbering level (indentation only)
    - paragraph style and its ancestors
    - document defaults
    - built-in Word defaults

    Style chains are already flattened by the style table, so each lookup
    is a handful of merges.
    """

    def __init__(self, document: FormattedDocument):
        self._document = document
        self._base = document.defaults.merged_over(BUILTIN_DEFAULTS)

    def paragraph_style_id(self, paragraph: DocumentParagraph) -> Optional[str]:
        if paragraph.style_id is not None:
            return paragraph.style_id
        return self._document.styles.default_id("paragraph")

    def paragraph_format(self, paragraph: DocumentParagraph) -> ParagraphFormat:
        styles = self._document.styles
        style_id = self.paragraph_style_id(paragraph)
        style_props = styles.resolved(style_id) if style_id is not None else FormatProperties()

        direct = paragraph.properties
        num_id = direct.num_id if direct.num_id is not None else style_props.num_id
        numbering_props = FormatProperties()
        if num_id not in (None, "0"):
            level_index = direct.num_level if direct.num_level is not None else (style_props.num_level or 0)
            level = self._document.numbering.level(num_id, level_index)
            if level is not None:
                numbering_props = FormatProperties(
                    first_line_indent=level.first_line_indent,
                    left_indent=level.left_indent,
                )

        properties = (
            direct
            .merged_over(numbering_props)
            .merged_over(style_props)
            .merged_over(self._base)
        )
        style_name = styles.get(style_id).name if style_id is not None else None
        return ParagraphFormat(style_id=style_id, style_name=style_name, properties=properties)

    def run_format(self, paragraph: DocumentParagraph, run: TextRun) -> FormatProperties:
        styles = self._document.styles
        properties = run.properties
        if run.style_id is not None:
            properties = properties.merged_over(styles.resolved(run.style_id))
        style_id = self.paragraph_style_id(paragraph)
        if style_id is not None:
            properties = properties.merged_over(styles.resolved(style_id))
        return properties.merged_over(self._base)
