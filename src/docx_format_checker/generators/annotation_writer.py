"""Writes validation violations into a document as Word comments."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from docx.enum.style import WD_STYLE_TYPE
from docx.enum.text import WD_COLOR_INDEX
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.shared import Pt

from ..interfaces.validation import IAnnotationWriter
from ..models.document import DocumentParagraph, FormattedDocument
from ..models.enums import ElementKind, Severity
from ..models.violation import Violation
from ..rules.models import DEFAULT_LANGUAGE
from .messages import describe_violation


logger = logging.getLogger(__name__)

# Styles python-docx comments refer to: (style id, name, type, size in pt)
COMMENT_STYLES = (
    ("CommentReference", "annotation reference", WD_STYLE_TYPE.CHARACTER, 8),
    ("CommentText", "annotation text", WD_STYLE_TYPE.PARAGRAPH, 10),
)


@dataclass
class AnnotationConfig:
    """Configuration for annotation display."""
    author: str = "Format Checker"
    initials: str = "FC"
    highlight_runs: bool = True
    error_color: str = "yellow"
    warning_color: str = "blue"


@dataclass
class Annotation:
    """A violation as it was written into the document."""
    violation: Violation
    text: str
    comment_id: int
    timestamp: str


class AnnotationWriter(IAnnotationWriter):
    """
    Adds one Word comment per violation.

    Comments are anchored at the offending run, at the runs of the
    offending paragraph, or at the first paragraph with text of the
    offending section. A section without any run gets an empty run to
    carry its comment. Comments are written in document order regardless
    of the order violations were detected in. Existing runs are never
    split, merged or edited; highlighting only adds run properties.
    """

    # Highlight color mapping
    HIGHLIGHT_COLORS = {
        "yellow": WD_COLOR_INDEX.YELLOW,
        "green": WD_COLOR_INDEX.BRIGHT_GREEN,
        "red": WD_COLOR_INDEX.RED,
        "blue": WD_COLOR_INDEX.TURQUOISE,
        "pink": WD_COLOR_INDEX.PINK,
        "gray": WD_COLOR_INDEX.GRAY_25,
    }

    def __init__(self, config: Optional[AnnotationConfig] = None, language: str = DEFAULT_LANGUAGE):
        """
        Initialize the annotation writer.

        Args:
            config: Annotation configuration.
            language: Language of the comment texts ("en" or "ru").
        """
        self.config = config or AnnotationConfig()
        self.language = language
        self.annotations: List[Annotation] = []

    def annotate(
        self,
        document: FormattedDocument,
        violations: List[Violation],
    ) -> FormattedDocument:
        """
        Write violations into the document.

        ``annotations`` holds the comments written by the latest call only.

        Args:
            document: The validated document.
            violations: Violations found in it.

        Returns:
            The same document, with comments added and parts marked dirty.
        """
        self.annotations = []
        if not violations:
            return document

        added_styles = self._ensure_comment_styles(document)
        paragraphs = {paragraph.index: paragraph for paragraph in document.paragraphs}
        timestamp = datetime.now(timezone.utc).isoformat()

        for violation in sorted(violations, key=lambda v: v.sort_key):
            text = describe_violation(violation, self.language)
            runs = self._anchor_runs(document, violation, paragraphs)
            comment = document.docx.add_comment(
                runs,
                text=text,
                author=self.config.author,
                initials=self.config.initials,
            )
            if self.config.highlight_runs and violation.element.kind is ElementKind.RUN:
                self._set_highlight_color(runs[0], violation.severity)
            self.annotations.append(Annotation(violation, text, comment.comment_id, timestamp))

        document_part = document.docx.part
        document.mark_dirty(document_part.partname)
        document.mark_dirty(document_part.part_related_by(RT.COMMENTS).partname)
        if added_styles:
            document.mark_dirty(document_part.part_related_by(RT.STYLES).partname)

        logger.info(f"Annotated {len(self.annotations)} violations")
        return document

    def _ensure_comment_styles(self, document: FormattedDocument) -> bool:
        """Define the comment styles missing from the styles part."""
        styles = document.docx.styles
        present = {style.style_id for style in styles}
        added = False
        for style_id, name, style_type, size in COMMENT_STYLES:
            if style_id in present:
                continue
            style = styles.add_style(name if name not in styles else style_id, style_type)
            style.style_id = style_id
            style.hidden = True
            style.unhide_when_used = True
            style.font.size = Pt(size)
            if style_type == WD_STYLE_TYPE.PARAGRAPH:
                style.base_style = styles.default(WD_STYLE_TYPE.PARAGRAPH)
            added = True
            logger.debug(f"Added missing style '{style_id}'")
        return added

    def _anchor_runs(
        self,
        document: FormattedDocument,
        violation: Violation,
        paragraphs: Dict[int, DocumentParagraph],
    ) -> List[Any]:
        ref = violation.element
        if ref.kind is ElementKind.RUN:
            return [paragraphs[ref.paragraph_index].runs[ref.run_index].node]

        if ref.kind is ElementKind.PARAGRAPH:
            return self._paragraph_runs(paragraphs[ref.paragraph_index])

        section = document.sections[ref.section_index]
        for paragraph in section.paragraphs:
            if paragraph.has_text:
                return self._paragraph_runs(paragraph)
        for paragraph in section.paragraphs:
            if paragraph.runs:
                return [paragraph.runs[0].node]
        if section.paragraphs:
            return [section.paragraphs[0].node.add_run()]
        # Only the last section can lack paragraphs; its body ends the document
        logger.debug(f"Section {ref.section_index} has no paragraphs, adding one for its comment")
        return [document.docx.add_paragraph().add_run()]

    def _paragraph_runs(self, paragraph: DocumentParagraph) -> List[Any]:
        runs = [run for run in paragraph.runs if run.has_text] or paragraph.runs
        if not runs:
            return [paragraph.node.add_run()]
        return [runs[0].node, runs[-1].node]

    def _set_highlight_color(self, run: Any, severity: Severity) -> None:
        """Set highlight color on a run."""
        name = self.config.error_color if severity is Severity.ERROR else self.config.warning_color
        color = self.HIGHLIGHT_COLORS.get(name)
        if color is None:
            logger.warning(f"Unknown highlight color '{name}', run left unhighlighted")
            return
        run.font.highlight_color = color

    def export_annotations_summary(self) -> List[Dict[str, Any]]:
        """Export the annotations of the latest call as a summary list."""
        return [
            {
                **a.violation.to_dict(),
                "text": a.text,
                "comment_id": a.comment_id,
                "timestamp": a.timestamp,
            }
            for a in self.annotations
        ]
