"""Shared fixtures: Word documents built in memory with python-docx."""

import io
from typing import Any, Dict, List, Optional

import pytest
from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Cm, Mm, Pt


ALIGNMENTS = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}

# Matches the built-in rule record
COMPLIANT_MARGINS = {"top": 20, "bottom": 20, "left": 30, "right": 15}


def body(text: str, **overrides: Any) -> Dict[str, Any]:
    """Layout of a body paragraph formatted to the built-in rules."""
    layout = {
        "text": text,
        "font": "Times New Roman",
        "size": 14,
        "indent": 1.25,
        "spacing": 1.5,
        "alignment": "justify",
    }
    layout.update(overrides)
    return layout


def heading(text: str, level: int = 1, **overrides: Any) -> Dict[str, Any]:
    """Layout of a heading paragraph using the built-in "Heading N" style."""
    layout = {
        "text": text,
        "style": f"Heading {level}",
        "outline": level,
        "font": "Times New Roman",
        "size": 16,
        "bold": True,
    }
    layout.update(overrides)
    return layout


def _add_paragraph(document, layout: Dict[str, Any]) -> None:
    paragraph = document.add_paragraph(style=layout.get("style"))

    runs: List[Dict[str, Any]] = layout.get("runs") or [
        {
            "text": layout.get("text", ""),
            "font": layout.get("font"),
            "size": layout.get("size"),
            "bold": layout.get("bold"),
        }
    ]
    for run_layout in runs:
        run = paragraph.add_run(run_layout.get("text", ""))
        if run_layout.get("font"):
            run.font.name = run_layout["font"]
        if run_layout.get("size"):
            run.font.size = Pt(run_layout["size"])
        if run_layout.get("bold") is not None:
            run.font.bold = run_layout["bold"]

    paragraph_format = paragraph.paragraph_format
    if layout.get("indent") is not None:
        paragraph_format.first_line_indent = Cm(layout["indent"])
    if layout.get("spacing") is not None:
        paragraph_format.line_spacing = layout["spacing"]
    if layout.get("alignment") is not None:
        paragraph_format.alignment = ALIGNMENTS[layout["alignment"]]
    if layout.get("outline") is not None:
        outline = OxmlElement("w:outlineLvl")
        outline.set(qn("w:val"), str(layout["outline"] - 1))
        paragraph._p.get_or_add_pPr().append(outline)


def build_docx(
    paragraphs: List[Dict[str, Any]],
    margins: Optional[Dict[str, float]] = None,
    document=None,
) -> bytes:
    """
    Build a .docx package from paragraph layouts.

    Args:
        paragraphs: Layouts as returned by ``body`` and ``heading``; a layout
            may carry ``runs`` to build several runs in one paragraph.
        margins: Page margins in millimetres, compliant ones by default.
        document: A python-docx document to append to, for tests that
            need to tweak styles first.

    Returns:
        Package bytes.
    """
    document = document if document is not None else Document()
    section = document.sections[0]
    for side, value in (margins or COMPLIANT_MARGINS).items():
        setattr(section, f"{side}_margin", Mm(value))
    for layout in paragraphs:
        _add_paragraph(document, layout)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def compliant_docx() -> bytes:
    """A short report that satisfies the built-in rules."""
    return build_docx([
        heading("Introduction"),
        body("The first paragraph of the report."),
        body("The second paragraph of the report."),
        heading("Methods", level=2, size=14),
        body("Measurements were taken daily."),
    ])


@pytest.fixture
def arial_docx() -> bytes:
    """A single body paragraph set in Arial 11 pt."""
    return build_docx([body("Arial text.", font="Arial", size=11)])
