"""Readers for formatting XML: run/paragraph properties, styles, numbering, theme."""

import logging
from typing import Dict, List, Optional

from docx.oxml.ns import qn

from ..exceptions import DecodeError
from ..models.document import (
    FormatProperties,
    LineSpacing,
    NumberingLevel,
    NumberingTable,
    StyleDefinition,
    StyleTable,
)
from ..models.enums import Alignment, LineSpacingRule


logger = logging.getLogger(__name__)

DRAWINGML_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"

TWIPS_PER_CM = 1440 / 2.54
LINE_UNITS_PER_SINGLE = 240

# w:outlineLvl value Word uses for "Body Text"
BODY_TEXT_OUTLINE_LEVEL = 9


def twips_to_cm(twips: int) -> float:
    return twips / TWIPS_PER_CM


def child_val(parent, tag: str) -> Optional[str]:
    """Return the ``w:val`` attribute of a child element, if present."""
    if parent is None:
        return None
    child = parent.find(qn(tag))
    if child is None:
        return None
    return child.get(qn("w:val"))


def _on_off(parent, tag: str) -> Optional[bool]:
    """Read an OOXML on/off property such as ``w:b``."""
    child = parent.find(qn(tag))
    if child is None:
        return None
    value = child.get(qn("w:val"))
    return value is None or value.lower() in ("1", "true", "on")


def _int(value: Optional[str], location: str) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        # Word writes some measurements as decimals
        try:
            return int(float(value))
        except ValueError:
            raise DecodeError(
                message=f"Expected a number, got '{value}'",
                location=location,
            ) from None


def read_theme_fonts(theme_element) -> Dict[str, str]:
    """
    Read the major/minor latin typefaces from a theme part.

    Returns a mapping with ``"major"`` and/or ``"minor"`` keys.
    """
    fonts: Dict[str, str] = {}
    if theme_element is None:
        return fonts
    for key in ("major", "minor"):
        latin = theme_element.find(
            f".//{{{DRAWINGML_NS}}}fontScheme/{{{DRAWINGML_NS}}}{key}Font/{{{DRAWINGML_NS}}}latin"
        )
        if latin is not None and latin.get("typeface"):
            fonts[key] = latin.get("typeface")
    return fonts


def read_run_properties(rPr, theme_fonts: Dict[str, str], location: str = "rPr") -> FormatProperties:
    """Parse a ``w:rPr`` element into run formatting properties."""
    if rPr is None:
        return FormatProperties()

    font_name = None
    rFonts = rPr.find(qn("w:rFonts"))
    if rFonts is not None:
        theme_ref = rFonts.get(qn("w:asciiTheme"))
        if theme_ref:
            font_name = theme_fonts.get("major" if theme_ref.startswith("major") else "minor")
            if font_name is None:
                logger.debug(f"Theme font '{theme_ref}' not declared in theme, at {location}")
        if font_name is None:
            font_name = rFonts.get(qn("w:ascii")) or rFonts.get(qn("w:hAnsi"))

    half_points = _int(child_val(rPr, "w:sz"), location)

    return FormatProperties(
        font_name=font_name,
        font_size=half_points / 2 if half_points is not None else None,
        bold=_on_off(rPr, "w:b"),
        italic=_on_off(rPr, "w:i"),
    )


def read_paragraph_properties(pPr, location: str = "pPr") -> FormatProperties:
    """Parse a ``w:pPr`` element into paragraph formatting properties."""
    if pPr is None:
        return FormatProperties()

    first_line = None
    left = None
    ind = pPr.find(qn("w:ind"))
    if ind is not None:
        hanging = _int(ind.get(qn("w:hanging")), location)
        first = _int(ind.get(qn("w:firstLine")), location)
        if hanging is not None:
            first_line = -twips_to_cm(hanging)
        elif first is not None:
            first_line = twips_to_cm(first)
        left_twips = _int(ind.get(qn("w:left")) or ind.get(qn("w:start")), location)
        if left_twips is not None:
            left = twips_to_cm(left_twips)

    line_spacing = None
    spacing = pPr.find(qn("w:spacing"))
    if spacing is not None:
        line = _int(spacing.get(qn("w:line")), location)
        if line is not None:
            rule = spacing.get(qn("w:lineRule")) or "auto"
            if rule == "auto":
                line_spacing = LineSpacing(line / LINE_UNITS_PER_SINGLE)
            else:
                rule_value = LineSpacingRule.EXACT if rule == "exact" else LineSpacingRule.AT_LEAST
                line_spacing = LineSpacing(line / 20, rule_value)

    jc = child_val(pPr, "w:jc")
    alignment = Alignment.from_jc(jc) if jc is not None else None

    outline_level = None
    outline = _int(child_val(pPr, "w:outlineLvl"), location)
    if outline is not None:
        outline_level = 0 if outline >= BODY_TEXT_OUTLINE_LEVEL else outline + 1

    num_id = None
    num_level = None
    numPr = pPr.find(qn("w:numPr"))
    if numPr is not None:
        num_id = child_val(numPr, "w:numId")
        num_level = _int(child_val(numPr, "w:ilvl"), location)

    return FormatProperties(
        first_line_indent=first_line,
        left_indent=left,
        line_spacing=line_spacing,
        alignment=alignment,
        outline_level=outline_level,
        num_id=num_id,
        num_level=num_level,
    )


def read_document_defaults(styles_element, theme_fonts: Dict[str, str]) -> FormatProperties:
    """Read ``w:docDefaults`` from the styles part."""
    if styles_element is None:
        return FormatProperties()
    doc_defaults = styles_element.find(qn("w:docDefaults"))
    if doc_defaults is None:
        return FormatProperties()
    rPr = doc_defaults.find(f"{qn('w:rPrDefault')}/{qn('w:rPr')}")
    pPr = doc_defaults.find(f"{qn('w:pPrDefault')}/{qn('w:pPr')}")
    run_defaults = read_run_properties(rPr, theme_fonts, location="docDefaults")
    return read_paragraph_properties(pPr, location="docDefaults").merged_over(run_defaults)


def read_style_table(styles_element, theme_fonts: Dict[str, str]) -> StyleTable:
    """
    Build the style table from the styles part.

    Raises:
        IntegrityError: If inheritance is cyclic or refers to a missing style.
    """
    styles: List[StyleDefinition] = []
    if styles_element is not None:
        for style in styles_element.findall(qn("w:style")):
            style_id = style.get(qn("w:styleId"))
            if not style_id:
                logger.warning("Skipping style without w:styleId")
                continue
            location = f"style '{style_id}'"
            paragraph = read_paragraph_properties(style.find(qn("w:pPr")), location)
            run = read_run_properties(style.find(qn("w:rPr")), theme_fonts, location)
            default = style.get(qn("w:default"))
            styles.append(
                StyleDefinition(
                    style_id=style_id,
                    name=child_val(style, "w:name") or style_id,
                    style_type=style.get(qn("w:type")) or "paragraph",
                    based_on=child_val(style, "w:basedOn"),
                    is_default=default is not None and default.lower() in ("1", "true", "on"),
                    properties=paragraph.merged_over(run),
                )
            )
    return StyleTable(styles)


def read_numbering_table(numbering_element) -> NumberingTable:
    """
    Build the numbering table from the numbering part.

    Raises:
        IntegrityError: If a numbering instance refers to a missing abstract definition.
    """
    abstract_levels: Dict[str, Dict[int, NumberingLevel]] = {}
    instances: Dict[str, str] = {}
    if numbering_element is None:
        return NumberingTable(abstract_levels, instances)

    for abstract in numbering_element.findall(qn("w:abstractNum")):
        abstract_id = abstract.get(qn("w:abstractNumId"))
        levels: Dict[int, NumberingLevel] = {}
        for lvl in abstract.findall(qn("w:lvl")):
            location = f"abstractNum '{abstract_id}'"
            level = _int(lvl.get(qn("w:ilvl")), location) or 0
            indent = read_paragraph_properties(lvl.find(qn("w:pPr")), location)
            levels[level] = NumberingLevel(
                level=level,
                number_format=child_val(lvl, "w:numFmt"),
                first_line_indent=indent.first_line_indent,
                left_indent=indent.left_indent,
            )
        abstract_levels[abstract_id] = levels

    for num in numbering_element.findall(qn("w:num")):
        num_id = num.get(qn("w:numId"))
        abstract_id = child_val(num, "w:abstractNumId")
        if num_id is None or abstract_id is None:
            logger.warning(f"Skipping incomplete numbering instance '{num_id}'")
            continue
        instances[num_id] = abstract_id

    return NumberingTable(abstract_levels, instances)
