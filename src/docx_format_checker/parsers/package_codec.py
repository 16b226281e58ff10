"""Word package (.docx) codec: bytes to document model and back."""

import io
import logging
from typing import Iterator, List, Optional
from zipfile import BadZipFile

from docx import Document
from docx.enum.section import WD_ORIENT
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.opc.exceptions import PackageNotFoundError
from docx.oxml import parse_xml
from docx.oxml.ns import qn
from docx.table import Table, _Cell
from docx.text.paragraph import Paragraph
from lxml.etree import XMLSyntaxError

from ..exceptions import DecodeError, IntegrityError
from ..interfaces.codec import IPackageCodec
from ..models.document import (
    DocumentParagraph,
    DocumentSection,
    FormattedDocument,
    NumberingTable,
    PageMargins,
    StyleTable,
    TextRun,
)
from .package_writer import save_document
from .style_reader import (
    child_val,
    read_document_defaults,
    read_numbering_table,
    read_paragraph_properties,
    read_run_properties,
    read_style_table,
    read_theme_fonts,
)


logger = logging.getLogger(__name__)


def load_document(data: bytes) -> FormattedDocument:
    """
    Open a Word package and build its structural model.

    Styles, numbering and theme fonts are read eagerly so that later
    formatting lookups do not touch XML again.

    Args:
        data: Raw bytes of the .docx package.

    Returns:
        FormattedDocument owning the parsed package.

    Raises:
        DecodeError: If the bytes are not a readable Word package.
        IntegrityError: If styles or numbering are inconsistent.
    """
    if not data:
        raise DecodeError(message="Document is empty", location="package")

    try:
        docx_document = Document(io.BytesIO(data))
    except (BadZipFile, PackageNotFoundError) as e:
        raise DecodeError(
            message="Document is corrupted or not a valid Word file",
            location="package",
            details={"original_error": str(e)},
        )
    except KeyError as e:
        raise DecodeError(
            message="Package is missing a mandatory part",
            location="package",
            details={"original_error": str(e)},
        )
    except Exception as e:
        raise DecodeError(
            message=f"Failed to open document: {str(e)}",
            location="package",
            details={"original_error": str(e)},
        )

    document_part = docx_document.part
    theme_fonts = read_theme_fonts(_related_element(document_part, RT.THEME))
    styles_element = _related_element(document_part, RT.STYLES)
    styles = read_style_table(styles_element, theme_fonts)
    numbering = read_numbering_table(_related_element(document_part, RT.NUMBERING))
    defaults = read_document_defaults(styles_element, theme_fonts)

    sections = _read_sections(docx_document)
    _read_paragraphs(docx_document, sections, styles, numbering, theme_fonts)

    logger.debug(
        f"Loaded document: {len(sections)} sections, "
        f"{sum(len(s.paragraphs) for s in sections)} paragraphs, {len(styles)} styles"
    )

    return FormattedDocument(
        sections=sections,
        styles=styles,
        numbering=numbering,
        defaults=defaults,
        source=data,
        docx=docx_document,
    )


def _related_element(part, reltype: str):
    """Return the XML root of a related part, or None if there is none."""
    try:
        related = part.part_related_by(reltype)
    except KeyError:
        return None
    element = getattr(related, "element", None)
    if element is not None:
        return element
    try:
        return parse_xml(related.blob)
    except XMLSyntaxError as e:
        raise DecodeError(
            message="Package part is not well-formed XML",
            location=str(related.partname),
            details={"original_error": str(e)},
        )


def _read_sections(docx_document) -> List[DocumentSection]:
    sections = []
    for index, section in enumerate(docx_document.sections):
        sections.append(
            DocumentSection(
                index=index,
                margins=PageMargins(
                    top=_mm(section.top_margin),
                    bottom=_mm(section.bottom_margin),
                    left=_mm(section.left_margin),
                    right=_mm(section.right_margin),
                ),
                page_width=_mm(section.page_width),
                page_height=_mm(section.page_height),
                orientation="landscape" if section.orientation == WD_ORIENT.LANDSCAPE else "portrait",
            )
        )
    if not sections:
        logger.warning("Document body has no section properties, using an empty section")
        sections.append(DocumentSection(index=0))
    return sections


def _mm(length) -> Optional[float]:
    return length.mm if length is not None else None


def _iter_paragraphs(container) -> Iterator[Paragraph]:
    """
    Yield the paragraphs of a body or cell in document order.

    Table cells are entered recursively, each ``w:tc`` once.
    """
    for block in container.iter_inner_content():
        if isinstance(block, Table):
            for tc in block._tbl.iter_tcs():
                yield from _iter_paragraphs(_Cell(tc, block))
        else:
            yield block


def _read_paragraphs(
    docx_document,
    sections: List[DocumentSection],
    styles: StyleTable,
    numbering: NumberingTable,
    theme_fonts: dict,
) -> None:
    section_index = 0
    for index, paragraph in enumerate(_iter_paragraphs(docx_document)):
        location = f"paragraph {index + 1}"
        pPr = paragraph._p.find(qn("w:pPr"))
        style_id = child_val(pPr, "w:pStyle")
        if style_id is not None and style_id not in styles:
            raise IntegrityError(
                message=f"Paragraph uses unknown style '{style_id}'",
                location=location,
                details={"style_id": style_id},
            )
        properties = read_paragraph_properties(pPr, location)
        if properties.num_id not in (None, "0") and properties.num_id not in numbering:
            raise IntegrityError(
                message=f"Paragraph uses unknown numbering '{properties.num_id}'",
                location=location,
                details={"num_id": properties.num_id},
            )

        current = sections[min(section_index, len(sections) - 1)]
        model = DocumentParagraph(
            index=index,
            section_index=current.index,
            style_id=style_id,
            properties=properties,
            node=paragraph,
        )
        for run_index, run in enumerate(paragraph.runs):
            rPr = run._r.find(qn("w:rPr"))
            run_style = child_val(rPr, "w:rStyle")
            if run_style is not None and run_style not in styles:
                raise IntegrityError(
                    message=f"Run uses unknown style '{run_style}'",
                    location=f"{location}, run {run_index + 1}",
                    details={"style_id": run_style},
                )
            model.runs.append(
                TextRun(
                    index=run_index,
                    text=run.text,
                    style_id=run_style,
                    properties=read_run_properties(rPr, theme_fonts, location),
                    node=run,
                )
            )
        current.paragraphs.append(model)

        if pPr is not None and pPr.find(qn("w:sectPr")) is not None:
            section_index += 1


class PackageCodec(IPackageCodec):
    """Loads Word packages into the document model and writes them back."""

    def load(self, data: bytes) -> FormattedDocument:
        return load_document(data)

    def save(self, document: FormattedDocument) -> bytes:
        return save_document(document)
