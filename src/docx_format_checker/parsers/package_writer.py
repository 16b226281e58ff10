"""Format-preserving serialization of a mutated Word package."""

import io
import logging
import zipfile
from typing import Dict, List, Tuple

from lxml import etree

from ..models.document import FormattedDocument


logger = logging.getLogger(__name__)

CONTENT_TYPES_MEMBER = "[Content_Types].xml"
CONTENT_TYPES_NS = "http://schemas.openxmlformats.org/package/2006/content-types"


def save_document(document: FormattedDocument) -> bytes:
    """
    Serialize a document back to package bytes.

    A document nothing was written to is returned as its original bytes.
    Otherwise only parts marked dirty (and parts created since loading)
    are re-serialized; every other zip member is copied unchanged, in its
    original order.

    Args:
        document: The document to serialize.

    Returns:
        Bytes of the .docx package.
    """
    if not document.is_modified:
        return document.source

    package = document.docx.part.package
    with zipfile.ZipFile(io.BytesIO(document.source)) as original:
        members = set(original.namelist())
        replacements: Dict[str, bytes] = {}
        added: List[Tuple[str, str]] = []

        for part in package.iter_parts():
            member = part.partname.membername
            is_new = member not in members
            if not is_new and part.partname not in document.dirty_parts:
                continue
            replacements[member] = part.blob
            if len(part.rels):
                replacements[part.partname.rels_uri.membername] = part.rels.xml
            if is_new:
                added.append((str(part.partname), part.content_type))

        if added:
            replacements[CONTENT_TYPES_MEMBER] = _add_content_type_overrides(
                original.read(CONTENT_TYPES_MEMBER), added
            )

        output = io.BytesIO()
        with zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as target:
            for info in original.infolist():
                data = replacements.pop(info.filename, None)
                if data is None:
                    data = original.read(info)
                target.writestr(_copy_info(info), data)
            for member, data in replacements.items():
                target.writestr(member, data)

    logger.debug(f"Rewrote {len(document.dirty_parts)} parts, added {len(added)} parts")
    return output.getvalue()


def _copy_info(info: zipfile.ZipInfo) -> zipfile.ZipInfo:
    copy = zipfile.ZipInfo(info.filename, date_time=info.date_time)
    copy.compress_type = info.compress_type
    copy.external_attr = info.external_attr
    copy.comment = info.comment
    return copy


def _add_content_type_overrides(blob: bytes, parts: List[Tuple[str, str]]) -> bytes:
    """Add ``Override`` entries for new parts to ``[Content_Types].xml``."""
    root = etree.fromstring(blob)
    declared = {
        override.get("PartName")
        for override in root.findall(f"{{{CONTENT_TYPES_NS}}}Override")
    }
    for partname, content_type in parts:
        if partname in declared:
            continue
        override = etree.SubElement(root, f"{{{CONTENT_TYPES_NS}}}Override")
        override.set("PartName", partname)
        override.set("ContentType", content_type)
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", standalone=True)
