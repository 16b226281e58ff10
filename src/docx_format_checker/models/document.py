"""In-memory structural model of a Word package."""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from ..exceptions import IntegrityError
from .enums import Alignment, LineSpacingRule


@dataclass(frozen=True)
class LineSpacing:
    """
    Line spacing of a paragraph.

    ``value`` is a multiple of single spacing when ``rule`` is AUTO and a
    height in points otherwise.
    """
    value: float
    rule: LineSpacingRule = LineSpacingRule.AUTO

    @property
    def multiple(self) -> Optional[float]:
        if self.rule is LineSpacingRule.AUTO:
            return self.value
        return None

    def __str__(self) -> str:
        if self.rule is LineSpacingRule.AUTO:
            return f"{self.value:g}"
        return f"{self.value:g}pt ({self.rule.value})"


@dataclass(frozen=True)
class FormatProperties:
    """
    A set of formatting properties where ``None`` means "inherit".

    The same shape is used for direct formatting on runs and paragraphs,
    for style definitions, for document defaults and for fully resolved
    formatting.
    """
    font_name: Optional[str] = None
    font_size: Optional[float] = None  # points
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    first_line_indent: Optional[float] = None  # cm, negative for hanging
    left_indent: Optional[float] = None  # cm
    line_spacing: Optional[LineSpacing] = None
    alignment: Optional[Alignment] = None
    outline_level: Optional[int] = None  # 1-based heading level, 0 for body text
    num_id: Optional[str] = None
    num_level: Optional[int] = None

    def merged_over(self, base: "FormatProperties") -> "FormatProperties":
        """Return these properties with gaps filled from ``base``."""
        values = {}
        for f in fields(self):
            own = getattr(self, f.name)
            values[f.name] = own if own is not None else getattr(base, f.name)
        return FormatProperties(**values)


# Values Word applies when neither the document nor its styles say anything.
BUILTIN_DEFAULTS = FormatProperties(
    font_name="Times New Roman",
    font_size=10.0,
    bold=False,
    italic=False,
    first_line_indent=0.0,
    left_indent=0.0,
    line_spacing=LineSpacing(1.0),
    alignment=Alignment.LEFT,
)


@dataclass
class StyleDefinition:
    """A named style as declared in the styles part."""
    style_id: str
    name: str
    style_type: str  # "paragraph", "character", "table", "numbering"
    based_on: Optional[str] = None
    is_default: bool = False
    properties: FormatProperties = field(default_factory=FormatProperties)


class StyleTable:
    """
    Flat table of style definitions with eagerly resolved inheritance.

    Styles are stored in a list and referenced by index; the parent of
    each style is an index into the same list. Ancestor chains and the
    flattened properties of every style are computed once when the table
    is built, so lookups afterwards are dictionary reads.
    """

    def __init__(self, styles: List[StyleDefinition]):
        self._styles = list(styles)
        self._index: Dict[str, int] = {}
        for position, style in enumerate(self._styles):
            self._index.setdefault(style.style_id, position)
        self._parents: List[Optional[int]] = [
            self._parent_index(style) for style in self._styles
        ]
        self._chains: List[Tuple[int, ...]] = [
            self._build_chain(position) for position in range(len(self._styles))
        ]
        self._resolved: List[FormatProperties] = [
            self._flatten(position) for position in range(len(self._styles))
        ]
        self._default_ids: Dict[str, str] = {}
        for style in self._styles:
            if style.is_default:
                self._default_ids.setdefault(style.style_type, style.style_id)

    def __len__(self) -> int:
        return len(self._styles)

    def __contains__(self, style_id: object) -> bool:
        return style_id in self._index

    def _parent_index(self, style: StyleDefinition) -> Optional[int]:
        if style.based_on is None:
            return None
        if style.based_on not in self._index:
            raise IntegrityError(
                message=f"Style '{style.style_id}' is based on unknown style '{style.based_on}'",
                location="styles",
                details={"style_id": style.style_id, "based_on": style.based_on},
            )
        return self._index[style.based_on]

    def _build_chain(self, position: int) -> Tuple[int, ...]:
        chain = []
        seen: Set[int] = set()
        current: Optional[int] = position
        while current is not None:
            if current in seen:
                names = [self._styles[i].style_id for i in chain]
                raise IntegrityError(
                    message=f"Cyclic style inheritance: {' -> '.join(names + [self._styles[current].style_id])}",
                    location="styles",
                    details={"chain": names},
                )
            seen.add(current)
            chain.append(current)
            current = self._parents[current]
        return tuple(chain)

    def _flatten(self, position: int) -> FormatProperties:
        resolved = FormatProperties()
        for index in self._chains[position]:
            resolved = resolved.merged_over(self._styles[index].properties)
        return resolved

    def get(self, style_id: str) -> StyleDefinition:
        return self._styles[self._require(style_id)]

    def chain(self, style_id: str) -> List[StyleDefinition]:
        """Return the style followed by its ancestors, nearest first."""
        return [self._styles[i] for i in self._chains[self._require(style_id)]]

    def resolved(self, style_id: str) -> FormatProperties:
        """Return the properties of a style with its ancestors merged in."""
        return self._resolved[self._require(style_id)]

    def default_id(self, style_type: str) -> Optional[str]:
        return self._default_ids.get(style_type)

    def _require(self, style_id: str) -> int:
        try:
            return self._index[style_id]
        except KeyError:
            raise IntegrityError(
                message=f"Reference to unknown style '{style_id}'",
                location="styles",
                details={"style_id": style_id},
            ) from None


@dataclass(frozen=True)
class NumberingLevel:
    """Indentation declared by one level of a numbering definition."""
    level: int
    number_format: Optional[str] = None
    first_line_indent: Optional[float] = None  # cm
    left_indent: Optional[float] = None  # cm


class NumberingTable:
    """Numbering instances resolved to their abstract definitions."""

    def __init__(
        self,
        abstract_levels: Dict[str, Dict[int, NumberingLevel]],
        instances: Dict[str, str],
    ):
        self._levels: Dict[Tuple[str, int], NumberingLevel] = {}
        for num_id, abstract_id in instances.items():
            if abstract_id not in abstract_levels:
                raise IntegrityError(
                    message=f"Numbering '{num_id}' refers to unknown abstract numbering '{abstract_id}'",
                    location="numbering",
                    details={"num_id": num_id, "abstract_num_id": abstract_id},
                )
            for level, definition in abstract_levels[abstract_id].items():
                self._levels[(num_id, level)] = definition
        self._num_ids = set(instances)

    def __contains__(self, num_id: object) -> bool:
        return num_id in self._num_ids

    def level(self, num_id: str, level: int) -> Optional[NumberingLevel]:
        return self._levels.get((num_id, level))


@dataclass
class TextRun:
    """A contiguous span of text sharing one set of direct formatting."""
    index: int
    text: str
    style_id: Optional[str] = None
    properties: FormatProperties = field(default_factory=FormatProperties)
    node: Any = field(default=None, repr=False, compare=False)

    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())


@dataclass
class DocumentParagraph:
    """A body paragraph with its runs and direct paragraph formatting."""
    index: int
    section_index: int
    style_id: Optional[str] = None
    properties: FormatProperties = field(default_factory=FormatProperties)
    runs: List[TextRun] = field(default_factory=list)
    node: Any = field(default=None, repr=False, compare=False)

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())


@dataclass(frozen=True)
class PageMargins:
    """Page margins in millimetres; ``None`` when the section omits them."""
    top: Optional[float] = None
    bottom: Optional[float] = None
    left: Optional[float] = None
    right: Optional[float] = None

    def as_dict(self) -> Dict[str, Optional[float]]:
        return {
            "top": self.top,
            "bottom": self.bottom,
            "left": self.left,
            "right": self.right,
        }


@dataclass
class DocumentSection:
    """Page-level properties and the paragraphs laid out with them."""
    index: int
    margins: PageMargins = field(default_factory=PageMargins)
    page_width: Optional[float] = None  # mm
    page_height: Optional[float] = None  # mm
    orientation: str = "portrait"
    paragraphs: List[DocumentParagraph] = field(default_factory=list)


@dataclass
class FormattedDocument:
    """
    A loaded Word package.

    Owns its sections, the style and numbering tables they reference and
    the python-docx document used to write annotations back. A document
    belongs to exactly one checking or extraction pass.
    """
    sections: List[DocumentSection]
    styles: StyleTable
    numbering: NumberingTable
    defaults: FormatProperties
    source: bytes = field(default=b"", repr=False)
    docx: Any = field(default=None, repr=False, compare=False)
    dirty_parts: Set[str] = field(default_factory=set)

    @property
    def paragraphs(self) -> Iterator[DocumentParagraph]:
        for section in self.sections:
            yield from section.paragraphs

    @property
    def is_modified(self) -> bool:
        return bool(self.dirty_parts)

    def mark_dirty(self, partname: str) -> None:
        """Record that the part at ``partname`` must be re-serialized."""
        self.dirty_parts.add(str(partname))

    def text(self) -> str:
        return "\n".join(paragraph.text for paragraph in self.paragraphs)
