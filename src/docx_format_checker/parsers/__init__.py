"""Word package codec and formatting resolution."""

from .package_codec import PackageCodec, load_document
from .package_writer import save_document
from .resolver import FormattingResolver, ParagraphFormat

__all__ = [
    "PackageCodec",
    "load_document",
    "save_document",
    "FormattingResolver",
    "ParagraphFormat",
]
