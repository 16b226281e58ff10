"""Abstract interfaces for the formatting checker components."""

from .codec import IPackageCodec
from .rules import IRuleExtractor
from .validation import IAnnotationWriter, IValidationEngine

__all__ = [
    "IPackageCodec",
    "IRuleExtractor",
    "IAnnotationWriter",
    "IValidationEngine",
]
