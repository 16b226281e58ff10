"""Annotation and report generation."""

from .annotation_writer import Annotation, AnnotationConfig, AnnotationWriter
from .messages import describe_violation
from .report_renderer import ReportRenderer

__all__ = [
    "Annotation",
    "AnnotationConfig",
    "AnnotationWriter",
    "describe_violation",
    "ReportRenderer",
]
