"""Validation of documents against formatting rules."""

from .engine import ValidationEngine

__all__ = ["ValidationEngine"]
