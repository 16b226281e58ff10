"""Rule extraction from exemplar documents."""

from .rule_extractor import RuleExtractor, ValueTally

__all__ = ["RuleExtractor", "ValueTally"]
