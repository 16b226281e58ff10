"""Built-in rule set used when no rule record is configured.

The values follow the usual requirements for Russian academic reports
(GOST 7.32): Times New Roman 14 pt, one-and-a-half line spacing, 1.25 cm
first-line indent, justified text and 20/20/30/15 mm page margins.
"""

import copy
from typing import Any, Dict

from .models import RuleSchema
from .schema_parser import parse_rule_schema


DEFAULT_RULE_RECORD: Dict[str, Any] = {
    "language": "ru",
    "bodyFont": "Times New Roman",
    "bodyFontSize": 14,
    "headingFont": "Times New Roman",
    "headingFontSize": [14, 16],
    "indentation": 1.25,
    "lineSpacing": 1.5,
    "alignment": "justify",
    "margins": {
        "top": 20,
        "bottom": 20,
        "left": 30,
        "right": 15,
    },
}


def default_rule_record() -> Dict[str, Any]:
    """Return a fresh copy of the built-in rule record."""
    return copy.deepcopy(DEFAULT_RULE_RECORD)


def default_schema() -> RuleSchema:
    """Build the built-in schema; each call returns a new instance."""
    return parse_rule_schema(default_rule_record())
