"""Parsing and validation of rule records.

A rule record is a JSON-compatible mapping from rule category to
constraint. This module turns it into an immutable ``RuleSchema``,
collecting every problem found so the caller sees them all at once.
"""

import json
import logging
from numbers import Real
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..exceptions import SchemaError
from ..models.enums import Alignment, RuleCategory, Severity
from .models import (
    DEFAULT_LANGUAGE,
    DEFAULT_TOLERANCE,
    AllowedValues,
    Constraint,
    ExactValue,
    HeadingStyleMap,
    MarginBounds,
    NumericConstraint,
    NumericRange,
    RuleSchema,
    ValidationResult,
)


logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("en", "ru")
META_KEYS = ("language", "tolerance")
MARGIN_SIDES = ("top", "bottom", "left", "right")
MAX_HEADING_LEVEL = 9

NAME_CATEGORIES = (
    RuleCategory.BODY_FONT,
    RuleCategory.HEADING_FONT,
    RuleCategory.ALIGNMENT,
)
NUMERIC_CATEGORIES = (
    RuleCategory.BODY_FONT_SIZE,
    RuleCategory.HEADING_FONT_SIZE,
    RuleCategory.INDENTATION,
    RuleCategory.LINE_SPACING,
)
# Categories whose values may be negative (hanging indentation)
SIGNED_CATEGORIES = (RuleCategory.INDENTATION,)

ALIGNMENT_ALIASES = {"both": "justify", "centre": "center", "start": "left", "end": "right"}


def parse_rule_schema(raw: Union[None, str, bytes, Dict[str, Any]]) -> RuleSchema:
    """
    Parse a rule record into a RuleSchema.

    Args:
        raw: A mapping, JSON text, or None. ``None``, empty text and an
            empty mapping all mean "no constraints".

    Returns:
        RuleSchema for the record.

    Raises:
        SchemaError: If the record is not a mapping or any constraint is invalid.
    """
    record = _coerce_record(raw)
    if not record:
        return RuleSchema()

    result = ValidationResult(is_valid=True)
    tolerance = _parse_tolerance(record.get("tolerance", DEFAULT_TOLERANCE), result)
    language = _parse_language(record.get("language", DEFAULT_LANGUAGE), result)

    constraints: Dict[RuleCategory, Constraint] = {}
    for key, value in record.items():
        if key in META_KEYS:
            continue
        try:
            category = RuleCategory(key)
        except ValueError:
            message = f"Unknown rule category '{key}' ignored"
            logger.warning(message)
            result.add_warning(message)
            continue

        category_result, constraint = _parse_constraint(category, value, tolerance)
        result = result.merge(category_result)
        if constraint is not None:
            constraints[category] = constraint

    if not result.is_valid:
        raise SchemaError(
            message="Rule record validation failed: " + "; ".join(result.errors),
            location="rules",
            details={"errors": result.errors, "warnings": result.warnings},
        )

    return RuleSchema(
        constraints=constraints,
        language=language,
        tolerance=tolerance,
        warnings=tuple(result.warnings),
    )


def load_rule_schema(path: Union[str, Path]) -> RuleSchema:
    """Parse a rule record stored as a JSON file."""
    path = Path(path)
    if not path.exists():
        raise SchemaError(message=f"Rule file not found: {path}", location=str(path))
    return parse_rule_schema(path.read_text(encoding="utf-8"))


def _coerce_record(raw: Any) -> Dict[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8-sig")
    if isinstance(raw, str):
        if not raw.strip():
            return {}
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SchemaError(
                message=f"Rule record is not valid JSON: {e.msg}",
                location=f"line {e.lineno}, column {e.colno}",
            ) from None
        if raw is None:
            return {}
    if not isinstance(raw, dict):
        raise SchemaError(
            message=f"Rule record must be a mapping, got {type(raw).__name__}",
            location="rules",
        )
    return raw


def _parse_tolerance(value: Any, result: ValidationResult) -> float:
    if not _is_number(value) or value < 0:
        result.add_error("'tolerance' must be a non-negative number")
        return DEFAULT_TOLERANCE
    return float(value)


def _parse_language(value: Any, result: ValidationResult) -> str:
    if not isinstance(value, str):
        result.add_error("'language' must be a string")
        return DEFAULT_LANGUAGE
    language = value.strip().lower()
    if language not in SUPPORTED_LANGUAGES:
        message = f"Unsupported language '{value}', using '{DEFAULT_LANGUAGE}'"
        logger.warning(message)
        result.add_warning(message)
        return DEFAULT_LANGUAGE
    return language


def _parse_constraint(
    category: RuleCategory,
    value: Any,
    tolerance: float,
) -> Tuple[ValidationResult, Optional[Constraint]]:
    result = ValidationResult(is_valid=True)
    prefix = f"'{category.value}'"

    if category in NAME_CATEGORIES:
        constraint = _parse_allowed(value, result, prefix)
        if constraint is not None and category is RuleCategory.ALIGNMENT:
            constraint = _normalize_alignment(constraint, result, prefix)
        return result, constraint

    if category in NUMERIC_CATEGORIES:
        signed = category in SIGNED_CATEGORIES
        return result, _parse_numeric(value, tolerance, result, prefix, signed=signed)

    if category is RuleCategory.MARGINS:
        return result, _parse_margins(value, tolerance, result, prefix)

    return result, _parse_heading_styles(value, result, prefix)


def _parse_severity(data: Dict[str, Any], result: ValidationResult, prefix: str) -> Severity:
    value = data.get("severity", Severity.ERROR.value)
    try:
        return Severity(value)
    except ValueError:
        result.add_error(
            f"{prefix}: 'severity' must be one of {[s.value for s in Severity]}"
        )
        return Severity.ERROR


def _parse_allowed(value: Any, result: ValidationResult, prefix: str) -> Optional[AllowedValues]:
    severity = Severity.ERROR
    if isinstance(value, dict):
        severity = _parse_severity(value, result, prefix)
        if "allowed" in value:
            value = value["allowed"]
        elif "value" in value:
            value = value["value"]
        else:
            result.add_error(f"{prefix}: Missing required field 'allowed'")
            return None

    if isinstance(value, str):
        names = [value]
    elif isinstance(value, list):
        names = value
    else:
        result.add_error(f"{prefix}: must be a name or a list of names")
        return None

    if not names:
        result.add_error(f"{prefix}: list of names must not be empty")
        return None
    if not all(isinstance(name, str) and name.strip() for name in names):
        result.add_error(f"{prefix}: all names must be non-empty strings")
        return None

    return AllowedValues(values=tuple(name.strip() for name in names), severity=severity)


def _normalize_alignment(
    constraint: AllowedValues,
    result: ValidationResult,
    prefix: str,
) -> Optional[AllowedValues]:
    valid = [alignment.value for alignment in Alignment]
    values = []
    for name in constraint.values:
        normalized = ALIGNMENT_ALIASES.get(name.lower(), name.lower())
        if normalized not in valid:
            result.add_error(f"{prefix}: '{name}' is not one of {valid}")
            return None
        values.append(normalized)
    return AllowedValues(values=tuple(values), severity=constraint.severity)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _parse_numeric(
    value: Any,
    tolerance: float,
    result: ValidationResult,
    prefix: str,
    signed: bool = False,
) -> Optional[NumericConstraint]:
    severity = Severity.ERROR
    minimum = maximum = None

    if _is_number(value):
        exact = value
    elif isinstance(value, (list, tuple)):
        if len(value) != 2:
            result.add_error(f"{prefix}: range must be [min, max]")
            return None
        exact = None
        minimum, maximum = value
    elif isinstance(value, dict):
        severity = _parse_severity(value, result, prefix)
        exact = value.get("value")
        minimum = value.get("min")
        maximum = value.get("max")
        if exact is None and minimum is None and maximum is None:
            result.add_error(f"{prefix}: expected 'value', 'min' or 'max'")
            return None
    else:
        result.add_error(f"{prefix}: must be a number, a [min, max] range or a mapping")
        return None

    bounds = [("value", exact), ("min", minimum), ("max", maximum)]
    for name, bound in bounds:
        if bound is None:
            continue
        if not _is_number(bound):
            result.add_error(f"{prefix}: '{name}' must be a number")
            return None
        if not signed and bound < 0:
            result.add_error(f"{prefix}: '{name}' must not be negative")
            return None

    if exact is not None:
        return ExactValue(value=float(exact), tolerance=tolerance, severity=severity)

    if minimum is not None and maximum is not None and minimum > maximum:
        result.add_error(f"{prefix}: min ({minimum}) is greater than max ({maximum})")
        return None

    return NumericRange(
        minimum=float(minimum) if minimum is not None else None,
        maximum=float(maximum) if maximum is not None else None,
        tolerance=tolerance,
        severity=severity,
    )


def _parse_margins(
    value: Any,
    tolerance: float,
    result: ValidationResult,
    prefix: str,
) -> Optional[MarginBounds]:
    if not isinstance(value, dict):
        result.add_error(f"{prefix}: must be a mapping of side to millimetres")
        return None

    sides: List[Tuple[str, NumericConstraint]] = []
    for side, bound in value.items():
        if side not in MARGIN_SIDES:
            message = f"{prefix}: unknown margin side '{side}' ignored"
            logger.warning(message)
            result.add_warning(message)
            continue
        constraint = _parse_numeric(bound, tolerance, result, f"{prefix}.{side}")
        if constraint is not None:
            sides.append((side, constraint))

    if not sides and result.is_valid:
        result.add_error(f"{prefix}: at least one of {list(MARGIN_SIDES)} is required")
        return None

    sides.sort(key=lambda item: MARGIN_SIDES.index(item[0]))
    return MarginBounds(sides=tuple(sides))


def _parse_heading_styles(
    value: Any,
    result: ValidationResult,
    prefix: str,
) -> Optional[HeadingStyleMap]:
    if not isinstance(value, dict) or not value:
        result.add_error(f"{prefix}: must be a non-empty mapping of outline level to style")
        return None

    levels: List[Tuple[int, AllowedValues]] = []
    for key, style in value.items():
        try:
            level = int(key)
        except (TypeError, ValueError):
            level = 0
        if not 1 <= level <= MAX_HEADING_LEVEL:
            result.add_error(f"{prefix}: outline level '{key}' must be 1..{MAX_HEADING_LEVEL}")
            continue
        allowed = _parse_allowed(style, result, f"{prefix}.{key}")
        if allowed is not None:
            levels.append((level, allowed))

    levels.sort(key=lambda item: item[0])
    return HeadingStyleMap(levels=tuple(levels))
