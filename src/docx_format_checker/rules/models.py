"""Data models for formatting rules."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..models.enums import RuleCategory, Severity


DEFAULT_TOLERANCE = 0.01
DEFAULT_LANGUAGE = "en"


def normalize_name(value: str) -> str:
    """Normalize a font or style name for comparison."""
    return "".join(value.split()).casefold()


def format_number(value: float) -> Union[int, float]:
    """Return ``value`` as an int when it has no fractional part."""
    value = float(value)
    return int(value) if value.is_integer() else round(value, 4)


def _with_severity(record: Any, severity: "Severity", key: str) -> Any:
    if severity is Severity.ERROR:
        return record
    return {key: record, "severity": severity.value}


@dataclass(frozen=True)
class AllowedValues:
    """Constraint satisfied by any of a set of names."""
    values: Tuple[str, ...]
    severity: Severity = Severity.ERROR

    def allows(self, actual: Optional[str]) -> bool:
        if actual is None:
            return False
        wanted = normalize_name(actual)
        return any(normalize_name(value) == wanted for value in self.values)

    def describe(self) -> str:
        return " | ".join(f'"{value}"' for value in self.values)

    def to_record(self) -> Any:
        record = self.values[0] if len(self.values) == 1 else list(self.values)
        if self.severity is Severity.ERROR:
            return record
        return {"allowed": list(self.values), "severity": self.severity.value}


@dataclass(frozen=True)
class ExactValue:
    """Constraint satisfied by a single number, within a tolerance."""
    value: float
    tolerance: float = DEFAULT_TOLERANCE
    severity: Severity = Severity.ERROR

    def allows(self, actual: Optional[float]) -> bool:
        if actual is None:
            return False
        return abs(actual - self.value) <= self.tolerance

    def describe(self) -> str:
        return f"{format_number(self.value)}"

    def to_record(self) -> Any:
        return _with_severity(format_number(self.value), self.severity, "value")


@dataclass(frozen=True)
class NumericRange:
    """Constraint satisfied by numbers within inclusive bounds."""
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    tolerance: float = DEFAULT_TOLERANCE
    severity: Severity = Severity.ERROR

    def allows(self, actual: Optional[float]) -> bool:
        if actual is None:
            return False
        if self.minimum is not None and actual < self.minimum - self.tolerance:
            return False
        if self.maximum is not None and actual > self.maximum + self.tolerance:
            return False
        return True

    def describe(self) -> str:
        if self.minimum is not None and self.maximum is not None:
            return f"{format_number(self.minimum)}..{format_number(self.maximum)}"
        if self.minimum is not None:
            return f">= {format_number(self.minimum)}"
        return f"<= {format_number(self.maximum)}"

    def to_record(self) -> Any:
        if self.minimum is not None and self.maximum is not None and self.severity is Severity.ERROR:
            return [format_number(self.minimum), format_number(self.maximum)]
        record: Dict[str, Any] = {}
        if self.minimum is not None:
            record["min"] = format_number(self.minimum)
        if self.maximum is not None:
            record["max"] = format_number(self.maximum)
        if self.severity is not Severity.ERROR:
            record["severity"] = self.severity.value
        return record


NumericConstraint = Union[ExactValue, NumericRange]


@dataclass(frozen=True)
class MarginBounds:
    """Per-side numeric constraints on section margins (mm)."""
    sides: Tuple[Tuple[str, NumericConstraint], ...]

    def side(self, name: str) -> Optional[NumericConstraint]:
        for side, constraint in self.sides:
            if side == name:
                return constraint
        return None

    def to_record(self) -> Dict[str, Any]:
        return {side: constraint.to_record() for side, constraint in self.sides}


@dataclass(frozen=True)
class HeadingStyleMap:
    """Required paragraph style per heading outline level (1-based)."""
    levels: Tuple[Tuple[int, AllowedValues], ...]

    def for_level(self, level: int) -> Optional[AllowedValues]:
        for candidate, allowed in self.levels:
            if candidate == level:
                return allowed
        return None

    def to_record(self) -> Dict[str, Any]:
        return {str(level): allowed.to_record() for level, allowed in self.levels}


Constraint = Union[AllowedValues, ExactValue, NumericRange, MarginBounds, HeadingStyleMap]


@dataclass(frozen=True)
class RuleSchema:
    """
    Immutable set of formatting constraints for one checking pass.

    A schema without constraints is valid and produces no violations.
    """
    constraints: Mapping[RuleCategory, Constraint] = field(
        default_factory=lambda: MappingProxyType({})
    )
    language: str = DEFAULT_LANGUAGE
    tolerance: float = DEFAULT_TOLERANCE
    warnings: Tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.constraints, MappingProxyType):
            object.__setattr__(self, "constraints", MappingProxyType(dict(self.constraints)))

    @property
    def is_empty(self) -> bool:
        return not self.constraints

    @property
    def categories(self) -> List[RuleCategory]:
        return [category for category in RuleCategory if category in self.constraints]

    def effective_constraint(self, category: RuleCategory) -> Optional[Constraint]:
        """Return the constraint for ``category``, or None when it is not ruled."""
        return self.constraints.get(category)

    def to_record(self) -> Dict[str, Any]:
        """Convert the schema to a portable rule record."""
        record: Dict[str, Any] = {}
        for category in self.categories:
            record[category.value] = self.constraints[category].to_record()
        if self.language != DEFAULT_LANGUAGE:
            record["language"] = self.language
        if self.tolerance != DEFAULT_TOLERANCE:
            record["tolerance"] = self.tolerance
        return record


@dataclass
class ValidationResult:
    """Result of rule record validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )
