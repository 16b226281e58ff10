"""Localized texts for violation annotations."""

from typing import Any, Dict

from ..models.enums import RuleCategory, Severity
from ..models.violation import Violation


CATEGORY_LABELS: Dict[str, Dict[RuleCategory, str]] = {
    "en": {
        RuleCategory.BODY_FONT: "Body text font",
        RuleCategory.BODY_FONT_SIZE: "Body text font size",
        RuleCategory.HEADING_FONT: "Heading font",
        RuleCategory.HEADING_FONT_SIZE: "Heading font size",
        RuleCategory.INDENTATION: "First line indent",
        RuleCategory.LINE_SPACING: "Line spacing",
        RuleCategory.ALIGNMENT: "Alignment",
        RuleCategory.MARGINS: "Page margin",
        RuleCategory.HEADING_STYLE: "Heading style",
    },
    "ru": {
        RuleCategory.BODY_FONT: "Шрифт основного текста",
        RuleCategory.BODY_FONT_SIZE: "Размер шрифта основного текста",
        RuleCategory.HEADING_FONT: "Шрифт заголовка",
        RuleCategory.HEADING_FONT_SIZE: "Размер шрифта заголовка",
        RuleCategory.INDENTATION: "Отступ первой строки",
        RuleCategory.LINE_SPACING: "Междустрочный интервал",
        RuleCategory.ALIGNMENT: "Выравнивание",
        RuleCategory.MARGINS: "Поле страницы",
        RuleCategory.HEADING_STYLE: "Стиль заголовка",
    },
}

UNITS: Dict[str, Dict[RuleCategory, str]] = {
    "en": {
        RuleCategory.BODY_FONT_SIZE: "pt",
        RuleCategory.HEADING_FONT_SIZE: "pt",
        RuleCategory.INDENTATION: "cm",
        RuleCategory.MARGINS: "mm",
    },
    "ru": {
        RuleCategory.BODY_FONT_SIZE: "пт",
        RuleCategory.HEADING_FONT_SIZE: "пт",
        RuleCategory.INDENTATION: "см",
        RuleCategory.MARGINS: "мм",
    },
}

ATTRIBUTE_LABELS: Dict[str, Dict[str, str]] = {
    "en": {
        "top": "top",
        "bottom": "bottom",
        "left": "left",
        "right": "right",
        "level": "level",
    },
    "ru": {
        "top": "верхнее",
        "bottom": "нижнее",
        "left": "левое",
        "right": "правое",
        "level": "уровень",
    },
}

SEVERITY_LABELS: Dict[str, Dict[Severity, str]] = {
    "en": {Severity.ERROR: "Error", Severity.WARNING: "Warning"},
    "ru": {Severity.ERROR: "Ошибка", Severity.WARNING: "Предупреждение"},
}

TEMPLATES = {
    "en": "[{severity}] {label}: expected {expected}, found {actual}",
    "ru": "[{severity}] {label}: требуется {expected}, фактически {actual}",
}

MISSING_VALUE = {"en": "not set", "ru": "не задано"}


def _language(language: str) -> str:
    return language if language in TEMPLATES else "en"


def category_label(violation: Violation, language: str) -> str:
    """Return the rule label, qualified by margin side or heading level."""
    language = _language(language)
    label = CATEGORY_LABELS[language][violation.category]
    if violation.attribute is None:
        return label
    attributes = ATTRIBUTE_LABELS[language]
    if violation.category is RuleCategory.HEADING_STYLE:
        return f"{label} ({attributes['level']} {violation.attribute})"
    return f"{label} ({attributes.get(violation.attribute, violation.attribute)})"


def _with_unit(value: Any, unit: str) -> str:
    if unit and isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value} {unit}"
    return str(value)


def describe_violation(violation: Violation, language: str = "en") -> str:
    """Build the annotation text for a violation."""
    language = _language(language)
    unit = UNITS[language].get(violation.category, "")
    actual = violation.actual
    if actual is None:
        actual = MISSING_VALUE[language]
    elif isinstance(actual, str) and violation.category is not RuleCategory.LINE_SPACING:
        actual = f'"{actual}"'
    expected = violation.expected
    if unit and not expected.startswith('"'):
        expected = f"{expected} {unit}"
    return TEMPLATES[language].format(
        severity=SEVERITY_LABELS[language][violation.severity],
        label=category_label(violation, language),
        expected=expected,
        actual=_with_unit(actual, unit),
    )
