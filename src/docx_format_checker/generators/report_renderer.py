"""HTML rendering of validation results."""

import os
from collections import Counter
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..models.enums import Severity
from ..models.violation import Violation
from .messages import SEVERITY_LABELS, category_label, describe_violation


REPORT_TITLES = {
    "en": "Formatting check report",
    "ru": "Отчёт о проверке оформления",
}


class ReportRenderer:
    """
    Renders a violation list as a standalone HTML page.

    Uses Jinja2 templates shipped with the package.
    """

    def __init__(self, template_dir: Optional[str] = None):
        """
        Initialize the report renderer.

        Args:
            template_dir: Directory containing Jinja2 templates.
                         If not provided, uses the package's templates directory.
        """
        if template_dir is None:
            template_dir = os.path.join(os.path.dirname(__file__), "templates")

        self.template_dir = template_dir
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(['html', 'xml'])
        )

    def render(
        self,
        filename: str,
        violations: List[Violation],
        language: str = "en",
    ) -> str:
        """
        Render the report page.

        Args:
            filename: Name of the checked document.
            violations: Violations found in it, in document order.
            language: Language of the report texts.

        Returns:
            HTML string.
        """
        language = language if language in REPORT_TITLES else "en"
        template = self.env.get_template('report.html')
        return template.render(
            title=REPORT_TITLES[language],
            language=language,
            filename=filename,
            rows=self._prepare_rows(violations, language),
            summary=self._summarize(violations, language),
        )

    def _prepare_rows(self, violations: List[Violation], language: str) -> List[Dict[str, Any]]:
        return [
            {
                "element": str(violation.element),
                "rule": category_label(violation, language),
                "severity": violation.severity.value,
                "message": describe_violation(violation, language),
            }
            for violation in sorted(violations, key=lambda v: v.sort_key)
        ]

    def _summarize(self, violations: List[Violation], language: str) -> List[Dict[str, Any]]:
        counts = Counter(violation.severity for violation in violations)
        return [
            {"label": SEVERITY_LABELS[language][severity], "count": counts.get(severity, 0)}
            for severity in Severity
        ]
