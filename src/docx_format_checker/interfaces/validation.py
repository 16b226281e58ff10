"""Validation and annotation interfaces for the formatting checker."""

from abc import ABC, abstractmethod
from typing import List, Tuple

from ..models.document import FormattedDocument
from ..models.violation import Violation
from ..rules.models import RuleSchema


class IValidationEngine(ABC):
    """
    Abstract interface for checking a document against a rule set.
    """

    @abstractmethod
    def validate(
        self,
        document: FormattedDocument,
        schema: RuleSchema,
    ) -> Tuple[FormattedDocument, List[Violation]]:
        """
        Compare effective formatting of every element with the rules.

        Implementations must not modify the document.

        Args:
            document: The document to check.
            schema: The rules to check against.

        Returns:
            Tuple of (the unchanged document, detected violations).
        """
        pass


class IAnnotationWriter(ABC):
    """
    Abstract interface for writing violations into a document.
    """

    @abstractmethod
    def annotate(
        self,
        document: FormattedDocument,
        violations: List[Violation],
    ) -> FormattedDocument:
        """
        Mark each violation visibly in the document.

        Text content and the order of paragraphs and runs must be kept.

        Args:
            document: The document to annotate.
            violations: Violations from a validation pass over this document.

        Returns:
            The annotated document.
        """
        pass
