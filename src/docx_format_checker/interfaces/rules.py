"""Rule extractor interface for the formatting checker."""

from abc import ABC, abstractmethod

from ..models.document import FormattedDocument
from ..rules.models import RuleSchema


class IRuleExtractor(ABC):
    """
    Abstract interface for inferring rules from an exemplar document.
    """

    @abstractmethod
    def extract(self, document: FormattedDocument) -> RuleSchema:
        """
        Infer the rule set a correctly formatted document follows.

        Args:
            document: The exemplar document.

        Returns:
            RuleSchema holding one constraint per observable category.
        """
        pass
