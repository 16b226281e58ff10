"""Package codec interface for the formatting checker."""

from abc import ABC, abstractmethod

from ..models.document import FormattedDocument


class IPackageCodec(ABC):
    """
    Abstract interface for reading and writing Word packages.

    Implementations turn raw package bytes into the document model and
    serialize a (possibly annotated) model back to bytes.
    """

    @abstractmethod
    def load(self, data: bytes) -> FormattedDocument:
        """
        Build the document model from package bytes.

        Args:
            data: Raw bytes of the .docx package.

        Returns:
            FormattedDocument with styles and numbering resolved.

        Raises:
            DecodeError: If the package is malformed or incomplete.
            IntegrityError: If style or numbering references are inconsistent.
        """
        pass

    @abstractmethod
    def save(self, document: FormattedDocument) -> bytes:
        """
        Serialize the document model back to package bytes.

        Parts that were not modified must round-trip unchanged.

        Args:
            document: The document to serialize.

        Returns:
            Bytes of the .docx package.
        """
        pass
