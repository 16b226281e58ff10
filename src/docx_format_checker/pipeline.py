"""End-to-end checking pass for the formatting checker.

This module wires the package codec, rule schema, validation engine and
annotation writer together. A pass takes the raw bytes of a document and
a rule record and produces the annotated document bytes; rule extraction
takes the bytes of an exemplar document and produces a rule record.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .exceptions import PassStateError
from .extractors.rule_extractor import RuleExtractor
from .generators.annotation_writer import Annotation, AnnotationConfig, AnnotationWriter
from .interfaces.codec import IPackageCodec
from .interfaces.rules import IRuleExtractor
from .interfaces.validation import IAnnotationWriter, IValidationEngine
from .models.document import FormattedDocument
from .models.enums import PassState
from .models.violation import Violation
from .parsers.package_codec import PackageCodec
from .rules.defaults import default_schema
from .rules.models import RuleSchema
from .rules.schema_parser import parse_rule_schema
from .validation.engine import ValidationEngine


logger = logging.getLogger(__name__)

RuleRecord = Union[None, str, bytes, Dict[str, Any]]


@dataclass
class PassResult:
    """Result of a complete checking pass."""

    output: bytes
    schema: RuleSchema
    violations: List[Violation] = field(default_factory=list)
    annotations: List[Annotation] = field(default_factory=list)
    processing_time: float = 0.0

    @property
    def modified(self) -> bool:
        return bool(self.violations)


class ValidationPass:
    """
    One checking pass over one document.

    The pass moves strictly through LOADED, VALIDATING, ANNOTATED and
    SERIALIZED. Each step can run once and only after the previous one;
    a pass is never reused for another document.
    """

    def __init__(
        self,
        data: bytes,
        schema: RuleSchema,
        codec: Optional[IPackageCodec] = None,
        engine: Optional[IValidationEngine] = None,
        writer: Optional[IAnnotationWriter] = None,
    ):
        """
        Load the document and prepare the pass.

        Args:
            data: Raw bytes of the .docx package.
            schema: Parsed rules to check against.
            codec: Package codec, PackageCodec by default.
            engine: Validation engine, ValidationEngine by default.
            writer: Annotation writer; by default one in the schema's language.

        Raises:
            DecodeError: If the package cannot be read.
            IntegrityError: If the package is internally inconsistent.
        """
        self.schema = schema
        self.codec = codec or PackageCodec()
        self.engine = engine or ValidationEngine()
        self.writer = writer or AnnotationWriter(language=schema.language)
        self.document: FormattedDocument = self.codec.load(data)
        self.violations: List[Violation] = []
        self.state = PassState.LOADED

    def _advance(self, expected: PassState, target: PassState) -> None:
        if self.state is not expected:
            raise PassStateError(
                message=f"Cannot enter {target.value} from {self.state.value}",
                location="pass",
                details={"state": self.state.value, "expected": expected.value},
            )
        self.state = target

    def validate(self) -> List[Violation]:
        """Run the validation engine over the loaded document."""
        self._advance(PassState.LOADED, PassState.VALIDATING)
        self.document, self.violations = self.engine.validate(self.document, self.schema)
        return self.violations

    def annotate(self) -> FormattedDocument:
        """Write the violations found into the document."""
        self._advance(PassState.VALIDATING, PassState.ANNOTATED)
        self.document = self.writer.annotate(self.document, self.violations)
        return self.document

    def serialize(self) -> bytes:
        """Serialize the annotated document."""
        self._advance(PassState.ANNOTATED, PassState.SERIALIZED)
        return self.codec.save(self.document)

    def run(self) -> PassResult:
        """Run validate, annotate and serialize in order."""
        start_time = time.time()
        self.validate()
        self.annotate()
        output = self.serialize()
        return PassResult(
            output=output,
            schema=self.schema,
            violations=list(self.violations),
            annotations=list(getattr(self.writer, "annotations", [])),
            processing_time=time.time() - start_time,
        )


def resolve_schema(rule_record: RuleRecord = None, use_default: bool = True) -> RuleSchema:
    """
    Turn a rule record into a schema.

    Args:
        rule_record: Rule record as a mapping or JSON text.
        use_default: Use the built-in schema when the record is None.

    Returns:
        The parsed schema.

    Raises:
        SchemaError: If the record is malformed.
    """
    if rule_record is None and use_default:
        logger.info("No rule record given, using the built-in rules")
        return default_schema()
    return parse_rule_schema(rule_record)


def run_pass(
    document_bytes: bytes,
    rule_record: RuleRecord = None,
    annotation_config: Optional[AnnotationConfig] = None,
) -> PassResult:
    """
    Check a document and return the annotated bytes with the violations.

    The rule record is parsed before the document is read, so a malformed
    record fails the pass without touching the document.

    Raises:
        SchemaError: If the rule record is malformed.
        DecodeError: If the package cannot be read.
        IntegrityError: If the package is internally inconsistent.
    """
    schema = resolve_schema(rule_record)
    writer = AnnotationWriter(config=annotation_config, language=schema.language)
    validation_pass = ValidationPass(document_bytes, schema, writer=writer)
    result = validation_pass.run()
    logger.info(
        f"Checked document: {len(result.violations)} violations "
        f"in {result.processing_time:.2f}s"
    )
    return result


def check_document(
    document_bytes: bytes,
    rule_record: RuleRecord = None,
    annotation_config: Optional[AnnotationConfig] = None,
) -> bytes:
    """
    Check a document against a rule record and return the annotated copy.

    Args:
        document_bytes: Raw bytes of the .docx package.
        rule_record: Rule record as a mapping or JSON text. When None the
            built-in rules are used; an empty record checks nothing.
        annotation_config: Comment author and highlighting options.

    Returns:
        Bytes of the annotated package. Identical to the input when no
        violation was found.

    Raises:
        SchemaError: If the rule record is malformed.
        DecodeError: If the package cannot be read.
        IntegrityError: If the package is internally inconsistent.
    """
    return run_pass(document_bytes, rule_record, annotation_config).output


def extract_rules(
    document_bytes: bytes,
    codec: Optional[IPackageCodec] = None,
    extractor: Optional[IRuleExtractor] = None,
) -> Dict[str, Any]:
    """
    Infer a rule record from an exemplar document.

    Args:
        document_bytes: Raw bytes of the .docx package.
        codec: Package codec, PackageCodec by default.
        extractor: Rule extractor, RuleExtractor by default.

    Returns:
        Rule record that ``check_document`` accepts.

    Raises:
        DecodeError: If the package cannot be read.
        IntegrityError: If the package is internally inconsistent.
    """
    codec = codec or PackageCodec()
    extractor = extractor or RuleExtractor()
    document = codec.load(document_bytes)
    return extractor.extract(document).to_record()
