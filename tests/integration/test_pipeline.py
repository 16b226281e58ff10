"""Integration tests for the end-to-end checking pass."""

import io
import zipfile

import pytest
from docx import Document

from docx_format_checker import (
    DecodeError,
    PassResult,
    PassState,
    PassStateError,
    SchemaError,
    ValidationPass,
    check_document,
    extract_rules,
    run_pass,
)
from docx_format_checker.generators import AnnotationConfig
from docx_format_checker.parsers import load_document
from docx_format_checker.rules import default_schema, parse_rule_schema

from conftest import body, build_docx, heading


def _comment_count(data: bytes) -> int:
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        if "word/comments.xml" not in archive.namelist():
            return 0
        return archive.read("word/comments.xml").count(b"<w:comment ")


@pytest.fixture
def uniform_docx() -> bytes:
    """Every heading and every body paragraph formatted alike."""
    return build_docx([
        heading("Introduction"),
        body("First paragraph."),
        body("Second paragraph."),
        heading("Results"),
        body("Third paragraph."),
    ])


class TestCheckDocument:
    """Tests for check_document."""

    def test_truncated_archive(self, compliant_docx):
        with pytest.raises(DecodeError):
            check_document(compliant_docx[:100], {"bodyFont": "Arial"})

    def test_bad_schema_fails_before_document_is_read(self):
        with pytest.raises(SchemaError):
            check_document(b"not a document at all", {"bodyFontSize": {"min": 14, "max": 10}})

    def test_empty_record_checks_nothing(self, arial_docx):
        assert check_document(arial_docx, {}) == arial_docx

    def test_compliant_document_is_returned_unchanged(self, compliant_docx):
        assert check_document(compliant_docx) == compliant_docx

    def test_violations_become_comments(self, arial_docx):
        output = check_document(arial_docx, {"bodyFont": "Times New Roman", "bodyFontSize": [12, 14]})

        assert _comment_count(output) == 2
        assert load_document(output).text() == "Arial text."

    def test_json_text_record(self, arial_docx):
        output = check_document(arial_docx, '{"bodyFont": "Times New Roman"}')

        assert _comment_count(output) == 1

    def test_annotation_config_is_used(self, arial_docx):
        config = AnnotationConfig(author="Norm Controller", initials="NC")

        output = check_document(arial_docx, {"bodyFont": "Times New Roman"}, config)

        with zipfile.ZipFile(io.BytesIO(output)) as archive:
            assert b'w:author="Norm Controller"' in archive.read("word/comments.xml")

    def test_checked_output_can_be_checked_again(self, arial_docx):
        rules = {"bodyFont": "Times New Roman"}
        first = check_document(arial_docx, rules)

        second = check_document(first, rules)

        assert _comment_count(second) == 2
        assert load_document(second).text() == "Arial text."

    def test_table_cells_are_checked(self):
        document = Document()
        cell = document.add_table(rows=1, cols=1).cell(0, 0)
        cell.paragraphs[0].add_run("Cell text").font.name = "Arial"
        data = build_docx([], document=document)

        output = check_document(data, {"bodyFont": "Times New Roman"})

        assert _comment_count(output) == 1


class TestRunPass:
    """Tests for run_pass and its result."""

    def test_default_rules_when_record_is_absent(self, arial_docx):
        result = run_pass(arial_docx)

        assert isinstance(result, PassResult)
        assert result.schema == default_schema()
        assert result.schema.language == "ru"
        assert result.modified
        assert all(annotation.text.startswith("[Ошибка]") for annotation in result.annotations)

    def test_violations_are_in_document_order(self):
        data = build_docx(
            [body("One", font="Arial"), body("Two", size=12), body("Three", font="Arial")],
            margins={"top": 10, "bottom": 20, "left": 30, "right": 15},
        )

        result = run_pass(data)

        keys = [v.sort_key for v in result.violations]
        assert keys == sorted(keys)
        assert result.violations[0].attribute == "top"

    def test_section_without_text_is_marked(self):
        data = build_docx([], margins={"top": 5, "bottom": 20, "left": 30, "right": 15})

        result = run_pass(data, {"margins": {"top": 20}})

        assert len(result.annotations) == len(result.violations) == 1
        assert result.modified
        assert _comment_count(result.output) == 1


class TestExtractRules:
    """Tests for extract_rules and its round trip with check_document."""

    def test_extracted_rules_accept_their_exemplar(self, uniform_docx):
        record = extract_rules(uniform_docx)

        result = run_pass(uniform_docx, record)

        assert result.violations == []
        assert result.output == uniform_docx

    def test_default_template_accepts_its_extracted_rules(self):
        document = Document()
        document.add_paragraph("Plain text in the default template.")
        buffer = io.BytesIO()
        document.save(buffer)
        data = buffer.getvalue()

        result = run_pass(data, extract_rules(data))

        assert result.violations == []

    def test_extracted_rules_flag_the_minority(self):
        paragraphs = [body(f"Regular {i}") for i in range(8)]
        paragraphs += [body(f"Odd {i}", font="Arial", size=12) for i in range(2)]
        data = build_docx(paragraphs)

        record = extract_rules(data)
        result = run_pass(data, record)

        assert record["bodyFont"] == "Times New Roman"
        assert record["bodyFontSize"] == 14
        assert len(result.violations) == 4

    def test_extracted_record_parses(self, compliant_docx):
        record = extract_rules(compliant_docx)

        assert not parse_rule_schema(record).is_empty

    def test_extract_from_garbage(self):
        with pytest.raises(DecodeError):
            extract_rules(b"\x00\x01\x02")


class TestValidationPass:
    """Tests for the pass state machine."""

    def test_states_advance_in_order(self, arial_docx):
        validation_pass = ValidationPass(arial_docx, parse_rule_schema({"bodyFont": "Arial"}))
        assert validation_pass.state is PassState.LOADED

        validation_pass.validate()
        assert validation_pass.state is PassState.VALIDATING

        validation_pass.annotate()
        assert validation_pass.state is PassState.ANNOTATED

        validation_pass.serialize()
        assert validation_pass.state is PassState.SERIALIZED

    def test_steps_cannot_be_repeated(self, arial_docx):
        validation_pass = ValidationPass(arial_docx, default_schema())
        validation_pass.validate()

        with pytest.raises(PassStateError):
            validation_pass.validate()

    def test_steps_cannot_be_skipped(self, arial_docx):
        validation_pass = ValidationPass(arial_docx, default_schema())

        with pytest.raises(PassStateError) as exc_info:
            validation_pass.serialize()

        assert exc_info.value.details["state"] == "loaded"

    def test_pass_cannot_be_rerun(self, arial_docx):
        validation_pass = ValidationPass(arial_docx, default_schema())
        validation_pass.run()

        with pytest.raises(PassStateError):
            validation_pass.run()
