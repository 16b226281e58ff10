"""Unit tests for rule extraction from exemplar documents."""

import io

import pytest
from docx import Document

from docx_format_checker.extractors import RuleExtractor, ValueTally
from docx_format_checker.models.enums import RuleCategory
from docx_format_checker.parsers import load_document
from docx_format_checker.rules import parse_rule_schema

from conftest import body, build_docx, heading


class TestValueTally:
    """Tests for the most-frequent-value counter."""

    def test_mode(self):
        tally = ValueTally()
        for value in ["a", "b", "b", "c"]:
            tally.add(value)

        assert tally.mode() == "b"
        assert len(tally) == 4

    def test_tie_goes_to_first_seen(self):
        tally = ValueTally()
        for value in ["x", "y", "y", "x"]:
            tally.add(value)

        assert tally.mode() == "x"

    def test_none_is_not_counted(self):
        tally = ValueTally()
        tally.add(None)

        assert tally.mode() is None
        assert len(tally) == 0


class TestRuleExtractor:
    """Tests for RuleExtractor."""

    @pytest.fixture
    def extractor(self):
        return RuleExtractor()

    def test_dominant_body_font(self, extractor):
        paragraphs = [body(f"Compliant {i}") for i in range(8)]
        paragraphs += [body(f"Odd {i}", font="Arial", size=12) for i in range(2)]
        document = load_document(build_docx(paragraphs))

        record = extractor.extract_record(document)

        assert record["bodyFont"] == "Times New Roman"
        assert record["bodyFontSize"] == 14

    def test_layout_and_margins(self, extractor):
        document = load_document(build_docx([body("One"), body("Two")]))

        record = extractor.extract_record(document)

        assert record["indentation"] == 1.25
        assert record["lineSpacing"] == 1.5
        assert record["alignment"] == "justify"
        assert record["margins"] == pytest.approx({"top": 20, "bottom": 20, "left": 30, "right": 15}, abs=0.02)

    def test_headings(self, extractor, compliant_docx):
        record = extractor.extract_record(load_document(compliant_docx))

        assert record["headingFont"] == "Times New Roman"
        assert record["headingFontSize"] == 16
        assert set(record["headingStyle"]) == {"1", "2"}
        assert record["headingStyle"]["1"].lower() == "heading 1"

    def test_categories_without_samples_are_omitted(self, extractor):
        record = extractor.extract_record(load_document(build_docx([body("Only body text")])))

        assert "headingFont" not in record
        assert "headingFontSize" not in record
        assert "headingStyle" not in record

    def test_empty_paragraphs_are_ignored(self, extractor):
        paragraphs = [body("Text")] + [body("   ", font="Arial") for _ in range(3)]
        record = extractor.extract_record(load_document(build_docx(paragraphs)))

        assert record["bodyFont"] == "Times New Roman"

    def test_tie_goes_to_first_in_document_order(self, extractor):
        document = load_document(build_docx([
            body("First", font="Georgia"),
            body("Second", font="Verdana"),
        ]))

        assert extractor.extract_record(document)["bodyFont"] == "Georgia"

    def test_margins_keep_hundredths_of_a_millimetre(self, extractor):
        document = Document()
        document.add_paragraph("Text")
        buffer = io.BytesIO()
        document.save(buffer)

        record = extractor.extract_record(load_document(buffer.getvalue()))

        # The default template uses 1800 twips side margins
        assert record["margins"]["left"] == 31.75
        assert record["margins"]["right"] == 31.75

    def test_extraction_is_deterministic(self, extractor, compliant_docx):
        first = extractor.extract_record(load_document(compliant_docx))
        second = extractor.extract_record(load_document(compliant_docx))

        assert first == second

    def test_record_is_a_valid_rule_record(self, extractor, compliant_docx):
        schema = extractor.extract(load_document(compliant_docx))

        assert parse_rule_schema(schema.to_record()) == schema
        assert RuleCategory.BODY_FONT in schema.categories
