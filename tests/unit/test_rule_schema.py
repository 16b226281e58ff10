"""Unit tests for rule record parsing and the built-in rules."""

import json

import pytest

from docx_format_checker.exceptions import SchemaError
from docx_format_checker.models.enums import RuleCategory, Severity
from docx_format_checker.rules import (
    DEFAULT_RULE_RECORD,
    AllowedValues,
    ExactValue,
    HeadingStyleMap,
    MarginBounds,
    NumericRange,
    default_rule_record,
    default_schema,
    load_rule_schema,
    parse_rule_schema,
)


class TestEmptyRecords:
    """Tests for records without constraints."""

    @pytest.mark.parametrize("raw", [None, {}, "", "  ", "{}", b"{}"])
    def test_empty_record_yields_empty_schema(self, raw):
        schema = parse_rule_schema(raw)

        assert schema.is_empty
        assert schema.categories == []

    def test_meta_keys_alone_are_not_constraints(self):
        schema = parse_rule_schema({"language": "ru", "tolerance": 0.5})

        assert schema.is_empty
        assert schema.language == "ru"
        assert schema.tolerance == 0.5


class TestConstraintShapes:
    """Tests for the accepted forms of each category."""

    def test_font_name_forms(self):
        schema = parse_rule_schema({
            "bodyFont": "Times New Roman",
            "headingFont": ["Arial", "Helvetica"],
        })

        body = schema.effective_constraint(RuleCategory.BODY_FONT)
        heading = schema.effective_constraint(RuleCategory.HEADING_FONT)
        assert isinstance(body, AllowedValues)
        assert body.values == ("Times New Roman",)
        assert heading.values == ("Arial", "Helvetica")

    def test_font_names_compare_case_and_space_insensitively(self):
        schema = parse_rule_schema({"bodyFont": "Times New Roman"})
        constraint = schema.effective_constraint(RuleCategory.BODY_FONT)

        assert constraint.allows("times new roman")
        assert constraint.allows("TimesNewRoman")
        assert not constraint.allows("Arial")
        assert not constraint.allows(None)

    def test_numeric_forms(self):
        schema = parse_rule_schema({
            "bodyFontSize": 14,
            "headingFontSize": [14, 16],
            "lineSpacing": {"min": 1.0},
        })

        exact = schema.effective_constraint(RuleCategory.BODY_FONT_SIZE)
        bounded = schema.effective_constraint(RuleCategory.HEADING_FONT_SIZE)
        open_ended = schema.effective_constraint(RuleCategory.LINE_SPACING)
        assert isinstance(exact, ExactValue)
        assert isinstance(bounded, NumericRange)
        assert bounded.describe() == "14..16"
        assert open_ended.describe() == ">= 1"
        assert open_ended.allows(2.0)
        assert not open_ended.allows(0.5)

    def test_tolerance_applies_to_numbers(self):
        schema = parse_rule_schema({"indentation": 1.25, "tolerance": 0.05})
        constraint = schema.effective_constraint(RuleCategory.INDENTATION)

        assert constraint.allows(1.29)
        assert not constraint.allows(1.31)

    def test_alignment_aliases(self):
        schema = parse_rule_schema({"alignment": ["Both", "centre"]})

        assert schema.effective_constraint(RuleCategory.ALIGNMENT).values == ("justify", "center")

    def test_negative_indentation_allowed(self):
        schema = parse_rule_schema({"indentation": -0.5})

        assert schema.effective_constraint(RuleCategory.INDENTATION).value == -0.5

    def test_margins(self):
        schema = parse_rule_schema({"margins": {"left": 30, "top": [15, 25]}})
        constraint = schema.effective_constraint(RuleCategory.MARGINS)

        assert isinstance(constraint, MarginBounds)
        assert [side for side, _ in constraint.sides] == ["top", "left"]
        assert constraint.side("bottom") is None

    def test_heading_styles(self):
        schema = parse_rule_schema({"headingStyle": {"2": "Heading 2", "1": ["Heading 1", "Title"]}})
        constraint = schema.effective_constraint(RuleCategory.HEADING_STYLE)

        assert isinstance(constraint, HeadingStyleMap)
        assert [level for level, _ in constraint.levels] == [1, 2]
        assert constraint.for_level(1).allows("heading1")
        assert constraint.for_level(3) is None

    def test_severity(self):
        schema = parse_rule_schema({
            "bodyFont": {"allowed": ["Arial"], "severity": "warning"},
            "bodyFontSize": {"value": 12, "severity": "warning"},
        })

        assert schema.effective_constraint(RuleCategory.BODY_FONT).severity is Severity.WARNING
        assert schema.effective_constraint(RuleCategory.BODY_FONT_SIZE).severity is Severity.WARNING

    def test_json_text(self):
        schema = parse_rule_schema(json.dumps({"bodyFontSize": 12}))

        assert schema.categories == [RuleCategory.BODY_FONT_SIZE]

    def test_unknown_category_is_a_warning(self):
        schema = parse_rule_schema({"bodyFont": "Arial", "pageColor": "white"})

        assert schema.categories == [RuleCategory.BODY_FONT]
        assert any("pageColor" in warning for warning in schema.warnings)


class TestInvalidRecords:
    """Tests for malformed rule records."""

    def test_inverted_range(self):
        with pytest.raises(SchemaError) as exc_info:
            parse_rule_schema({"bodyFontSize": {"min": 14, "max": 10}})

        assert exc_info.value.category == "schema"
        assert "greater than max" in exc_info.value.errors[0]

    def test_all_errors_are_reported(self):
        with pytest.raises(SchemaError) as exc_info:
            parse_rule_schema({
                "bodyFont": 12,
                "bodyFontSize": "large",
                "margins": [10, 20],
            })

        assert len(exc_info.value.errors) == 3

    @pytest.mark.parametrize("record", [
        {"bodyFontSize": -1},
        {"bodyFontSize": [1, 2, 3]},
        {"bodyFont": []},
        {"alignment": "diagonal"},
        {"headingStyle": {"12": "Heading 12"}},
        {"headingStyle": {}},
        {"bodyFont": {"allowed": "Arial", "severity": "fatal"}},
        {"tolerance": -0.1, "bodyFontSize": 12},
    ])
    def test_invalid_constraint(self, record):
        with pytest.raises(SchemaError):
            parse_rule_schema(record)

    def test_not_a_mapping(self):
        with pytest.raises(SchemaError):
            parse_rule_schema("[1, 2, 3]")

    def test_invalid_json(self):
        with pytest.raises(SchemaError) as exc_info:
            parse_rule_schema("{not json")

        assert "not valid JSON" in exc_info.value.message

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(SchemaError):
            load_rule_schema(tmp_path / "missing.json")

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"bodyFont": "Arial"}), encoding="utf-8")

        assert load_rule_schema(path).categories == [RuleCategory.BODY_FONT]


class TestRecordRoundTrip:
    """Tests for converting schemas back to records."""

    def test_to_record_reparses_to_same_schema(self):
        record = {
            "bodyFont": ["Arial", "Calibri"],
            "bodyFontSize": [11, 12],
            "indentation": 1.25,
            "margins": {"top": 20, "left": 30},
            "headingStyle": {"1": "Heading 1"},
            "alignment": {"allowed": ["left"], "severity": "warning"},
            "language": "ru",
        }
        schema = parse_rule_schema(record)

        assert parse_rule_schema(schema.to_record()) == schema


class TestDefaults:
    """Tests for the built-in rule set."""

    def test_default_schema(self):
        schema = default_schema()

        assert schema.language == "ru"
        assert schema.effective_constraint(RuleCategory.BODY_FONT).values == ("Times New Roman",)
        assert schema.effective_constraint(RuleCategory.BODY_FONT_SIZE).value == 14
        assert schema.effective_constraint(RuleCategory.INDENTATION).value == 1.25
        assert schema.effective_constraint(RuleCategory.LINE_SPACING).value == 1.5
        assert schema.effective_constraint(RuleCategory.MARGINS).side("left").value == 30

    def test_default_record_is_a_copy(self):
        record = default_rule_record()
        record["margins"]["left"] = 99

        assert DEFAULT_RULE_RECORD["margins"]["left"] == 30
