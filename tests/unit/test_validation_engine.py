"""
Tests for document validation and completeness scoring.
"""

import pytest

from processing.models import DocumentMetadata, Section, Table
from processing.validation_engine import (
    IssueKind,
    Severity,
    Validator,
)


def section(id, content):
    return Section(id=id, title=id.title(), level=2, content=content)


@pytest.mark.unit
class TestValidator:
    """Test issue detection"""

    def setup_method(self):
        self.validator = Validator()

    def test_clean_document(self, document_factory, long_text):
        document = document_factory([section("a", long_text), section("b", long_text)])
        result = self.validator.validate(document)

        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []
        assert result.completeness_score == 100

    def test_malformed_table_is_error(self, document_factory, long_text):
        table = Table(id="a-table-0", section_id="a", headers=[], rows=[["1", "2", "3"]])
        document = document_factory([section("a", long_text)], tables=[table])
        result = self.validator.validate(document)

        assert not result.is_valid
        assert result.error_messages == ["Found 1 tables without proper headers"]
        assert result.errors[0].kind == IssueKind.MALFORMED_TABLE
        assert result.errors[0].severity == Severity.ERROR
        assert result.completeness_score == 80

    def test_warning_messages_and_order(self, document_factory, long_text):
        document = document_factory(
            [
                section("a", ""),
                section("b", "   "),
                section("c", "<p>Too short</p>"),
                section("d", long_text),
            ],
            placeholders={"CLIENT_NAME", "TBD"},
        )
        result = self.validator.validate(document)

        assert result.is_valid
        assert result.warning_messages == [
            "Found 2 empty sections",
            "Found 2 unresolved placeholders",
            "Found 1 sections with very short content",
        ]
        assert [w.count for w in result.warnings] == [2, 2, 1]
        assert result.stats["empty_sections"] == 2
        assert result.stats["short_sections"] == 1

    def test_short_section_counts_visible_words(self, document_factory):
        markup = "<ul>\n<li>one two three four five</li>\n<li>six seven eight nine ten</li>\n</ul>"
        document = document_factory([section("a", markup)])
        assert self.validator.validate(document).warnings == []

    def test_empty_and_short_sections_distinct(self, document_factory):
        document = document_factory([section("a", "")])
        result = self.validator.validate(document)
        assert [w.kind for w in result.warnings] == [IssueKind.EMPTY_SECTION]

    def test_metadata_override(self, document_factory, long_text):
        document = document_factory([section("a", long_text)], client="")
        assert self.validator.validate(document).completeness_score == 90

        enriched = DocumentMetadata(title="Proposal", client="ACME")
        assert self.validator.validate(document, enriched).completeness_score == 100

    def test_to_dict(self, document_factory):
        result = self.validator.validate(document_factory([section("a", "")]))
        data = result.to_dict()
        assert data["is_valid"] is True
        assert data["warnings"][0]["kind"] == "empty_section"
        assert data["warnings"][0]["severity"] == "warning"


@pytest.mark.unit
class TestCompletenessScore:

    def test_empty_section_costs_more_than_short_section(self, document_factory, long_text):
        """Same metadata, one empty section vs one short section"""
        validator = Validator()
        with_empty = document_factory([section("a", long_text), section("b", long_text), section("c", "")])
        with_short = document_factory([section("a", long_text), section("b", long_text), section("c", "<p>Brief</p>")])

        empty_score = validator.validate(with_empty).completeness_score
        short_score = validator.validate(with_short).completeness_score

        assert empty_score == 90
        assert short_score == 95
        assert short_score - empty_score == 5

    def test_missing_title_and_client(self, document_factory, long_text):
        document = document_factory([section("a", long_text)], title="", client="")
        assert Validator().validate(document).completeness_score == 80

    def test_score_clamped_at_zero(self, document_factory):
        tables = [Table(id="t", section_id="a", headers=[], rows=[["x"]])]
        sections = [section(f"s{i}", "") for i in range(30)]
        document = document_factory(sections, tables=tables, title="", client="", placeholders={"TBD"})

        score = Validator().validate(document).completeness_score
        assert score == 0

    def test_score_within_bounds_for_sample(self, processed_sample):
        result = Validator().validate(processed_sample)
        assert 0 <= result.completeness_score <= 100

    def test_sample_report(self, processed_sample):
        result = Validator().validate(processed_sample)

        assert result.is_valid
        assert result.warning_messages == [
            "Found 3 empty sections",
            "Found 6 unresolved placeholders",
            "Found 1 sections with very short content",
        ]
        # three warnings and three empty sections
        assert result.completeness_score == 70
