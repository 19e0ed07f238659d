"""
Orchestrator integration tests: raw text in, files and report out.
"""

import os

import pytest

from core.orchestrator import (
    ProcessingRequest,
    ProposalDocumentProcessor,
    build_report,
    format_bytes,
    preview_document,
)
from processing.document_processor import DocumentProcessor
from processing.models import Table
from processing.table_extractor import TableDetectionStrategy
from rendering.format_converter import FormatConverter
from rendering.renderers import HypertextRenderer, StructuredDocRenderer


class HeaderlessTableStrategy(TableDetectionStrategy):
    """Reports one table without headers for every pricing section"""

    def extract(self, section, start_index):
        if not section.id.startswith("pricing-summary"):
            return []
        return [Table(
            id=f"{section.id}-table-{start_index}",
            section_id=section.id,
            headers=[],
            rows=[["a", "b", "c"]],
        )]


class ExplodingDocumentProcessor:

    def process(self, raw_text, placeholders=None, context=None, today=None):
        raise RuntimeError("parser crashed")


def make_processor(output_dir, options=None, renderers=None, **kwargs):
    converter = FormatConverter(
        output_dir=str(output_dir),
        renderers=renderers or {"html": HypertextRenderer(), "docx": StructuredDocRenderer()},
    )
    return ProposalDocumentProcessor(options, converter=converter, **kwargs)


def sample_request(sample_placeholders, **overrides):
    data = {
        "agency": "Northwind Digital",
        "client": "Harbourside City Council",
        "formats": ["html", "docx"],
        "placeholders": sample_placeholders,
    }
    data.update(overrides)
    return ProcessingRequest.from_dict(data)


@pytest.mark.integration
class TestProposalDocumentProcessor:
    """Test full pipeline runs"""

    def test_sample_run(self, output_dir, sample_text, sample_placeholders):
        processor = make_processor(output_dir)
        result = processor.process_proposal(sample_text, sample_request(sample_placeholders))

        assert result.success, result.error
        assert [o.format for o in result.outputs] == ["html", "docx"]
        assert all(o.success for o in result.outputs)
        assert sorted(os.listdir(output_dir)) == sorted(o.filename for o in result.outputs)

        assert result.validation.is_valid
        assert result.stats["output_files"] == 2
        assert result.stats["sections_processed"] == 16
        assert result.stats["tables_processed"] == 2
        assert result.stats["input_length"] == len(sample_text)
        assert result.stats["total_output_size"] == sum(o.size for o in result.outputs)

        assert result.template.metadata.agency == "Northwind Digital"
        assert result.template.metadata.client == "Harbourside City Council"

    def test_short_input_rejected(self, output_dir):
        processor = make_processor(output_dir)
        result = processor.process_proposal("x" * 50, {"formats": ["html"]})

        assert not result.success
        assert result.error_type == "InputValidationError"
        assert "too short" in result.error
        assert "50 characters" in result.error
        assert os.listdir(output_dir) == []

    @pytest.mark.parametrize("raw_text", [None, "", 12345])
    def test_missing_input_rejected(self, output_dir, raw_text):
        result = make_processor(output_dir).process_proposal(raw_text)

        assert not result.success
        assert result.error_type == "InputValidationError"
        assert result.error == "Raw text is required and must be a string"

    def test_validation_errors_abort_before_output(self, output_dir, sample_text):
        processor = make_processor(
            output_dir,
            document_processor=DocumentProcessor(table_strategy=HeaderlessTableStrategy()),
        )
        result = processor.process_proposal(sample_text, {"formats": ["html"]})

        assert not result.success
        assert result.error_type == "DocumentValidationError"
        assert "Found 2 tables without proper headers" in result.error
        assert result.validation is not None
        assert not result.validation.is_valid
        assert os.listdir(output_dir) == []

    def test_enforcement_can_be_disabled(self, output_dir, sample_text):
        processor = make_processor(
            output_dir,
            options={"validate_placeholders": False},
            document_processor=DocumentProcessor(table_strategy=HeaderlessTableStrategy()),
        )
        result = processor.process_proposal(sample_text, {"formats": ["html"]})

        assert result.success
        assert not result.validation.is_valid
        assert len(os.listdir(output_dir)) == 1

    def test_enforcement_from_environment(self, monkeypatch, output_dir, sample_text):
        monkeypatch.setenv("PROPOSALPRESS_VALIDATE_PLACEHOLDERS", "false")
        processor = make_processor(
            output_dir,
            document_processor=DocumentProcessor(table_strategy=HeaderlessTableStrategy()),
        )
        assert processor.process_proposal(sample_text, {"formats": ["html"]}).success

    def test_one_format_failure_is_isolated(self, output_dir, sample_text, sample_placeholders, failing_renderer):
        renderers = {
            "html": HypertextRenderer(),
            "pdf": failing_renderer("pdf"),
            "docx": StructuredDocRenderer(),
        }
        processor = make_processor(output_dir, renderers=renderers)
        request = sample_request(sample_placeholders, formats=["html", "pdf", "docx"])

        result = processor.process_proposal(sample_text, request)

        assert result.success
        assert [o.success for o in result.outputs] == [True, False, True]
        assert result.stats["output_files"] == 2
        assert len(os.listdir(output_dir)) == 2

    def test_default_format(self, output_dir, sample_text):
        result = make_processor(output_dir).process_proposal(sample_text, {})
        assert [o.format for o in result.outputs] == ["html"]

    def test_unexpected_errors_are_wrapped(self, output_dir, sample_text):
        processor = make_processor(output_dir, document_processor=ExplodingDocumentProcessor())
        result = processor.process_proposal(sample_text)

        assert not result.success
        assert result.error_type == "OrchestrationError"
        assert "parser crashed" in result.error

    def test_documents_are_deterministic(self, output_dir, sample_text, sample_placeholders):
        processor = make_processor(output_dir)
        request = sample_request(sample_placeholders)

        first = processor.process_proposal(sample_text, request)
        second = processor.process_proposal(sample_text, request)

        assert first.document.to_dict() == second.document.to_dict()
        assert first.validation.to_dict() == second.validation.to_dict()

    def test_request_client_used_for_scoring(self, output_dir, long_text):
        raw = f"Delivery Approach\n{long_text}\n{long_text}"
        processor = make_processor(output_dir)

        anonymous = processor.process_proposal(raw, {"formats": ["html"]})
        named = processor.process_proposal(raw, {"formats": ["html"], "client": "ACME"})

        assert named.validation.completeness_score - anonymous.validation.completeness_score == 10
        assert named.outputs[0].filename.startswith("acme-")

    def test_template_options(self, output_dir, sample_text):
        request = ProcessingRequest.from_dict({
            "formats": ["html"],
            "includeTOC": False,
            "colors": {"primary": "#112233"},
            "pageSize": "Letter",
        })
        result = make_processor(output_dir).process_proposal(sample_text, request)

        with open(result.outputs[0].filepath, encoding="utf-8") as f:
            html = f.read()
        assert "Table of Contents" not in html
        assert "#112233" in html
        assert "size: Letter;" in html


@pytest.mark.integration
class TestPreview:

    def test_preview_writes_nothing(self, output_dir, sample_text, sample_placeholders):
        processor = make_processor(output_dir)
        preview = processor.preview(sample_text, sample_request(sample_placeholders))

        assert preview.success
        assert len(preview.document.sections) == 16
        assert set(preview.estimated_outputs) == {"html", "pdf", "docx"}
        assert preview.estimated_outputs["html"]["bytes"] > preview.estimated_outputs["pdf"]["bytes"]
        assert preview.validation.completeness_score == 70
        assert os.listdir(output_dir) == []

    def test_preview_validates_input(self):
        preview = preview_document("too short")
        assert not preview.success
        assert preview.error_type == "InputValidationError"


@pytest.mark.integration
class TestReporting:
    """Test the boundary report and summary helpers"""

    def test_build_report(self, output_dir, sample_text, sample_placeholders):
        result = make_processor(output_dir).process_proposal(sample_text, sample_request(sample_placeholders))
        report = build_report(result, "https://example.test/download/")

        assert report["success"] is True
        html_output = report["outputs"][0]
        assert html_output["format"] == "html"
        assert html_output["downloadUrl"] == f"https://example.test/download/{html_output['filename']}"
        assert html_output["sizeFormatted"] == format_bytes(html_output["size"])

        assert len(report["document"]["sections"]) == 16
        assert report["document"]["tables"][0]["sectionId"] == "pricing-summary"
        assert report["document"]["metadata"]["client"] == "Harbourside City Council"
        assert report["validation"]["isValid"] is True
        assert report["validation"]["completenessScore"] == 70
        assert report["stats"]["inputLength"] == len(sample_text)

    def test_report_uses_configured_download_url(self, monkeypatch, output_dir, sample_text):
        monkeypatch.setenv("PROPOSALPRESS_DOWNLOAD_URL", "/files")
        result = make_processor(output_dir).process_proposal(sample_text, {"formats": ["html"]})

        report = build_report(result)
        assert report["outputs"][0]["downloadUrl"].startswith("/files/")

    def test_failed_outputs_in_report(self, output_dir, sample_text, failing_renderer):
        processor = make_processor(output_dir, renderers={"pdf": failing_renderer("pdf")})
        report = build_report(processor.process_proposal(sample_text, {"formats": ["pdf"]}))

        assert report["success"] is True
        assert report["outputs"] == [{"format": "pdf", "success": False, "error": "Renderer exploded"}]

    def test_failure_report(self, output_dir):
        report = build_report(make_processor(output_dir).process_proposal("short"))
        assert report == {
            "success": False,
            "error": "Raw text appears too short for a proposal document: 5 characters, minimum 100",
            "errorType": "InputValidationError",
        }

    def test_processing_stats(self, output_dir, sample_text, sample_placeholders):
        processor = make_processor(output_dir)
        result = processor.process_proposal(sample_text, sample_request(sample_placeholders))
        stats = processor.get_processing_stats(result)

        assert stats["success"] is True
        assert stats["input"]["raw_text_length"] == len(sample_text)
        assert stats["output"]["successful_files"] == 2
        assert stats["output"]["failed_files"] == 0
        assert stats["quality"]["completeness"] == 70
        assert stats["validation"]["warnings"] == 3

    def test_processing_stats_for_failure(self, output_dir):
        processor = make_processor(output_dir)
        stats = processor.get_processing_stats(processor.process_proposal(None))
        assert stats == {"success": False, "error": "Raw text is required and must be a string"}

    @pytest.mark.parametrize("num_bytes,expected", [
        (0, "0 Bytes"),
        (512, "512 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (5 * 1024 * 1024, "5 MB"),
    ])
    def test_format_bytes(self, num_bytes, expected):
        assert format_bytes(num_bytes) == expected


@pytest.mark.integration
class TestProcessingRequest:

    def test_nested_placeholders_win(self):
        request = ProcessingRequest.from_dict({
            "duration": "2 weeks",
            "placeholders": {"duration": "6 weeks", "projectOverview": "Overview"},
        })
        assert request.duration == "6 weeks"
        assert request.project_overview == "Overview"

    def test_toggles_default_on(self):
        request = ProcessingRequest.from_dict({"includeTOC": None})
        assert request.include_toc
        assert request.include_title_page
        assert request.include_investment_summary

    def test_single_format_string(self):
        assert ProcessingRequest.from_dict({"formats": "pdf"}).formats == ["pdf"]

    def test_empty_payload(self):
        request = ProcessingRequest.from_dict(None)
        assert request.formats is None
        assert request.page_size == "A4"
        assert request.template_name == "professional-proposal"
