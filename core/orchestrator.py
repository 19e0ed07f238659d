"""
ProposalPress Orchestration Engine
Runs the full proposal pipeline for one document

Flow:
1. Validate input
2. Structural analysis (DocumentProcessor)
3. Build the template configuration from request + document metadata
4. Validate the processed document; abort before writing anything when
   validation fails and placeholder enforcement is on
5. Render HTML once and convert every requested format
6. Return a ProcessingResult (failures are reported, never raised)
"""

import logging
import math
import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from core.config import PipelineConfig, SUPPORTED_FORMATS, get_config
from core.exceptions import (
    ProposalPressError,
    InputValidationError,
    DocumentValidationError,
    OrchestrationError,
)
from processing.document_processor import DocumentProcessor
from processing.formatter import strip_markup
from processing.models import DocumentMetadata, ProcessedDocument
from processing.placeholder_resolver import PlaceholderValues
from processing.run_context import create_run_context
from processing.validation_engine import Validator, ValidationResult
from rendering.format_converter import FormatConverter, ConversionResult
from rendering.template_engine import (
    TemplateConfig,
    TemplateLayout,
    TemplateMetadata,
    get_template_style,
    DEFAULT_TEMPLATE_NAME,
    DEFAULT_TITLE,
    DEFAULT_CLIENT,
    DEFAULT_AGENCY,
)

logger = logging.getLogger(__name__)


# Stock phrases that usually mean the draft was never filled in
STOCK_PHRASES = {
    "overview stub": re.compile(r'Brief overview of the proposed project'),
    "placeholder duration": re.compile(r'\bX weeks\b'),
    "placeholder amount": re.compile(r'\$[X,]+'),
    "undefined acronym": re.compile(r'\b[A-Z]{2,}\b'),
}

# Output size relative to plain text length
SIZE_MULTIPLIERS = {
    "html": 1.2,
    "pdf": 0.8,
    "docx": 1.1,
}

BYTE_UNITS = ["Bytes", "KB", "MB", "GB"]


def _as_list(value) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    return list(value)


@dataclass
class ProcessingRequest:
    """Caller options for one run"""
    agency: Optional[str] = None
    client: Optional[str] = None
    project_overview: Optional[str] = None
    duration: Optional[str] = None
    pricing: Optional[str] = None
    formats: Optional[List[str]] = None
    include_toc: bool = True
    include_title_page: bool = True
    include_investment_summary: bool = True
    colors: Dict[str, str] = field(default_factory=dict)
    fonts: Dict[str, str] = field(default_factory=dict)
    page_size: str = "A4"
    template_name: str = DEFAULT_TEMPLATE_NAME

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ProcessingRequest":
        """
        Build from a request payload (camelCase keys).

        Placeholder values may be given at top level or under
        "placeholders"; the nested form wins.
        """
        data = data or {}
        nested = data.get("placeholders") or {}

        def placeholder(key: str) -> Optional[str]:
            return nested.get(key) or data.get(key)

        return cls(
            agency=data.get("agency"),
            client=data.get("client"),
            project_overview=placeholder("projectOverview"),
            duration=placeholder("duration"),
            pricing=placeholder("pricing"),
            formats=_as_list(data.get("formats")),
            include_toc=data.get("includeTOC", True) is not False,
            include_title_page=data.get("includeTitlePage", True) is not False,
            include_investment_summary=data.get("includeInvestmentSummary", True) is not False,
            colors=dict(data.get("colors") or {}),
            fonts=dict(data.get("fonts") or {}),
            page_size=data.get("pageSize") or "A4",
            template_name=data.get("templateName") or DEFAULT_TEMPLATE_NAME,
        )

    def placeholder_values(self) -> PlaceholderValues:
        return PlaceholderValues(
            project_overview=self.project_overview,
            duration=self.duration,
            pricing=self.pricing,
        )


@dataclass
class ProcessingResult:
    """Outcome of one pipeline run"""
    success: bool
    document: Optional[ProcessedDocument] = None
    template: Optional[TemplateConfig] = None
    outputs: List[ConversionResult] = field(default_factory=list)
    validation: Optional[ValidationResult] = None
    stats: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    error_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "document": self.document.to_dict() if self.document else None,
            "template": self.template.to_dict() if self.template else None,
            "outputs": [o.to_dict() for o in self.outputs],
            "validation": self.validation.to_dict() if self.validation else None,
            "stats": dict(self.stats),
            "error": self.error,
            "error_type": self.error_type,
        }


@dataclass
class PreviewResult:
    """Processing result without any files written"""
    success: bool
    document: Optional[ProcessedDocument] = None
    template: Optional[TemplateConfig] = None
    validation: Optional[ValidationResult] = None
    estimated_outputs: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    error: Optional[str] = None
    error_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "document": self.document.to_dict() if self.document else None,
            "template": self.template.to_dict() if self.template else None,
            "validation": self.validation.to_dict() if self.validation else None,
            "estimated_outputs": self.estimated_outputs,
            "error": self.error,
            "error_type": self.error_type,
        }


class ProposalDocumentProcessor:
    """
    Top-level pipeline.

    Instances hold configuration and stateless collaborators only, so one
    processor can serve concurrent runs. Per-document state lives in the
    RunContext created for each call.
    """

    def __init__(
        self,
        options: Optional[Dict[str, Any]] = None,
        config: Optional[PipelineConfig] = None,
        converter: Optional[FormatConverter] = None,
        document_processor: Optional[DocumentProcessor] = None,
        validator: Optional[Validator] = None,
    ):
        options = options or {}
        self.config = config or get_config()
        processing = self.config.processing

        self.validate_placeholders = options.get("validate_placeholders", processing.validate_placeholders)
        self.default_format = options.get("default_format", processing.default_format)
        self.min_input_length = processing.min_input_length

        self.document_processor = document_processor or DocumentProcessor(
            page_char_estimate=processing.page_char_estimate,
            words_per_page=processing.words_per_page,
        )
        self.validator = validator or Validator()
        self.converter = converter or FormatConverter(
            output_dir=options.get("output_dir", self.config.output.output_directory),
            renderer_config=self.config.renderer,
            max_workers=options.get("max_workers"),
        )

    # =========================================================================
    # Pipeline
    # =========================================================================

    def process_proposal(
        self,
        raw_text: str,
        request: Optional[Union[ProcessingRequest, Dict[str, Any]]] = None,
    ) -> ProcessingResult:
        """
        Process raw proposal text into formatted documents.

        Args:
            raw_text: Raw proposal text
            request: ProcessingRequest or request payload dict

        Returns:
            ProcessingResult; on failure success is False and error /
            error_type describe why
        """
        started = time.perf_counter()
        validation: Optional[ValidationResult] = None

        try:
            request = self._coerce_request(request)
            self.validate_input(raw_text)

            context = create_run_context()
            document = self.document_processor.process(
                raw_text, request.placeholder_values(), context=context
            )
            template = self.generate_template(document, request)

            validation = self.validator.validate(document, self.effective_metadata(document, request))
            if not validation.is_valid and self.validate_placeholders:
                raise DocumentValidationError(
                    "Document validation failed", ", ".join(validation.error_messages)
                )

            formats = request.formats or [self.default_format]
            outputs = self.converter.convert_all(
                document, formats, template, client=request.client
            )

            successful = [o for o in outputs if o.success]
            stats = {
                "processing_time_ms": round((time.perf_counter() - started) * 1000, 2),
                "input_length": len(raw_text),
                "output_files": len(successful),
                "sections_processed": len(document.sections),
                "tables_processed": len(document.tables),
                "estimated_pages": document.stats.estimated_pages,
                "total_output_size": sum(o.size for o in successful),
            }

            logger.info(
                f"[{context.run_id}] Proposal processed: {len(successful)}/{len(outputs)} outputs "
                f"in {stats['processing_time_ms']}ms"
            )
            return ProcessingResult(
                success=True,
                document=document,
                template=template,
                outputs=outputs,
                validation=validation,
                stats=stats,
            )

        except ProposalPressError as e:
            logger.error(f"Proposal processing failed: {e}")
            return ProcessingResult(
                success=False,
                validation=validation,
                error=str(e),
                error_type=type(e).__name__,
            )
        except Exception as e:
            logger.exception("Unexpected error during proposal processing")
            wrapped = OrchestrationError("Unexpected processing failure", str(e))
            return ProcessingResult(
                success=False,
                validation=validation,
                error=str(wrapped),
                error_type=type(wrapped).__name__,
            )

    def preview(
        self,
        raw_text: str,
        request: Optional[Union[ProcessingRequest, Dict[str, Any]]] = None,
    ) -> PreviewResult:
        """Process and validate without writing files"""
        try:
            request = self._coerce_request(request)
            self.validate_input(raw_text)

            document = self.document_processor.process(
                raw_text, request.placeholder_values(), context=create_run_context()
            )
            validation = self.validator.validate(document, self.effective_metadata(document, request))

            return PreviewResult(
                success=True,
                document=document,
                template=self.generate_template(document, request),
                validation=validation,
                estimated_outputs={
                    fmt: self.estimate_output_size(document, fmt) for fmt in SUPPORTED_FORMATS
                },
            )
        except ProposalPressError as e:
            logger.error(f"Preview failed: {e}")
            return PreviewResult(success=False, error=str(e), error_type=type(e).__name__)
        except Exception as e:
            logger.exception("Unexpected error during preview")
            wrapped = OrchestrationError("Unexpected preview failure", str(e))
            return PreviewResult(success=False, error=str(wrapped), error_type=type(wrapped).__name__)

    def validate_input(self, raw_text: Any) -> None:
        """Reject missing or too-short input; warn about stock phrases"""
        if not raw_text or not isinstance(raw_text, str):
            raise InputValidationError("Raw text is required and must be a string")

        length = len(raw_text.strip())
        if length < self.min_input_length:
            raise InputValidationError(
                "Raw text appears too short for a proposal document",
                f"{length} characters, minimum {self.min_input_length}",
            )

        found = [name for name, pattern in STOCK_PHRASES.items() if pattern.search(raw_text)]
        if found and self.validate_placeholders:
            logger.warning(f"Found potential placeholders in input: {', '.join(found)}")

    @staticmethod
    def effective_metadata(document: ProcessedDocument, request: ProcessingRequest) -> DocumentMetadata:
        """Document metadata with the caller's client taking precedence"""
        metadata = document.metadata
        return DocumentMetadata(
            title=metadata.title,
            client=request.client or metadata.client,
            date=metadata.date,
            version=metadata.version,
        )

    def generate_template(self, document: ProcessedDocument, request: ProcessingRequest) -> TemplateConfig:
        metadata = self.effective_metadata(document, request)
        style = get_template_style(request.template_name).merged(request.colors, request.fonts)

        return TemplateConfig(
            name=request.template_name,
            metadata=TemplateMetadata(
                title=metadata.title or DEFAULT_TITLE,
                client=metadata.client or DEFAULT_CLIENT,
                agency=request.agency or DEFAULT_AGENCY,
                date=metadata.date,
                version=metadata.version or "1.0",
            ),
            styling=style,
            layout=TemplateLayout(
                include_toc=request.include_toc,
                include_title_page=request.include_title_page,
                include_investment_summary=request.include_investment_summary,
                page_size=request.page_size,
            ),
        )

    @staticmethod
    def _coerce_request(request) -> ProcessingRequest:
        if isinstance(request, ProcessingRequest):
            return request
        return ProcessingRequest.from_dict(request)

    # =========================================================================
    # Reporting
    # =========================================================================

    @staticmethod
    def estimate_output_size(document: ProcessedDocument, format: str) -> Dict[str, Any]:
        """Rough artifact size from the plain text length"""
        base_length = sum(len(strip_markup(s.content)) for s in document.sections)
        estimated = math.ceil(base_length * SIZE_MULTIPLIERS.get(format, 1))
        return {
            "bytes": estimated,
            "kilobytes": math.ceil(estimated / 1024),
            "readable": format_bytes(estimated),
        }

    @staticmethod
    def get_processing_stats(result: ProcessingResult) -> Dict[str, Any]:
        """Summary of a run for dashboards and the CLI"""
        if not result.success:
            return {"success": False, "error": result.error}

        stats = result.stats
        input_length = stats.get("input_length", 0)
        outputs = result.outputs

        return {
            "success": True,
            "input": {
                "raw_text_length": input_length,
                "estimated_words": math.ceil(input_length / 5),
            },
            "processing": {
                "sections_processed": stats.get("sections_processed", 0),
                "tables_processed": stats.get("tables_processed", 0),
                "processing_time_ms": stats.get("processing_time_ms", 0),
            },
            "validation": {
                "is_valid": result.validation.is_valid,
                "warnings": len(result.validation.warnings),
                "errors": len(result.validation.errors),
            },
            "output": {
                "total_files": len(outputs),
                "successful_files": sum(1 for o in outputs if o.success),
                "failed_files": sum(1 for o in outputs if not o.success),
                "total_size": sum(o.size for o in outputs),
            },
            "quality": {
                "completeness": result.validation.completeness_score,
                "estimated_pages": math.ceil(input_length / 2000),
            },
        }


def format_bytes(num_bytes: int) -> str:
    """Human readable size: 0 Bytes, 512 Bytes, 1.5 KB, 2 MB"""
    if num_bytes <= 0:
        return "0 Bytes"

    value = float(num_bytes)
    index = 0
    while value >= 1024 and index < len(BYTE_UNITS) - 1:
        value /= 1024
        index += 1

    display = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{display} {BYTE_UNITS[index]}"


def build_report(result: ProcessingResult, download_base_url: Optional[str] = None) -> Dict[str, Any]:
    """
    JSON payload for HTTP callers.

    Shape:
        {success, document: {sections, tables, metadata},
         outputs: [{format, filename, downloadUrl, size, sizeFormatted}],
         validation, stats: {processingTime, inputLength, estimatedPages}}
    """
    if not result.success:
        report = {
            "success": False,
            "error": result.error,
            "errorType": result.error_type,
        }
        if result.validation is not None:
            report["validation"] = _validation_report(result.validation)
        return report

    base_url = (download_base_url or get_config().output.download_base_url).rstrip("/")
    document = result.document

    outputs = []
    for output in result.outputs:
        if output.success:
            outputs.append({
                "format": output.format,
                "filename": output.filename,
                "downloadUrl": f"{base_url}/{output.filename}",
                "size": output.size,
                "sizeFormatted": format_bytes(output.size),
            })
        else:
            outputs.append({
                "format": output.format,
                "success": False,
                "error": output.error,
            })

    return {
        "success": True,
        "document": {
            "sections": [
                {"id": s.id, "title": s.title, "level": s.level, "content": s.content}
                for s in document.sections
            ],
            "tables": [
                {
                    "id": t.id,
                    "sectionId": t.section_id,
                    "headers": list(t.headers),
                    "rows": [list(row) for row in t.rows],
                    "type": t.type,
                }
                for t in document.tables
            ],
            "metadata": document.metadata.to_dict(),
        },
        "outputs": outputs,
        "validation": _validation_report(result.validation),
        "stats": {
            "processingTime": result.stats.get("processing_time_ms"),
            "inputLength": result.stats.get("input_length"),
            "estimatedPages": result.stats.get("estimated_pages"),
        },
    }


def _validation_report(validation: ValidationResult) -> Dict[str, Any]:
    return {
        "isValid": validation.is_valid,
        "errors": validation.error_messages,
        "warnings": validation.warning_messages,
        "completenessScore": validation.completeness_score,
    }


# =============================================================================
# Module helpers
# =============================================================================

def create_processor(options: Optional[Dict[str, Any]] = None) -> ProposalDocumentProcessor:
    """Factory function to create a configured processor"""
    return ProposalDocumentProcessor(options)


def process_document(
    raw_text: str,
    request: Optional[Union[ProcessingRequest, Dict[str, Any]]] = None,
    options: Optional[Dict[str, Any]] = None,
) -> ProcessingResult:
    """One-shot processing with a fresh processor"""
    return create_processor(options).process_proposal(raw_text, request)


def preview_document(
    raw_text: str,
    request: Optional[Union[ProcessingRequest, Dict[str, Any]]] = None,
    options: Optional[Dict[str, Any]] = None,
) -> PreviewResult:
    """One-shot preview with a fresh processor"""
    return create_processor(options).preview(raw_text, request)
