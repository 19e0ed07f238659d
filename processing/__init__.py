"""
ProposalPress processing package

Turns raw proposal text into a structured, validated document:
- text_cleaner: TextNormalizer
- section_parser: SectionParser
- table_extractor: TableExtractor and detection strategies
- placeholder_resolver: PlaceholderResolver
- toc_builder: TOCBuilder
- formatter: inline markup
- validation_engine: Validator and completeness score
- document_processor: the structural-analysis stage
"""

from .models import (
    Section,
    Table,
    TableType,
    TocItem,
    DocumentMetadata,
    ProcessingStats,
    ProcessedDocument,
)
from .run_context import RunContext, create_run_context
from .text_cleaner import TextNormalizer, clean_text
from .section_parser import SectionParser
from .table_extractor import TableExtractor, TableDetectionStrategy, FixedWidthTableStrategy
from .placeholder_resolver import PlaceholderResolver, PlaceholderValues, find_placeholder_tokens
from .toc_builder import TOCBuilder
from .formatter import apply_formatting, format_section_content, strip_markup
from .metadata_extractor import extract_metadata
from .validation_engine import (
    Validator,
    ValidationResult,
    ValidationIssue,
    IssueKind,
    Severity,
)
from .document_processor import DocumentProcessor
from .sample_proposal import SAMPLE_PROPOSAL

__all__ = [
    # Models
    "Section",
    "Table",
    "TableType",
    "TocItem",
    "DocumentMetadata",
    "ProcessingStats",
    "ProcessedDocument",
    "RunContext",
    "create_run_context",
    # Stages
    "TextNormalizer",
    "clean_text",
    "SectionParser",
    "TableExtractor",
    "TableDetectionStrategy",
    "FixedWidthTableStrategy",
    "PlaceholderResolver",
    "PlaceholderValues",
    "find_placeholder_tokens",
    "TOCBuilder",
    "apply_formatting",
    "format_section_content",
    "strip_markup",
    "extract_metadata",
    # Validation
    "Validator",
    "ValidationResult",
    "ValidationIssue",
    "IssueKind",
    "Severity",
    # Stage entry point
    "DocumentProcessor",
    "SAMPLE_PROPOSAL",
]
