"""
ProposalPress: Document Processor

Structural-analysis stage. Compiles raw proposal text into a
ProcessedDocument:

1. Normalize text
2. Segment into sections
3. Extract pricing tables
4. Build the table of contents
5. Resolve placeholders
6. Apply inline formatting
7. Extract metadata and compute statistics

Stages run strictly in order. Per-document state lives in a RunContext that
is created for each call, so one processor instance can serve concurrent
callers.
"""

import logging
import math
from datetime import date
from typing import Optional, Union, Dict, Any

from .formatter import apply_formatting, strip_markup
from .metadata_extractor import extract_metadata
from .models import ProcessedDocument, ProcessingStats
from .placeholder_resolver import PlaceholderResolver, PlaceholderValues
from .run_context import RunContext, create_run_context
from .section_parser import SectionParser
from .table_extractor import TableExtractor, TableDetectionStrategy
from .text_cleaner import TextNormalizer
from .text_utils import count_words
from .toc_builder import TOCBuilder, DEFAULT_PAGE_CHAR_ESTIMATE

logger = logging.getLogger(__name__)

DEFAULT_WORDS_PER_PAGE = 500


class DocumentProcessor:
    """Raw text in, ProcessedDocument out"""

    def __init__(
        self,
        table_strategy: Optional[TableDetectionStrategy] = None,
        page_char_estimate: int = DEFAULT_PAGE_CHAR_ESTIMATE,
        words_per_page: int = DEFAULT_WORDS_PER_PAGE,
    ):
        self.section_parser = SectionParser()
        self.table_extractor = TableExtractor(table_strategy)
        self.toc_builder = TOCBuilder(page_char_estimate)
        self.placeholder_resolver = PlaceholderResolver()
        self.words_per_page = words_per_page

    def process(
        self,
        raw_text: str,
        placeholders: Optional[Union[PlaceholderValues, Dict[str, Any]]] = None,
        context: Optional[RunContext] = None,
        today: Optional[date] = None,
    ) -> ProcessedDocument:
        """
        Run the structural-analysis stage.

        Args:
            raw_text: Raw proposal text
            placeholders: Replacement values, as PlaceholderValues or a
                request-style dict
            context: Run context; a new one is created when omitted
            today: Date used when the text carries none

        Returns:
            ProcessedDocument
        """
        context = context or create_run_context()
        if not isinstance(placeholders, PlaceholderValues):
            placeholders = PlaceholderValues.from_dict(placeholders)

        logger.info(f"[{context.run_id}] Processing document ({len(raw_text)} chars)")

        cleaned = TextNormalizer.clean(raw_text)

        context.sections = self.section_parser.parse(cleaned)
        context.tables = self.table_extractor.extract(context.sections)
        context.table_of_contents = self.toc_builder.build(context.sections)

        resolved = self.placeholder_resolver.resolve(context.sections, placeholders, context)
        formatted = apply_formatting(resolved)

        metadata = extract_metadata(cleaned, today=today)
        stats = self.generate_stats(formatted, context)

        logger.info(
            f"[{context.run_id}] Processed {stats.total_sections} sections, "
            f"{stats.total_tables} tables, {stats.total_words} words"
        )

        return ProcessedDocument(
            sections=formatted,
            tables=list(context.tables),
            table_of_contents=list(context.table_of_contents),
            metadata=metadata,
            stats=stats,
        )

    def generate_stats(self, sections, context: RunContext) -> ProcessingStats:
        total_words = sum(count_words(strip_markup(s.content)) for s in sections)
        return ProcessingStats(
            total_sections=len(sections),
            total_words=total_words,
            estimated_pages=math.ceil(total_words / self.words_per_page),
            total_tables=len(context.tables),
            remaining_placeholders=set(context.remaining_placeholders),
        )
