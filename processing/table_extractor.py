"""
ProposalPress: Table Extractor

Finds pricing tables inside section content.

Detection is delegated to a TableDetectionStrategy so other input families
(true delimited tables, for example) can be added without touching the rest
of the pipeline. The default FixedWidthTableStrategy handles the plain-text
tables found in chat exports, where columns are separated by runs of two or
more spaces:

    ROLE        DESCRIPTION        HOURS    RATE    TOTAL
    Engineer    Build thing        10       $100    $1,000
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import List, Optional

from .models import Section, Table, TableType
from .text_utils import split_columns

logger = logging.getLogger(__name__)


class TableDetectionStrategy(ABC):
    """Turns one section's content into zero or more tables"""

    @abstractmethod
    def extract(self, section: Section, start_index: int) -> List[Table]:
        """
        Extract tables from a section.

        Args:
            section: Section to scan
            start_index: Number of tables already emitted for the document,
                used for table ids

        Returns:
            Tables found in this section, in order
        """


class FixedWidthTableStrategy(TableDetectionStrategy):
    """
    Column-gap heuristic for fixed-width plain-text tables.

    - A header line contains one of HEADER_KEYWORDS (any case).
    - While a table is open, a line is a row when it has at least
      MIN_ROW_FIELDS cells and carries no unresolved placeholder
      (a literal "X" or a "$" with no amount).
    - Any other line, or the end of the section, closes the table.
    - Tables without rows are dropped.
    """

    HEADER_KEYWORDS = ("role", "description", "hours", "rate", "total")
    MIN_ROW_FIELDS = 3
    PLACEHOLDER_MARKER = "X"
    PLACEHOLDER_CURRENCY = re.compile(r'\$(?!\d)')

    def extract(self, section: Section, start_index: int) -> List[Table]:
        tables: List[Table] = []
        headers: Optional[List[str]] = None
        rows: List[List[str]] = []

        def close_table():
            if headers is not None and rows:
                tables.append(Table(
                    id=f"{section.id}-table-{start_index + len(tables)}",
                    section_id=section.id,
                    headers=headers,
                    rows=rows,
                    type=TableType.PRICING.value,
                ))

        for raw_line in section.content.split('\n'):
            line = raw_line.strip()

            if headers is not None:
                if self.is_table_row(line):
                    rows.append(split_columns(line))
                    continue
                close_table()
                headers, rows = None, []

            if self.is_table_header(line):
                headers = split_columns(line)
                rows = []

        close_table()
        return tables

    def is_table_header(self, line: str) -> bool:
        lower_line = line.lower()
        return any(keyword in lower_line for keyword in self.HEADER_KEYWORDS)

    def is_table_row(self, line: str) -> bool:
        if not line:
            return False
        if self.PLACEHOLDER_MARKER in line or self.PLACEHOLDER_CURRENCY.search(line):
            return False
        return len(split_columns(line)) >= self.MIN_ROW_FIELDS


class TableExtractor:
    """Runs a detection strategy over every section of a document"""

    def __init__(self, strategy: Optional[TableDetectionStrategy] = None):
        self.strategy = strategy or FixedWidthTableStrategy()

    def extract(self, sections: List[Section]) -> List[Table]:
        tables: List[Table] = []
        for section in sections:
            found = self.strategy.extract(section, len(tables))
            for table in found:
                if table.section_id != section.id:
                    raise ValueError(
                        f"Table {table.id} references section {table.section_id}, "
                        f"expected {section.id}"
                    )
            tables.extend(found)

        logger.debug(f"Extracted {len(tables)} tables from {len(sections)} sections")
        return tables
