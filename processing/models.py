"""
ProposalPress: Structured Document Models

The intermediate document compiled from raw proposal text. Every object is
created fresh for one pipeline run; stages produce new instances instead of
mutating earlier output.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Set
from enum import Enum


class TableType(Enum):
    """Kinds of extracted tables"""
    PRICING = "pricing"


@dataclass
class Section:
    """
    A titled block of document content.

    Levels:
    - 1: "Component N" blocks
    - 2: named proposal sections (Project Overview, Objectives, ...)
    - 3: everything else
    """
    id: str                 # slug derived from title
    title: str
    level: int
    content: str = ""       # raw text, later inline markup

    @property
    def is_component(self) -> bool:
        return self.id.startswith("component-")

    @property
    def is_empty(self) -> bool:
        return not self.content or not self.content.strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "level": self.level,
            "content": self.content,
        }


@dataclass
class Table:
    """Tabular data extracted from a section's content"""
    id: str
    section_id: str
    headers: List[str]
    rows: List[List[str]]
    type: str = TableType.PRICING.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "section_id": self.section_id,
            "headers": list(self.headers),
            "rows": [list(row) for row in self.rows],
            "type": self.type,
        }


@dataclass
class TocItem:
    """Table of contents entry, one per section"""
    title: str
    level: int
    page: int               # estimated, not a real layout page
    id: str                 # back-reference to Section.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "level": self.level,
            "page": self.page,
            "id": self.id,
        }


@dataclass
class DocumentMetadata:
    """Heuristic metadata from the top of the document"""
    title: str = ""
    client: str = ""
    date: str = ""
    version: str = "1.0"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "client": self.client,
            "date": self.date,
            "version": self.version,
        }


@dataclass
class ProcessingStats:
    """Document statistics after processing"""
    total_sections: int = 0
    total_words: int = 0
    estimated_pages: int = 0
    total_tables: int = 0
    remaining_placeholders: Set[str] = field(default_factory=set)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_sections": self.total_sections,
            "total_words": self.total_words,
            "estimated_pages": self.estimated_pages,
            "total_tables": self.total_tables,
            "remaining_placeholders": sorted(self.remaining_placeholders),
        }


@dataclass
class ProcessedDocument:
    """Output of the structural-analysis stage"""
    sections: List[Section]
    tables: List[Table]
    table_of_contents: List[TocItem]
    metadata: DocumentMetadata
    stats: ProcessingStats

    def tables_for_section(self, section_id: str) -> List[Table]:
        return [t for t in self.tables if t.section_id == section_id]

    def find_section(self, section_id: str):
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sections": [s.to_dict() for s in self.sections],
            "tables": [t.to_dict() for t in self.tables],
            "table_of_contents": [item.to_dict() for item in self.table_of_contents],
            "metadata": self.metadata.to_dict(),
            "stats": self.stats.to_dict(),
        }
