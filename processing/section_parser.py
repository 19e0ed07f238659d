"""
ProposalPress: Section Parser

Segments normalized proposal text into an ordered list of titled sections.

A line opens a new section when it either:
1. Starts with one of the known proposal headings (Executive Summary,
   Component N, Pricing Summary, ...), or
2. Looks like a short capitalized heading: under 100 characters, starts with
   an uppercase letter, no sentence period, optional trailing colon.

Section levels come from a fixed keyword table rather than from the text's
own numbering, since chat exports rarely carry consistent numbering.
"""

import logging
import re
from typing import List, Optional, Dict

from .models import Section
from .text_utils import slugify, collapse_whitespace

logger = logging.getLogger(__name__)


# Headings that always open a section (matched at line start, any case)
KNOWN_HEADING_PATTERNS = [
    re.compile(r'^Executive Summary', re.IGNORECASE),
    re.compile(r'^Project Outcomes?', re.IGNORECASE),
    re.compile(r'^Component \d+', re.IGNORECASE),
    re.compile(r'^Project Overview', re.IGNORECASE),
    re.compile(r'^Objectives?', re.IGNORECASE),
    re.compile(r'^Project Phases?', re.IGNORECASE),
    re.compile(r'^Pricing Summary', re.IGNORECASE),
    re.compile(r'^Budget Notes', re.IGNORECASE),
    re.compile(r'^Assumptions?', re.IGNORECASE),
    re.compile(r'^Investment Summary', re.IGNORECASE),
    re.compile(r'^Key Deliverables', re.IGNORECASE),
    re.compile(r'^Account.*Project Management', re.IGNORECASE),
]

# "Capitalized phrase, optional trailing colon". Column gaps and currency
# mark tabular rows, not headings.
GENERIC_HEADING = re.compile(r'^[A-Z][^.]*:?$')
TABULAR_MARKERS = re.compile(r'\s{2,}|\$')
MAX_GENERIC_HEADING_LENGTH = 100

LEVEL_1_PATTERN = re.compile(r'^Component \d+', re.IGNORECASE)
LEVEL_2_PATTERN = re.compile(
    r'^(Project Overview|Objectives?|Project Phases?|Pricing Summary)',
    re.IGNORECASE,
)

UNTITLED_SECTION_ID = "document"


class SectionParser:
    """Split cleaned text into Section objects in source order"""

    def parse(self, text: str) -> List[Section]:
        """
        Parse cleaned text into sections.

        Body lines that appear before the first heading are kept in an
        untitled leading section, so text with no recognizable headings
        still produces exactly one section.

        Args:
            text: Output of TextNormalizer.clean()

        Returns:
            Sections in the order they appear
        """
        sections: List[Section] = []
        used_ids: Dict[str, int] = {}

        current: Optional[Section] = None
        body: List[str] = []

        for raw_line in text.split('\n'):
            line = raw_line.strip()

            if self.is_section_header(line):
                if current is not None or body:
                    sections.append(self._close(current, body, used_ids))

                current = Section(
                    id=self._unique_id(self.generate_section_id(line), used_ids),
                    title=self.clean_section_title(line),
                    level=self.get_section_level(line),
                )
                body = []
            elif line:
                body.append(line)

        if current is not None or body or not sections:
            sections.append(self._close(current, body, used_ids))

        logger.debug(f"Parsed {len(sections)} sections")
        return sections

    def _close(self, current: Optional[Section], body: List[str], used_ids: Dict[str, int]) -> Section:
        """Finish the open section with its accumulated body"""
        content = '\n'.join(body).strip()
        if current is None:
            return Section(
                id=self._unique_id(UNTITLED_SECTION_ID, used_ids),
                title="",
                level=3,
                content=content,
            )
        current.content = content
        return current

    @staticmethod
    def _unique_id(base_id: str, used_ids: Dict[str, int]) -> str:
        """Suffix repeated ids (-2, -3, ...) so table references stay unambiguous"""
        count = used_ids.get(base_id, 0) + 1
        used_ids[base_id] = count
        return base_id if count == 1 else f"{base_id}-{count}"

    @staticmethod
    def is_section_header(line: str) -> bool:
        """Check whether a stripped line opens a new section"""
        if not line:
            return False

        if any(pattern.match(line) for pattern in KNOWN_HEADING_PATTERNS):
            return True

        return (
            len(line) < MAX_GENERIC_HEADING_LENGTH
            and GENERIC_HEADING.match(line) is not None
            and TABULAR_MARKERS.search(line) is None
        )

    @staticmethod
    def clean_section_title(line: str) -> str:
        """Drop a trailing colon and collapse whitespace"""
        title = re.sub(r':$', '', line.strip())
        return collapse_whitespace(title)

    @staticmethod
    def get_section_level(line: str) -> int:
        """Hierarchy level from the fixed keyword table"""
        if LEVEL_1_PATTERN.match(line):
            return 1
        if LEVEL_2_PATTERN.match(line):
            return 2
        return 3

    @staticmethod
    def generate_section_id(line: str) -> str:
        return slugify(SectionParser.clean_section_title(line))
