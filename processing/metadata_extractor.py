"""
ProposalPress: Metadata Extractor

Heuristic title/client/date/version detection from the top of a document.
Only the first HEADER_WINDOW lines are inspected.
"""

import re
from datetime import date
from typing import Optional

from .models import DocumentMetadata

HEADER_WINDOW = 10
MIN_TITLE_LENGTH = 5
MAX_TITLE_LENGTH = 100
DEFAULT_VERSION = "1.0"

CLIENT_LINE = re.compile(r'^(?:Prepared for|Client)\s*:?\s+(.+)$', re.IGNORECASE)
ISO_DATE = re.compile(r'\b(\d{4}-\d{2}-\d{2})\b')
VERSION_LINE = re.compile(r'^Version\s*:?\s*v?(\d+(?:\.\d+)*)', re.IGNORECASE)


def extract_metadata(text: str, today: Optional[date] = None) -> DocumentMetadata:
    """
    Extract document metadata from cleaned text.

    Title: the first line of reasonable length, replaced by a later line
    mentioning "proposal" if the current title does not. Client, date and
    version come from labelled lines when present.
    """
    metadata = DocumentMetadata(
        date=(today or date.today()).isoformat(),
        version=DEFAULT_VERSION,
    )

    for raw_line in text.split('\n')[:HEADER_WINDOW]:
        line = raw_line.strip()

        client_match = CLIENT_LINE.match(line)
        if client_match and not metadata.client:
            metadata.client = client_match.group(1).strip()
            continue

        version_match = VERSION_LINE.match(line)
        if version_match:
            metadata.version = version_match.group(1)
            continue

        date_match = ISO_DATE.search(line)
        if date_match and len(line) <= len(date_match.group(1)) + 10:
            metadata.date = date_match.group(1)
            continue

        if MIN_TITLE_LENGTH < len(line) < MAX_TITLE_LENGTH:
            if not metadata.title:
                metadata.title = line
            elif 'proposal' in line.lower() and 'proposal' not in metadata.title.lower():
                metadata.title = line

    return metadata
