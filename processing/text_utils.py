"""
Text utilities for ProposalPress.

Slug generation shared by section ids and output filenames, plus the
column splitter used by fixed-width table detection.
"""

from typing import List
import re


NON_ALPHANUMERIC = re.compile(r'[^a-z0-9]')
REPEATED_HYPHENS = re.compile(r'-+')

# Two or more whitespace characters mark a column boundary
COLUMN_GAP = re.compile(r'\s{2,}')

WHITESPACE_RUN = re.compile(r'\s+')


def slugify(text: str) -> str:
    """
    Lower-case, replace non-alphanumerics with hyphens, collapse repeats.

    Leading and trailing hyphens are kept, e.g. "Budget (Draft)" becomes
    "budget-draft-".
    """
    slug = NON_ALPHANUMERIC.sub('-', text.lower())
    return REPEATED_HYPHENS.sub('-', slug)


def collapse_whitespace(text: str) -> str:
    """Collapse internal whitespace runs to single spaces and trim"""
    return WHITESPACE_RUN.sub(' ', text).strip()


def split_columns(line: str) -> List[str]:
    """Split a fixed-width line into non-empty cells"""
    return [cell.strip() for cell in COLUMN_GAP.split(line.strip()) if cell.strip()]


def count_words(text: str) -> int:
    return len(text.split())
