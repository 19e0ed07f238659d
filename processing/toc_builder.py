"""
ProposalPress: Table of Contents Builder

Page numbers are an estimate from content length, not a layout result.
"""

import math
from typing import List

from .models import Section, TocItem

DEFAULT_PAGE_CHAR_ESTIMATE = 2000


class TOCBuilder:
    """One TocItem per section, in document order"""

    def __init__(self, page_char_estimate: int = DEFAULT_PAGE_CHAR_ESTIMATE):
        self.page_char_estimate = page_char_estimate

    def build(self, sections: List[Section]) -> List[TocItem]:
        """
        Build TOC entries.

        The first section sits on page 1. Every later section advances the
        page counter by ceil(len(content) / page_char_estimate) of its own
        content before being recorded.
        """
        items: List[TocItem] = []
        page = 1

        for index, section in enumerate(sections):
            if index > 0:
                page += math.ceil(len(section.content) / self.page_char_estimate)

            items.append(TocItem(
                title=section.title,
                level=section.level,
                page=page,
                id=section.id,
            ))

        return items
