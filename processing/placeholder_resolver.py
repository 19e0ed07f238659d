"""
ProposalPress: Placeholder Resolver

Replaces the stock phrases that drafting tools leave behind with values the
caller supplies, and records anything that still looks like an unfilled
token.

Substitution rules, applied to each section independently:
- the overview stub "Brief overview of the proposed project..." becomes the
  caller's project overview, or is removed
- "X weeks" becomes the caller's duration, or is removed
- dollar placeholders such as "$X,XXX" become the caller's pricing string,
  or are left untouched

Unresolved-token detection is an ALL-CAPS scan. It has no acronym
allow-list, so ordinary abbreviations ("GST", "API") are reported as well.
"""

import logging
import re
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Set

from .models import Section
from .run_context import RunContext

logger = logging.getLogger(__name__)


OVERVIEW_STUB = re.compile(r'Brief overview of the proposed project[^.]*\.+')
DURATION_PLACEHOLDER = re.compile(r'\bX weeks\b')
DOLLAR_PLACEHOLDER = re.compile(r'\$[\dX,]*X[\dX,]*')
ALL_CAPS_TOKEN = re.compile(r'\b[A-Z][A-Z_]*\b')
MIN_TOKEN_LENGTH = 3


@dataclass
class PlaceholderValues:
    """Caller-supplied replacement values"""
    project_overview: Optional[str] = None
    duration: Optional[str] = None
    pricing: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PlaceholderValues":
        """Accept both the camelCase request keys and snake_case keys"""
        data = data or {}
        return cls(
            project_overview=data.get("projectOverview", data.get("project_overview")),
            duration=data.get("duration"),
            pricing=data.get("pricing"),
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "project_overview": self.project_overview,
            "duration": self.duration,
            "pricing": self.pricing,
        }


def find_placeholder_tokens(content: str) -> Set[str]:
    """ALL-CAPS tokens longer than two characters"""
    return {
        token for token in ALL_CAPS_TOKEN.findall(content)
        if len(token) >= MIN_TOKEN_LENGTH
    }


class PlaceholderResolver:
    """Apply substitution rules section by section"""

    def resolve(
        self,
        sections: List[Section],
        values: Optional[PlaceholderValues],
        context: RunContext,
    ) -> List[Section]:
        """
        Resolve placeholders in every section.

        Args:
            sections: Parsed sections (left unchanged)
            values: Replacement values; missing values follow each rule's
                fallback
            context: Run context collecting remaining placeholder tokens

        Returns:
            New Section instances with resolved content
        """
        values = values or PlaceholderValues()
        resolved = []

        for section in sections:
            content = self.resolve_content(section.content, values)
            context.record_placeholders(find_placeholder_tokens(content))
            resolved.append(replace(section, content=content))

        if context.remaining_placeholders:
            logger.debug(
                f"Unresolved tokens after substitution: {sorted(context.remaining_placeholders)}"
            )
        return resolved

    @staticmethod
    def resolve_content(content: str, values: PlaceholderValues) -> str:
        content = OVERVIEW_STUB.sub(
            lambda _: values.project_overview or '', content, count=1
        )
        content = DURATION_PLACEHOLDER.sub(lambda _: values.duration or '', content)
        if values.pricing:
            content = DOLLAR_PLACEHOLDER.sub(lambda _: values.pricing, content)
        return content
