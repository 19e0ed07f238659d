"""
ProposalPress: Document Validation Engine

Structural checks on a processed document plus a 0-100 completeness score.

Implements:
- Malformed-table detection (tables without headers) as errors
- Empty and very short section detection as warnings
- Unresolved placeholder reporting as a warning
- Completeness scoring from issues and missing metadata
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .formatter import strip_markup
from .models import DocumentMetadata, ProcessedDocument
from .text_utils import count_words

logger = logging.getLogger(__name__)


class IssueKind(Enum):
    """Types of document issues"""
    MALFORMED_TABLE = "malformed_table"          # table without headers
    EMPTY_SECTION = "empty_section"              # whitespace-only content
    SHORT_SECTION = "short_section"              # fewer than MIN_SECTION_WORDS
    UNRESOLVED_PLACEHOLDER = "unresolved_placeholder"


class Severity(Enum):
    """Severity levels for issues"""
    ERROR = "error"      # blocks output when enforcement is on
    WARNING = "warning"  # reported, never blocks


@dataclass
class ValidationIssue:
    """A single validation finding, aggregated over all affected items"""
    kind: IssueKind
    severity: Severity
    message: str
    count: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "severity": self.severity.value,
            "message": self.message,
            "count": self.count,
        }


@dataclass
class ValidationResult:
    """Complete validation result"""
    is_valid: bool
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)
    completeness_score: int = 100  # 0-100

    @property
    def error_messages(self) -> List[str]:
        return [issue.message for issue in self.errors]

    @property
    def warning_messages(self) -> List[str]:
        return [issue.message for issue in self.warnings]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "stats": dict(self.stats),
            "completeness_score": self.completeness_score,
        }


# Scoring weights
ERROR_PENALTY = 20
WARNING_PENALTY = 5
MISSING_TITLE_PENALTY = 10
MISSING_CLIENT_PENALTY = 10
EMPTY_SECTION_PENALTY = 5

MIN_SECTION_WORDS = 10


class Validator:
    """
    Deterministic validator for processed documents.

    Each check contributes at most one issue. The issue's count says how
    many sections or tables it covers, and the score penalizes the number
    of issues, not their counts.
    """

    def validate(
        self,
        document: ProcessedDocument,
        metadata: Optional[DocumentMetadata] = None,
    ) -> ValidationResult:
        """
        Validate a processed document.

        Args:
            document: Output of DocumentProcessor.process()
            metadata: Metadata used for scoring; defaults to the document's
                own metadata. The orchestrator passes the caller-enriched
                metadata here.

        Returns:
            ValidationResult with issues, counters and completeness score
        """
        metadata = metadata or document.metadata
        errors: List[ValidationIssue] = []
        warnings: List[ValidationIssue] = []

        empty_sections = [s for s in document.sections if s.is_empty]
        if empty_sections:
            warnings.append(ValidationIssue(
                kind=IssueKind.EMPTY_SECTION,
                severity=Severity.WARNING,
                message=f"Found {len(empty_sections)} empty sections",
                count=len(empty_sections),
            ))

        remaining = document.stats.remaining_placeholders
        if remaining:
            warnings.append(ValidationIssue(
                kind=IssueKind.UNRESOLVED_PLACEHOLDER,
                severity=Severity.WARNING,
                message=f"Found {len(remaining)} unresolved placeholders",
                count=len(remaining),
            ))

        malformed_tables = [t for t in document.tables if not t.headers]
        if malformed_tables:
            errors.append(ValidationIssue(
                kind=IssueKind.MALFORMED_TABLE,
                severity=Severity.ERROR,
                message=f"Found {len(malformed_tables)} tables without proper headers",
                count=len(malformed_tables),
            ))

        short_sections = [
            s for s in document.sections
            if not s.is_empty and count_words(strip_markup(s.content)) < MIN_SECTION_WORDS
        ]
        if short_sections:
            warnings.append(ValidationIssue(
                kind=IssueKind.SHORT_SECTION,
                severity=Severity.WARNING,
                message=f"Found {len(short_sections)} sections with very short content",
                count=len(short_sections),
            ))

        result = ValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            stats={
                "total_sections": len(document.sections),
                "empty_sections": len(empty_sections),
                "short_sections": len(short_sections),
                "total_tables": len(document.tables),
                "malformed_tables": len(malformed_tables),
                "remaining_placeholders": len(remaining),
            },
        )
        result.completeness_score = self.calculate_completeness(document, result, metadata)

        logger.info(
            f"Validation: {len(errors)} errors, {len(warnings)} warnings, "
            f"completeness {result.completeness_score}"
        )
        return result

    @staticmethod
    def calculate_completeness(
        document: ProcessedDocument,
        result: ValidationResult,
        metadata: Optional[DocumentMetadata] = None,
    ) -> int:
        """Score from 100 down, clamped to [0, 100]"""
        metadata = metadata or document.metadata
        score = 100

        score -= len(result.errors) * ERROR_PENALTY
        score -= len(result.warnings) * WARNING_PENALTY

        if not metadata.title:
            score -= MISSING_TITLE_PENALTY
        if not metadata.client:
            score -= MISSING_CLIENT_PENALTY

        empty_sections = sum(1 for s in document.sections if s.is_empty)
        score -= empty_sections * EMPTY_SECTION_PENALTY

        return max(0, min(100, score))
