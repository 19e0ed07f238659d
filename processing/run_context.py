"""
ProposalPress: Run Context

Everything a single document run accumulates lives in a RunContext. A fresh
context is created for every invocation and threaded through the stage
functions, so concurrent runs never share per-document state.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Set, Optional
import uuid

from .models import Section, Table, TocItem


@dataclass
class RunContext:
    """Mutable state for one pipeline invocation"""
    run_id: str
    started_at: str
    sections: List[Section] = field(default_factory=list)
    tables: List[Table] = field(default_factory=list)
    table_of_contents: List[TocItem] = field(default_factory=list)

    # Accumulates across the placeholder pass over all sections
    remaining_placeholders: Set[str] = field(default_factory=set)

    def record_placeholders(self, tokens) -> None:
        self.remaining_placeholders.update(tokens)


def create_run_context(run_id: Optional[str] = None) -> RunContext:
    """Factory function to create a new RunContext with defaults"""
    return RunContext(
        run_id=run_id or uuid.uuid4().hex[:12],
        started_at=datetime.now().isoformat(),
    )
