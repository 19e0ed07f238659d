"""
ProposalPress: Investment Summary

Totals derived from pricing tables, shared by the HTML and DOCX renderers so
both formats show the same figures.

For each pricing table the first digit run (commas allowed) of every row's
last cell is summed. Each table's section gets one line, named after the
section title (tables in the same section share a line). A flat 10% GST is
added to the subtotal. Rounding happens only when an amount is displayed.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from processing.models import ProcessedDocument, TableType

GST_RATE = Decimal("0.10")
AMOUNT_PATTERN = re.compile(r'\d[\d,]*')

COMPONENT_LABEL = "Component"
SUBTOTAL_LABEL = "Subtotal (ex GST)"
GST_LABEL = "GST (10%)"
TOTAL_LABEL = "Total (inc GST)"


@dataclass
class InvestmentLine:
    """One section's share of the investment"""
    name: str
    amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "amount": str(self.amount)}


@dataclass
class InvestmentSummary:
    """Aggregated investment figures"""
    lines: List[InvestmentLine] = field(default_factory=list)
    subtotal: Decimal = Decimal("0")
    gst: Decimal = Decimal("0")
    total: Decimal = Decimal("0")

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "subtotal": str(self.subtotal),
            "gst": str(self.gst),
            "total": str(self.total),
        }


def parse_amount(cell: str) -> Optional[Decimal]:
    """First digit run in a cell, commas removed"""
    match = AMOUNT_PATTERN.search(cell or "")
    if not match:
        return None
    return Decimal(match.group(0).replace(",", ""))


def format_currency(amount: Decimal) -> str:
    """$1,234 for whole amounts, $1,234.50 otherwise"""
    if amount == amount.to_integral_value():
        return f"${int(amount):,}"
    return f"${amount:,.2f}"


def calculate_investment_summary(document: ProcessedDocument) -> InvestmentSummary:
    """
    Aggregate pricing tables into an InvestmentSummary.

    Returns an empty summary when the document has no pricing tables.
    """
    titles = {section.id: section.title for section in document.sections}
    grouped: Dict[str, InvestmentLine] = {}

    for index, table in enumerate(document.tables):
        if table.type != TableType.PRICING.value:
            continue

        table_total = Decimal("0")
        for row in table.rows:
            amount = parse_amount(row[-1]) if row else None
            if amount is not None:
                table_total += amount

        if table.section_id not in grouped:
            name = titles.get(table.section_id) or f"{COMPONENT_LABEL} {index + 1}"
            grouped[table.section_id] = InvestmentLine(name=name, amount=Decimal("0"))
        grouped[table.section_id].amount += table_total

    lines = list(grouped.values())
    subtotal = sum((line.amount for line in lines), Decimal("0"))
    gst = subtotal * GST_RATE

    return InvestmentSummary(
        lines=lines,
        subtotal=subtotal,
        gst=gst,
        total=subtotal + gst,
    )
