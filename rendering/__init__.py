"""
ProposalPress rendering package

HTML templating, the Investment Summary, per-format renderers and the
FormatConverter that writes artifacts to disk.
"""

from .investment import (
    InvestmentLine,
    InvestmentSummary,
    calculate_investment_summary,
    format_currency,
    parse_amount,
)
from .template_engine import (
    TemplateEngine,
    TemplateConfig,
    TemplateMetadata,
    TemplateLayout,
    TemplateStyle,
    register_template,
    get_template_style,
    list_templates,
)
from .renderers import (
    DocumentRenderer,
    HypertextRenderer,
    PaginatedRenderer,
    StructuredDocRenderer,
    default_renderers,
)
from .format_converter import FormatConverter, ConversionResult

__all__ = [
    "InvestmentLine",
    "InvestmentSummary",
    "calculate_investment_summary",
    "format_currency",
    "parse_amount",
    "TemplateEngine",
    "TemplateConfig",
    "TemplateMetadata",
    "TemplateLayout",
    "TemplateStyle",
    "register_template",
    "get_template_style",
    "list_templates",
    "DocumentRenderer",
    "HypertextRenderer",
    "PaginatedRenderer",
    "StructuredDocRenderer",
    "default_renderers",
    "FormatConverter",
    "ConversionResult",
]
