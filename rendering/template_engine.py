"""
ProposalPress: Template Engine

Renders a ProcessedDocument into one self-contained HTML document:

- generated CSS from the template's colors and fonts
- optional title page
- optional table of contents
- one page per section, with that section's tables inline
- optional Investment Summary page

The same HTML is the input for PDF rendering, so page sizing is expressed
in CSS (@page and .page dimensions).
"""

import copy
import logging
from dataclasses import dataclass, field
from html import escape
from typing import Any, Dict, List, Optional

from processing.models import ProcessedDocument, Section, Table, TocItem

from .investment import (
    InvestmentSummary,
    calculate_investment_summary,
    format_currency,
    COMPONENT_LABEL,
    SUBTOTAL_LABEL,
    GST_LABEL,
    TOTAL_LABEL,
)

logger = logging.getLogger(__name__)


DEFAULT_TEMPLATE_NAME = "professional-proposal"

DEFAULT_COLORS = {
    "primary": "#2c3e50",
    "secondary": "#34495e",
    "accent": "#e74c3c",
    "text": "#333",
    "background": "#fff",
    "light": "#f8f9fa",
    "muted": "#bdc3c7",
}

DEFAULT_FONTS = {
    "body": "Arial, sans-serif",
    "headings": "Georgia, serif",
}

# Width x height in millimetres
PAGE_DIMENSIONS = {
    "A4": ("210mm", "297mm"),
    "A3": ("297mm", "420mm"),
    "Letter": ("215.9mm", "279.4mm"),
    "Legal": ("215.9mm", "355.6mm"),
}

DEFAULT_TITLE = "Project Proposal"
DEFAULT_CLIENT = "Client Name"
DEFAULT_AGENCY = "Your Agency Name"


@dataclass
class TemplateStyle:
    """Colors and fonts; missing keys fall back to the defaults"""
    colors: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLORS))
    fonts: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_FONTS))

    def merged(self, colors: Optional[Dict[str, str]] = None, fonts: Optional[Dict[str, str]] = None) -> "TemplateStyle":
        """New style with the given overrides applied"""
        return TemplateStyle(
            colors={**DEFAULT_COLORS, **self.colors, **(colors or {})},
            fonts={**DEFAULT_FONTS, **self.fonts, **(fonts or {})},
        )

    def color(self, key: str) -> str:
        return self.colors.get(key) or DEFAULT_COLORS[key]

    def font(self, key: str) -> str:
        return self.fonts.get(key) or DEFAULT_FONTS[key]

    def to_dict(self) -> Dict[str, Any]:
        return {"colors": dict(self.colors), "fonts": dict(self.fonts)}


@dataclass
class TemplateMetadata:
    """Title page values"""
    title: str = DEFAULT_TITLE
    client: str = DEFAULT_CLIENT
    agency: str = DEFAULT_AGENCY
    date: str = ""
    version: str = "1.0"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "client": self.client,
            "agency": self.agency,
            "date": self.date,
            "version": self.version,
        }


@dataclass
class TemplateLayout:
    """Which optional parts to render"""
    include_toc: bool = True
    include_title_page: bool = True
    include_investment_summary: bool = True
    page_size: str = "A4"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "include_toc": self.include_toc,
            "include_title_page": self.include_title_page,
            "include_investment_summary": self.include_investment_summary,
            "page_size": self.page_size,
        }


@dataclass
class TemplateConfig:
    """Presentation settings for one rendering"""
    name: str = DEFAULT_TEMPLATE_NAME
    metadata: TemplateMetadata = field(default_factory=TemplateMetadata)
    styling: TemplateStyle = field(default_factory=TemplateStyle)
    layout: TemplateLayout = field(default_factory=TemplateLayout)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "metadata": self.metadata.to_dict(),
            "styling": self.styling.to_dict(),
            "layout": self.layout.to_dict(),
        }


# Named style presets
_TEMPLATE_REGISTRY: Dict[str, TemplateStyle] = {
    DEFAULT_TEMPLATE_NAME: TemplateStyle(),
}


def register_template(name: str, style: TemplateStyle) -> None:
    """Register (or replace) a named style preset"""
    _TEMPLATE_REGISTRY[name] = style
    logger.debug(f"Registered template style: {name}")


def get_template_style(name: Optional[str]) -> TemplateStyle:
    """Copy of a registered preset; unknown names get the default style"""
    style = _TEMPLATE_REGISTRY.get(name or DEFAULT_TEMPLATE_NAME)
    if style is None:
        logger.warning(f"Unknown template '{name}', using {DEFAULT_TEMPLATE_NAME}")
        style = _TEMPLATE_REGISTRY[DEFAULT_TEMPLATE_NAME]
    return copy.deepcopy(style)


def list_templates() -> List[str]:
    return sorted(_TEMPLATE_REGISTRY)


class TemplateEngine:
    """Render processed documents to HTML"""

    def render(self, document: ProcessedDocument, template: Optional[TemplateConfig] = None) -> str:
        """
        Render a full HTML document.

        Args:
            document: Processed document (section content is already
                escaped markup)
            template: Presentation settings; defaults apply when omitted

        Returns:
            HTML string
        """
        template = template or TemplateConfig()
        layout = template.layout

        parts = []
        if layout.include_title_page:
            parts.append(self.render_title_page(template.metadata))
        if layout.include_toc:
            parts.append(self.render_table_of_contents(document.table_of_contents))
        parts.append(self.render_sections(document))
        if layout.include_investment_summary:
            parts.append(self.render_investment_summary(calculate_investment_summary(document)))

        body = "\n".join(part for part in parts if part)
        title = escape(template.metadata.title or DEFAULT_TITLE)

        logger.debug(f"Rendered HTML for '{template.metadata.title}' with template {template.name}")

        return (
            "<!DOCTYPE html>\n"
            '<html lang="en">\n'
            "<head>\n"
            '<meta charset="UTF-8">\n'
            '<meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
            f"<title>{title}</title>\n"
            f"<style>\n{self.generate_styles(template)}\n</style>\n"
            "</head>\n"
            "<body>\n"
            f"{body}\n"
            "</body>\n"
            "</html>\n"
        )

    def generate_styles(self, template: TemplateConfig) -> str:
        style = template.styling
        page_size = template.layout.page_size
        width, height = PAGE_DIMENSIONS.get(page_size, PAGE_DIMENSIONS["A4"])
        primary = style.color("primary")
        muted = style.color("muted")
        light = style.color("light")

        return f"""
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
@page {{ size: {page_size if page_size in PAGE_DIMENSIONS else "A4"}; }}
body {{
    font-family: {style.font("body")};
    line-height: 1.6;
    color: {style.color("text")};
    background: {style.color("background")};
}}
h1, h2, h3 {{ font-family: {style.font("headings")}; }}
.page {{
    width: {width};
    min-height: {height};
    margin: 0 auto 20mm;
    padding: 20mm;
    page-break-after: always;
}}
.page:last-child {{ page-break-after: avoid; }}
.title-page {{
    display: flex;
    flex-direction: column;
    justify-content: center;
    align-items: center;
    text-align: center;
}}
.title-page h1 {{ font-size: 2.5em; margin-bottom: 0.5em; color: {primary}; }}
.title-page h2 {{ font-size: 1.5em; margin-bottom: 2em; color: {style.color("secondary")}; }}
.title-page .metadata p {{ margin: 0.5em 0; }}
.toc h1 {{ font-size: 2em; margin-bottom: 1em; color: {primary}; border-bottom: 2px solid {primary}; }}
.toc-item {{
    display: flex;
    justify-content: space-between;
    padding: 0.5em 0;
    border-bottom: 1px dotted {muted};
}}
.toc-item.level-2 {{ margin-left: 2em; }}
.toc-item.level-3 {{ margin-left: 4em; }}
.section h1 {{ font-size: 2em; color: {primary}; margin-bottom: 1em; border-bottom: 2px solid {primary}; }}
.section-content p {{ margin-bottom: 1em; text-align: justify; }}
.section-content ul {{ margin: 1em 0; padding-left: 2em; }}
.section-content li {{ margin-bottom: 0.5em; }}
table {{ width: 100%; border-collapse: collapse; margin: 1.5em 0; font-size: 0.9em; }}
table th {{ background: {primary}; color: white; padding: 0.75em; text-align: left; }}
table td {{ padding: 0.75em; border-bottom: 1px solid {muted}; }}
table tr:nth-child(even) {{ background: {light}; }}
.investment-summary {{ background: {light}; border: 2px solid {primary}; border-radius: 8px; padding: 1.5em; }}
.investment-summary h2 {{ color: {primary}; margin-bottom: 1em; text-align: center; }}
.total-row {{ font-weight: bold; background: {primary} !important; color: white; }}
.component-section {{ border: 1px solid {muted}; border-radius: 8px; padding: 1.5em; }}
.component-header {{
    background: {primary};
    color: white;
    padding: 1em;
    margin: -1.5em -1.5em 1.5em -1.5em;
    border-radius: 8px 8px 0 0;
}}
.component-header h1 {{ color: white; }}
@media print {{
    .page {{ margin: 0; box-shadow: none; }}
    body {{ print-color-adjust: exact; -webkit-print-color-adjust: exact; }}
}}
""".strip()

    @staticmethod
    def render_title_page(metadata: TemplateMetadata) -> str:
        return (
            '<div class="page title-page">\n'
            f"<h1>{escape(metadata.title or DEFAULT_TITLE)}</h1>\n"
            f"<h2>Prepared for {escape(metadata.client or DEFAULT_CLIENT)}</h2>\n"
            '<div class="metadata">\n'
            f"<p><strong>Prepared by:</strong> {escape(metadata.agency or DEFAULT_AGENCY)}</p>\n"
            f"<p><strong>Date:</strong> {escape(metadata.date)}</p>\n"
            f"<p><strong>Version:</strong> {escape(metadata.version)}</p>\n"
            "</div>\n"
            "</div>"
        )

    @staticmethod
    def render_table_of_contents(items: List[TocItem]) -> str:
        if not items:
            return ""
        entries = "\n".join(
            f'<div class="toc-item level-{item.level}">'
            f'<span><a href="#{escape(item.id)}">{escape(item.title)}</a></span>'
            f"<span>{item.page}</span></div>"
            for item in items
        )
        return f'<div class="page toc">\n<h1>Table of Contents</h1>\n{entries}\n</div>'

    def render_sections(self, document: ProcessedDocument) -> str:
        return "\n".join(
            self.render_section(section, document.tables_for_section(section.id))
            for section in document.sections
        )

    def render_section(self, section: Section, tables: List[Table]) -> str:
        title = escape(section.title)
        if section.is_component:
            header = f'<div class="component-header"><h1>{title}</h1></div>'
            section_class = "component-section"
        else:
            header = f"<h1>{title}</h1>" if title else ""
            section_class = "section"

        tables_html = "\n".join(self.render_table(table) for table in tables)
        return (
            f'<div class="page" id="{escape(section.id)}">\n'
            f'<div class="{section_class}">\n'
            f"{header}\n"
            '<div class="section-content">\n'
            f"{section.content}\n"
            f"{tables_html}\n"
            "</div>\n"
            "</div>\n"
            "</div>"
        )

    @staticmethod
    def render_table(table: Table) -> str:
        if not table.headers or not table.rows:
            return ""
        header_cells = "".join(f"<th>{escape(header)}</th>" for header in table.headers)
        body_rows = "\n".join(
            "<tr>" + "".join(f"<td>{escape(cell)}</td>" for cell in row) + "</tr>"
            for row in table.rows
        )
        return (
            f'<table class="pricing-table" id="{escape(table.id)}">\n'
            f"<thead><tr>{header_cells}</tr></thead>\n"
            f"<tbody>\n{body_rows}\n</tbody>\n"
            "</table>"
        )

    @staticmethod
    def render_investment_summary(summary: InvestmentSummary) -> str:
        if summary.is_empty:
            return ""
        line_rows = "\n".join(
            f"<tr><td>{escape(line.name)}</td><td>{format_currency(line.amount)}</td></tr>"
            for line in summary.lines
        )
        return (
            '<div class="page">\n'
            '<div class="investment-summary">\n'
            "<h2>Investment Summary</h2>\n"
            "<table>\n"
            f"<thead><tr><th>{COMPONENT_LABEL}</th><th>{escape(SUBTOTAL_LABEL)}</th></tr></thead>\n"
            "<tbody>\n"
            f"{line_rows}\n"
            f"<tr><td><strong>{escape(SUBTOTAL_LABEL)}</strong></td>"
            f"<td><strong>{format_currency(summary.subtotal)}</strong></td></tr>\n"
            f"<tr><td><strong>{escape(GST_LABEL)}</strong></td>"
            f"<td><strong>{format_currency(summary.gst)}</strong></td></tr>\n"
            f'<tr class="total-row"><td><strong>{escape(TOTAL_LABEL)}</strong></td>'
            f"<td><strong>{format_currency(summary.total)}</strong></td></tr>\n"
            "</tbody>\n"
            "</table>\n"
            "</div>\n"
            "</div>"
        )
