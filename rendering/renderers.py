"""
ProposalPress: Output Renderers

One renderer per output format. Each renderer reports whether its backing
library is installed and turns a processed document (plus the HTML already
rendered for it) into the bytes of the artifact.

- HypertextRenderer (html): the rendered HTML, UTF-8 encoded
- PaginatedRenderer (pdf): headless Chromium via Playwright
- StructuredDocRenderer (docx): python-docx composition

Renderers never write files. Missing libraries raise
RendererUnavailableError; any other failure raises ConversionError.
"""

import io
import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from core.config import RendererConfig
from core.exceptions import ConversionError, RendererUnavailableError
from processing.formatter import strip_markup
from processing.models import ProcessedDocument, Section, Table

from .investment import (
    calculate_investment_summary,
    format_currency,
    COMPONENT_LABEL,
    SUBTOTAL_LABEL,
    GST_LABEL,
    TOTAL_LABEL,
)
from .template_engine import TemplateConfig, DEFAULT_TITLE, DEFAULT_CLIENT, DEFAULT_AGENCY

logger = logging.getLogger(__name__)


class DocumentRenderer(ABC):
    """Capability that produces one output format"""

    format: str = ""
    extension: str = ""
    media_type: str = "application/octet-stream"
    # False when render() ignores the HTML argument
    uses_html: bool = True

    def is_available(self) -> bool:
        return True

    @abstractmethod
    def render(self, document: ProcessedDocument, html: str, template: TemplateConfig) -> bytes:
        """
        Produce the artifact bytes.

        Args:
            document: Processed document
            html: HTML rendered by TemplateEngine for this document
            template: Presentation settings

        Returns:
            File content
        """


class HypertextRenderer(DocumentRenderer):
    format = "html"
    extension = "html"
    media_type = "text/html"

    def render(self, document: ProcessedDocument, html: str, template: TemplateConfig) -> bytes:
        return html.encode("utf-8")


class PaginatedRenderer(DocumentRenderer):
    """
    HTML to PDF through headless Chromium.

    Every browser step is bounded by the configured timeout. There is no
    retry; a timed-out render fails the PDF format only.
    """

    format = "pdf"
    extension = "pdf"
    media_type = "application/pdf"

    def __init__(self, config: Optional[RendererConfig] = None):
        self.config = config or RendererConfig()

    @staticmethod
    def _load_playwright():
        try:
            from playwright.sync_api import sync_playwright, Error, TimeoutError
        except ImportError as e:
            raise RendererUnavailableError(
                "pdf",
                "Playwright is not installed",
                "pip install playwright && playwright install chromium",
            ) from e
        return sync_playwright, Error, TimeoutError

    def is_available(self) -> bool:
        try:
            self._load_playwright()
        except RendererUnavailableError:
            return False
        return True

    def render(self, document: ProcessedDocument, html: str, template: TemplateConfig) -> bytes:
        sync_playwright, PlaywrightError, PlaywrightTimeoutError = self._load_playwright()
        timeout_ms = self.config.pdf_timeout_ms

        try:
            with sync_playwright() as p:
                try:
                    browser = p.chromium.launch(args=self.config.browser_args, timeout=timeout_ms)
                except PlaywrightError as e:
                    raise RendererUnavailableError(
                        "pdf", "Headless Chromium could not be launched", str(e)[:500]
                    ) from e

                try:
                    page = browser.new_page()
                    page.set_default_timeout(timeout_ms)
                    page.set_content(html, wait_until="load", timeout=timeout_ms)
                    page.emulate_media(media="print")
                    pdf_bytes = page.pdf(
                        format=template.layout.page_size,
                        print_background=True,
                        margin=dict(self.config.pdf_margins),
                    )
                finally:
                    browser.close()
        except PlaywrightTimeoutError as e:
            raise ConversionError(
                "pdf", f"PDF rendering timed out after {self.config.pdf_timeout_seconds:g}s"
            ) from e
        except PlaywrightError as e:
            raise ConversionError("pdf", "PDF rendering failed", str(e)[:500]) from e

        logger.debug(f"Rendered PDF ({len(pdf_bytes)} bytes)")
        return pdf_bytes


# Formatted section content is one element per line (see processing.formatter)
LIST_ITEM_LINE = re.compile(r'^<li>(.*)</li>$')
PARAGRAPH_LINE = re.compile(r'^<p>(.*)</p>$')
INLINE_RUN = re.compile(r'(<strong>.*?</strong>|<em>.*?</em>)')

# Page width x height in millimetres
DOCX_PAGE_SIZES = {
    "A4": (210, 297),
    "A3": (297, 420),
    "Letter": (215.9, 279.4),
    "Legal": (215.9, 355.6),
}


class StructuredDocRenderer(DocumentRenderer):
    """
    Word document built from the structured document rather than the HTML.

    Layout mirrors the HTML output: title block, table of contents, one
    heading per section with its paragraphs, bullets and tables, and the
    Investment Summary table.
    """

    format = "docx"
    extension = "docx"
    media_type = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    uses_html = False

    @staticmethod
    def _load_docx():
        try:
            from docx import Document
            from docx.shared import Mm, Inches
        except ImportError as e:
            raise RendererUnavailableError(
                "docx", "python-docx is not installed", "pip install python-docx"
            ) from e
        return Document, Mm, Inches

    def is_available(self) -> bool:
        try:
            self._load_docx()
        except RendererUnavailableError:
            return False
        return True

    def render(self, document: ProcessedDocument, html: str, template: TemplateConfig) -> bytes:
        Document, Mm, Inches = self._load_docx()
        layout = template.layout

        doc = Document()
        width, height = DOCX_PAGE_SIZES.get(layout.page_size, DOCX_PAGE_SIZES["A4"])
        page_setup = doc.sections[0]
        page_setup.page_width = Mm(width)
        page_setup.page_height = Mm(height)

        if layout.include_title_page:
            self._add_title_page(doc, template)

        if layout.include_toc and document.table_of_contents:
            doc.add_heading("Table of Contents", level=1)
            for item in document.table_of_contents:
                paragraph = doc.add_paragraph(f"{item.title}\t{item.page}")
                paragraph.paragraph_format.left_indent = Inches(0.25 * (item.level - 1))
            doc.add_page_break()

        for index, section in enumerate(document.sections):
            if index > 0 and section.is_component:
                doc.add_page_break()
            self._add_section(doc, section, document.tables_for_section(section.id))

        if layout.include_investment_summary:
            self._add_investment_summary(doc, document)

        buffer = io.BytesIO()
        doc.save(buffer)
        buffer.seek(0)
        return buffer.getvalue()

    @staticmethod
    def _add_title_page(doc, template: TemplateConfig) -> None:
        metadata = template.metadata
        doc.add_heading(metadata.title or DEFAULT_TITLE, level=0)
        doc.add_paragraph(f"Prepared for {metadata.client or DEFAULT_CLIENT}")

        meta_para = doc.add_paragraph()
        meta_para.add_run("Prepared by: ").bold = True
        meta_para.add_run(f"{metadata.agency or DEFAULT_AGENCY}\n")
        meta_para.add_run("Date: ").bold = True
        meta_para.add_run(f"{metadata.date}\n")
        meta_para.add_run("Version: ").bold = True
        meta_para.add_run(metadata.version)

        doc.add_page_break()

    def _add_section(self, doc, section: Section, tables: List[Table]) -> None:
        if section.title:
            doc.add_heading(section.title, level=min(max(section.level, 1), 3))

        for line in section.content.split('\n'):
            item = LIST_ITEM_LINE.match(line)
            if item:
                self._add_inline_runs(doc.add_paragraph(style='List Bullet'), item.group(1))
                continue
            paragraph = PARAGRAPH_LINE.match(line)
            if paragraph:
                self._add_inline_runs(doc.add_paragraph(), paragraph.group(1))

        for table in tables:
            self._add_table(doc, table)

    @staticmethod
    def _add_inline_runs(paragraph, markup: str) -> None:
        for part in INLINE_RUN.split(markup):
            if not part:
                continue
            run = paragraph.add_run(strip_markup(part))
            if part.startswith("<strong>"):
                run.bold = True
            elif part.startswith("<em>"):
                run.italic = True

    @staticmethod
    def _add_table(doc, table: Table) -> None:
        columns = max([len(table.headers)] + [len(row) for row in table.rows])
        grid = doc.add_table(rows=1, cols=columns)
        grid.style = 'Table Grid'

        for cell, header in zip(grid.rows[0].cells, table.headers):
            cell.text = ""
            cell.paragraphs[0].add_run(header).bold = True

        for row in table.rows:
            cells = grid.add_row().cells
            for cell, value in zip(cells, row):
                cell.text = value

    @staticmethod
    def _add_investment_summary(doc, document: ProcessedDocument) -> None:
        summary = calculate_investment_summary(document)
        if summary.is_empty:
            return

        doc.add_page_break()
        doc.add_heading("Investment Summary", level=1)

        grid = doc.add_table(rows=1, cols=2)
        grid.style = 'Table Grid'
        header = grid.rows[0].cells
        header[0].paragraphs[0].add_run(COMPONENT_LABEL).bold = True
        header[1].paragraphs[0].add_run(SUBTOTAL_LABEL).bold = True

        for line in summary.lines:
            cells = grid.add_row().cells
            cells[0].text = line.name
            cells[1].text = format_currency(line.amount)

        for label, amount in (
            (SUBTOTAL_LABEL, summary.subtotal),
            (GST_LABEL, summary.gst),
            (TOTAL_LABEL, summary.total),
        ):
            cells = grid.add_row().cells
            cells[0].paragraphs[0].add_run(label).bold = True
            cells[1].paragraphs[0].add_run(format_currency(amount)).bold = True


def default_renderers(config: Optional[RendererConfig] = None) -> Dict[str, DocumentRenderer]:
    """Renderer per supported format"""
    renderers = [HypertextRenderer(), PaginatedRenderer(config), StructuredDocRenderer()]
    return {renderer.format: renderer for renderer in renderers}
