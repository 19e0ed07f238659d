"""
ProposalPress Test Configuration
================================

Fixtures:
- Sample raw proposal and its processed document
- Fixed clock and temporary output directory for converters
- Configuration reset between tests
- Fake renderers for formats that need a browser
"""

import pytest
import sys
import os
from datetime import date

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import set_config
from core.exceptions import ConversionError
from processing.document_processor import DocumentProcessor
from processing.models import (
    DocumentMetadata,
    ProcessedDocument,
    ProcessingStats,
)
from processing.sample_proposal import SAMPLE_PROPOSAL
from rendering.renderers import DocumentRenderer


FIXED_TODAY = date(2026, 3, 2)
FIXED_TIMESTAMP = 1767225600000

SAMPLE_PLACEHOLDERS = {
    "projectOverview": (
        "Harbourside will replace its resident portal with an accessible, "
        "maintainable platform connected to council service workflows."
    ),
    "duration": "16 weeks",
    "pricing": "$5,000",
}


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (full pipeline, local files)")
    config.addinivalue_line("markers", "e2e: End-to-end tests (CLI)")


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    """Each test starts from default, environment-free configuration"""
    for name in (
        "PROPOSALPRESS_ENV",
        "PROPOSALPRESS_VALIDATE_PLACEHOLDERS",
        "PROPOSALPRESS_DEFAULT_FORMAT",
        "PROPOSALPRESS_OUTPUT_DIR",
        "PROPOSALPRESS_DOWNLOAD_URL",
        "PROPOSALPRESS_MAX_WORKERS",
        "PDF_RENDER_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    set_config(None)
    yield
    set_config(None)


# =============================================================================
# Documents
# =============================================================================

@pytest.fixture
def sample_text():
    return SAMPLE_PROPOSAL


@pytest.fixture
def processed_sample():
    """The bundled sample, processed with all placeholder values supplied"""
    return DocumentProcessor().process(SAMPLE_PROPOSAL, SAMPLE_PLACEHOLDERS, today=FIXED_TODAY)


def make_document(sections, tables=None, title="Proposal", client="ACME", placeholders=None):
    """Build a ProcessedDocument directly, bypassing the parser"""
    return ProcessedDocument(
        sections=sections,
        tables=tables or [],
        table_of_contents=[],
        metadata=DocumentMetadata(title=title, client=client, date="2026-03-02"),
        stats=ProcessingStats(
            total_sections=len(sections),
            remaining_placeholders=set(placeholders or ()),
        ),
    )


@pytest.fixture
def document_factory():
    return make_document


@pytest.fixture
def long_text():
    """Body text comfortably above the short-section threshold"""
    return "The delivery team will work closely with council staff throughout every stage of the project."


# =============================================================================
# Rendering doubles
# =============================================================================

class FakePdfRenderer(DocumentRenderer):
    """Stands in for the browser-backed PDF renderer"""

    format = "pdf"
    extension = "pdf"

    def render(self, document, html, template):
        return b"%PDF-1.4 fake"


class FailingRenderer(DocumentRenderer):
    """Renderer that always fails with the given exception"""

    def __init__(self, format="pdf", error=None):
        self.format = format
        self.extension = format
        self.error = error or ConversionError(format, "Renderer exploded")

    def render(self, document, html, template):
        raise self.error


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIMESTAMP


@pytest.fixture
def output_dir(tmp_path):
    path = tmp_path / "documents"
    path.mkdir()
    return path


@pytest.fixture
def fake_pdf_renderer():
    return FakePdfRenderer()


@pytest.fixture
def failing_renderer():
    """Factory: failing_renderer("pdf", RuntimeError("boom"))"""
    return FailingRenderer


@pytest.fixture
def fixed_today():
    return FIXED_TODAY


@pytest.fixture
def sample_placeholders():
    return dict(SAMPLE_PLACEHOLDERS)
