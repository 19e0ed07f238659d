"""
ProposalPress: Format Converter

Writes one artifact per requested format. Each format is converted in
isolation: a failure becomes a failed ConversionResult and never affects
the other formats of the same run.

Files are named {client}-{title}-{timestamp}.{ext}. The timestamp is taken
once per run so all formats of one document share it. Content is written to
a temporary file in the output directory and renamed into place, so a
failed conversion leaves nothing behind.
"""

import logging
import os
import tempfile
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from core.config import RendererConfig, get_config
from core.exceptions import ConversionError
from processing.models import ProcessedDocument
from processing.text_utils import slugify

from .renderers import DocumentRenderer, default_renderers
from .template_engine import TemplateConfig, TemplateEngine

logger = logging.getLogger(__name__)

DEFAULT_FILENAME_TITLE = "proposal"
DEFAULT_FILENAME_CLIENT = "client"


def current_timestamp_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class ConversionResult:
    """Outcome of converting one format"""
    format: str
    filename: Optional[str] = None
    filepath: Optional[str] = None
    size: int = 0
    success: bool = True
    error: Optional[str] = None
    error_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "format": self.format,
            "filename": self.filename,
            "filepath": self.filepath,
            "size": self.size,
            "success": self.success,
        }
        if not self.success:
            result["error"] = self.error
            result["error_type"] = self.error_type
        return result


class FormatConverter:
    """
    Convert processed documents to files.

    Usage:
        converter = FormatConverter(output_dir="./out")
        results = converter.convert_all(document, ["html", "docx"], template)
    """

    def __init__(
        self,
        output_dir: Optional[str] = None,
        renderers: Optional[Dict[str, DocumentRenderer]] = None,
        renderer_config: Optional[RendererConfig] = None,
        max_workers: Optional[int] = None,
        clock: Callable[[], int] = current_timestamp_ms,
    ):
        config = get_config()
        renderer_config = renderer_config or config.renderer

        self.output_dir = output_dir or config.output.output_directory
        self.renderers = renderers if renderers is not None else default_renderers(renderer_config)
        self.max_workers = max_workers or renderer_config.max_parallel_conversions
        self.clock = clock
        self.template_engine = TemplateEngine()

    @property
    def supported_formats(self) -> List[str]:
        return list(self.renderers)

    def available_formats(self) -> List[str]:
        return [fmt for fmt, renderer in self.renderers.items() if renderer.is_available()]

    @staticmethod
    def generate_filename(title: str, client: str, extension: str, timestamp: int) -> str:
        clean_title = slugify(title or DEFAULT_FILENAME_TITLE)
        clean_client = slugify(client or DEFAULT_FILENAME_CLIENT)
        return f"{clean_client}-{clean_title}-{timestamp}.{extension}"

    def convert(
        self,
        document: ProcessedDocument,
        format: str,
        template: Optional[TemplateConfig] = None,
        html: Optional[str] = None,
        client: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> ConversionResult:
        """
        Convert a document to one format.

        Args:
            document: Processed document
            format: Target format name (html, pdf, docx)
            template: Presentation settings
            html: Pre-rendered HTML; rendered here when omitted
            client: Client name for the filename; defaults to the
                document metadata
            timestamp: Filename timestamp in ms; defaults to now

        Returns:
            ConversionResult (never raises)
        """
        fmt = (format or "").strip().lower()
        try:
            renderer = self.renderers.get(fmt)
            if renderer is None:
                raise ConversionError(format, f"Unsupported format: {format}")

            template = template or TemplateConfig()
            if html is None and renderer.uses_html:
                html = self.template_engine.render(document, template)

            filename = self.generate_filename(
                document.metadata.title,
                client or document.metadata.client,
                renderer.extension,
                timestamp if timestamp is not None else self.clock(),
            )

            content = renderer.render(document, html, template)
            filepath = self._write_atomic(filename, content)

            logger.info(f"Generated {fmt} output: {filename} ({len(content)} bytes)")
            return ConversionResult(
                format=fmt,
                filename=filename,
                filepath=filepath,
                size=len(content),
            )

        except ConversionError as e:
            logger.error(f"Failed to generate {format} output: {e}")
            return ConversionResult(
                format=fmt or format,
                success=False,
                error=str(e),
                error_type=type(e).__name__,
            )
        except Exception as e:
            logger.exception(f"Unexpected error generating {format} output")
            return ConversionResult(
                format=fmt or format,
                success=False,
                error=str(e),
                error_type=type(e).__name__,
            )

    def convert_all(
        self,
        document: ProcessedDocument,
        formats: List[str],
        template: Optional[TemplateConfig] = None,
        html: Optional[str] = None,
        client: Optional[str] = None,
    ) -> List[ConversionResult]:
        """
        Convert to several formats in parallel.

        HTML is rendered once and shared by the formats that need it. If
        that rendering fails, only those formats fail. Results come back
        in the order the formats were requested.
        """
        if not formats:
            return []

        template = template or TemplateConfig()
        html_error: Optional[Exception] = None
        if html is None and any(self._uses_html(fmt) for fmt in formats):
            try:
                html = self.template_engine.render(document, template)
            except Exception as e:
                logger.exception("HTML rendering failed")
                html_error = e
        timestamp = self.clock()

        results: List[Optional[ConversionResult]] = [None] * len(formats)
        workers = max(1, min(len(formats), int(self.max_workers)))

        pending = []
        for index, fmt in enumerate(formats):
            if html_error is not None and self._uses_html(fmt):
                results[index] = ConversionResult(
                    format=fmt.strip().lower(),
                    success=False,
                    error=f"HTML rendering failed: {html_error}",
                    error_type=type(html_error).__name__,
                )
            else:
                pending.append((index, fmt))

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="convert") as executor:
            future_to_index = {
                executor.submit(self.convert, document, fmt, template, html, client, timestamp): index
                for index, fmt in pending
            }
            for future in as_completed(future_to_index):
                results[future_to_index[future]] = future.result()

        succeeded = sum(1 for r in results if r.success)
        logger.info(f"Converted {succeeded}/{len(formats)} formats")
        return results

    def _uses_html(self, fmt: str) -> bool:
        renderer = self.renderers.get((fmt or "").strip().lower())
        return renderer is not None and renderer.uses_html

    def _write_atomic(self, filename: str, content: bytes) -> str:
        """Write content under output_dir via temp file + rename"""
        os.makedirs(self.output_dir, exist_ok=True)
        filepath = os.path.join(self.output_dir, filename)

        fd, temp_path = tempfile.mkstemp(dir=self.output_dir, prefix=f".{filename}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            os.replace(temp_path, filepath)
        except BaseException:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

        return filepath

    def _resolve(self, filename: str) -> str:
        if os.path.basename(filename) != filename:
            raise ValueError(f"Invalid filename: {filename}")
        return os.path.join(self.output_dir, filename)

    def get_file_info(self, filename: str) -> Dict[str, Any]:
        """Existence, size and modification time of a generated file"""
        filepath = self._resolve(filename)
        if not os.path.isfile(filepath):
            return {"exists": False, "size": 0, "modified": None}

        stat = os.stat(filepath)
        return {
            "exists": True,
            "size": stat.st_size,
            "modified": datetime.fromtimestamp(stat.st_mtime).isoformat(),
        }

    def cleanup(self, filename: str) -> bool:
        """Delete a generated file. Returns False if it did not exist."""
        filepath = self._resolve(filename)
        try:
            os.remove(filepath)
        except FileNotFoundError:
            return False
        logger.debug(f"Removed {filepath}")
        return True
