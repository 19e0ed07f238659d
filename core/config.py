"""
ProposalPress Configuration
Environment-based configuration for the document-processing pipeline
"""

import os
from typing import Optional, List, Dict
from dataclasses import dataclass, field
from enum import Enum


class Environment(str, Enum):
    """Deployment environment"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


SUPPORTED_FORMATS = ("html", "pdf", "docx")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ProcessingConfig:
    """Configuration for the structural-analysis stage"""
    # Input shorter than this (after trimming) is rejected
    min_input_length: int = 100

    # Abort output generation when validation reports errors
    validate_placeholders: bool = True

    default_format: str = "html"

    # TOC page estimate: characters per page
    page_char_estimate: int = 2000

    # Stats page estimate: words per page
    words_per_page: int = 500

    def __post_init__(self):
        """Load from environment variables"""
        self.validate_placeholders = _env_flag(
            "PROPOSALPRESS_VALIDATE_PLACEHOLDERS", self.validate_placeholders
        )
        self.default_format = os.getenv("PROPOSALPRESS_DEFAULT_FORMAT", self.default_format).lower()


@dataclass
class RendererConfig:
    """Configuration for output renderers"""
    # Headless browser (PDF) settings
    pdf_timeout_seconds: float = 30.0
    pdf_margins: Dict[str, str] = field(default_factory=lambda: {
        "top": "20mm",
        "right": "15mm",
        "bottom": "20mm",
        "left": "15mm",
    })
    browser_args: List[str] = field(default_factory=lambda: [
        "--no-sandbox",
        "--disable-setuid-sandbox",
    ])

    # Per-format conversions run in parallel
    max_parallel_conversions: int = 3

    def __post_init__(self):
        """Load from environment variables"""
        self.pdf_timeout_seconds = float(os.getenv("PDF_RENDER_TIMEOUT", self.pdf_timeout_seconds))
        self.max_parallel_conversions = int(
            os.getenv("PROPOSALPRESS_MAX_WORKERS", self.max_parallel_conversions)
        )

    @property
    def pdf_timeout_ms(self) -> float:
        return self.pdf_timeout_seconds * 1000


@dataclass
class OutputConfig:
    """Configuration for generated artifacts"""
    output_directory: str = "./data/documents"
    download_base_url: str = "/api/documents/download"

    def __post_init__(self):
        """Load from environment variables"""
        self.output_directory = os.getenv("PROPOSALPRESS_OUTPUT_DIR", self.output_directory)
        self.download_base_url = os.getenv("PROPOSALPRESS_DOWNLOAD_URL", self.download_base_url)


@dataclass
class PipelineConfig:
    """Master configuration for ProposalPress"""
    environment: Environment = Environment.DEVELOPMENT

    # Sub-configurations
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    renderer: RendererConfig = field(default_factory=RendererConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def __post_init__(self):
        """Load environment from env var"""
        env_str = os.getenv("PROPOSALPRESS_ENV", "development")
        try:
            self.environment = Environment(env_str.lower())
        except ValueError:
            self.environment = Environment.DEVELOPMENT

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Create configuration from environment variables"""
        return cls(
            processing=ProcessingConfig(),
            renderer=RendererConfig(),
            output=OutputConfig(),
        )

    def validate(self) -> list:
        """Validate configuration and return list of issues"""
        issues = []

        if self.processing.default_format not in SUPPORTED_FORMATS:
            issues.append(f"Unsupported default format: {self.processing.default_format}")
        if self.processing.min_input_length < 1:
            issues.append("min_input_length must be positive")
        if self.renderer.pdf_timeout_seconds <= 0:
            issues.append("PDF_RENDER_TIMEOUT must be positive")
        if self.renderer.max_parallel_conversions < 1:
            issues.append("PROPOSALPRESS_MAX_WORKERS must be at least 1")

        return issues


# Global configuration instance
_config: Optional[PipelineConfig] = None


def get_config() -> PipelineConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = PipelineConfig.from_env()
    return _config


def set_config(config: Optional[PipelineConfig]) -> None:
    """Set the global configuration instance"""
    global _config
    _config = config
