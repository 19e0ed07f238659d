"""ProposalPress Core - configuration, errors and orchestration

The orchestrator is imported from core.orchestrator directly; it depends on
the processing and rendering packages, which in turn use this package's
config and exceptions.
"""

from .config import PipelineConfig, get_config, set_config
from .exceptions import (
    ProposalPressError,
    InputValidationError,
    DocumentValidationError,
    ConversionError,
    RendererUnavailableError,
    OrchestrationError,
)

__all__ = [
    "PipelineConfig",
    "get_config",
    "set_config",
    "ProposalPressError",
    "InputValidationError",
    "DocumentValidationError",
    "ConversionError",
    "RendererUnavailableError",
    "OrchestrationError",
]
