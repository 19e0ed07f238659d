"""
ProposalPress Exceptions
Exception hierarchy for the document-processing pipeline

Propagation:
- InputValidationError aborts a run before any processing
- DocumentValidationError aborts output generation when enforcement is on
- ConversionError is isolated to a single output format
- OrchestrationError wraps anything unexpected at the top level
"""

from typing import Optional


class ProposalPressError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class InputValidationError(ProposalPressError):
    """Raised when raw text is missing, not a string, or too short."""
    pass


class DocumentValidationError(ProposalPressError):
    """Raised when validation fails and placeholder enforcement is enabled."""
    pass


class ConversionError(ProposalPressError):
    """Raised when a single output format cannot be produced."""

    def __init__(self, format: str, message: str, details: Optional[str] = None):
        self.format = format
        super().__init__(message, details)


class RendererUnavailableError(ConversionError):
    """Raised when the capability behind a format is not installed."""
    pass


class OrchestrationError(ProposalPressError):
    """Raised for any unexpected failure inside the pipeline."""
    pass
