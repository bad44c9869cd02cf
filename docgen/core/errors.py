from __future__ import annotations


class DocumentGenerationError(RuntimeError):
    """Base class for failures raised while generating a document."""


class TypeMismatch(DocumentGenerationError):
    """Raised when a request reaches an orchestrator for another document type."""


class UnsupportedType(DocumentGenerationError):
    """Raised when no generator is registered for the requested document type."""


class StructuringFailed(DocumentGenerationError):
    """Raised when the text-generation output cannot be turned into structured data."""


class BuildFailed(DocumentGenerationError):
    """Raised when a document file cannot be rendered or written."""


class GenerationQueueFull(DocumentGenerationError):
    """Raised when the worker pool cannot accept another generation task."""
