"""Text-generation integration hooks.

Generation jobs only need a function from prompt to text.  This module defines
that contract together with a fallback that fails every call, so jobs end in a
FAILED state instead of hanging when no provider is configured.  A provider
only needs to implement :class:`TextGenerator` and be installed with
``configure_text_generator`` during application start-up.
"""
from __future__ import annotations

from typing import Protocol


class TextGenerationError(RuntimeError):
    """Raised when the text-generation backend cannot produce a completion."""


class TextGenerator(Protocol):
    """Contract for text-generation integrations."""

    def complete(self, prompt: str) -> str:
        """Return the model output for ``prompt``."""


class UnconfiguredTextGenerator:
    """Fallback used when no provider credentials are available."""

    def complete(self, prompt: str) -> str:
        raise TextGenerationError("text generation backend is not configured")


_generator: TextGenerator = UnconfiguredTextGenerator()


def configure_text_generator(generator: TextGenerator) -> None:
    """Install the text generator used by new document generators."""

    global _generator
    _generator = generator


def get_text_generator() -> TextGenerator:
    """Return the currently configured text generator."""

    return _generator
