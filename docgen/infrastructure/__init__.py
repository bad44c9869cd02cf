"""Infrastructure layer exports."""

from .jobs import InMemoryJobStore, JobStore
from .llm import (
    TextGenerationError,
    TextGenerator,
    UnconfiguredTextGenerator,
    configure_text_generator,
    get_text_generator,
)
from .openai_chat import OpenAIChatClient

__all__ = [
    "InMemoryJobStore",
    "JobStore",
    "OpenAIChatClient",
    "TextGenerationError",
    "TextGenerator",
    "UnconfiguredTextGenerator",
    "configure_text_generator",
    "get_text_generator",
]
