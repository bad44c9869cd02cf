"""Application services."""

from .documents import (
    GeneratorRouter,
    build_generator_router,
    configure_generator_router,
    get_generator_router,
    reset_generator_router,
)

__all__ = [
    "GeneratorRouter",
    "build_generator_router",
    "configure_generator_router",
    "get_generator_router",
    "reset_generator_router",
]
