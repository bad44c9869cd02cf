from contextlib import asynccontextmanager
from datetime import datetime

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docgen.application import build_generator_router, configure_generator_router, get_generator_router
from docgen.core.config import Settings
from docgen.core.errors import DocumentGenerationError, GenerationQueueFull, TypeMismatch, UnsupportedType
from docgen.core.logging_setup import configure_logging
from docgen.core.storage import ensure_output_root
from docgen.infrastructure import OpenAIChatClient, configure_text_generator
from docgen.routes import documents

logger = structlog.get_logger(__name__)


def _error_body(status: int, message: str, errors: dict[str, str] | None = None) -> dict:
    return {
        "status": status,
        "message": message,
        "errors": errors,
        "timestamp": datetime.now().isoformat(),
    }


def _field_name(location: tuple) -> str:
    parts = [str(part) for part in location if part != "body"]
    return ".".join(parts) or "body"


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_failed(_: Request, exc: RequestValidationError) -> JSONResponse:
        errors = {_field_name(tuple(error.get("loc", ()))): str(error.get("msg", "")) for error in exc.errors()}
        return JSONResponse(_error_body(400, "Validation Failed", errors), status_code=400)

    @app.exception_handler(TypeMismatch)
    @app.exception_handler(UnsupportedType)
    async def unsupported_request(_: Request, exc: DocumentGenerationError) -> JSONResponse:
        return JSONResponse(_error_body(400, str(exc)), status_code=400)

    @app.exception_handler(GenerationQueueFull)
    async def queue_full(_: Request, exc: GenerationQueueFull) -> JSONResponse:
        return JSONResponse(_error_body(503, str(exc)), status_code=503)

    @app.exception_handler(DocumentGenerationError)
    async def generation_failed(_: Request, exc: DocumentGenerationError) -> JSONResponse:
        return JSONResponse(_error_body(500, str(exc)), status_code=500)

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_exception", method=request.method, path=request.url.path, exc_info=exc)
        return JSONResponse(_error_body(500, "Internal server error."), status_code=500)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    if settings.openai_api_key:
        client = OpenAIChatClient(
            settings.openai_api_key,
            api_base=settings.openai_api_base,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
        )
        configure_text_generator(client)

    ensure_output_root(settings.output_dir)
    generators = build_generator_router(settings)
    configure_generator_router(generators)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        generators.shutdown(wait=False)

    app = FastAPI(title="Document Generation API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)
    app.include_router(documents.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Document Generation API",
                "docs": "/docs",
                "document_types": [document_type.value for document_type in get_generator_router().document_types()],
            }
        )

    return app
