from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


def _default_output_dir() -> Path:
    return Path(__file__).resolve().parents[2] / "generated"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


@dataclass(slots=True)
class Settings:
    """Runtime configuration collected from environment variables."""

    output_dir: Path = field(default_factory=_default_output_dir)
    openai_api_key: str | None = None
    openai_api_base: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.7
    llm_timeout: float | None = 120.0
    workers: int = 5
    queue_capacity: int = 25
    job_ttl_seconds: float | None = None
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        env_root = os.getenv("DOCGEN_OUTPUT_DIR")
        output_dir = Path(env_root).expanduser().resolve() if env_root else _default_output_dir()

        origins_env = os.getenv("API_CORS_ORIGINS", "")
        origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]

        timeout = _env_float("DOCGEN_LLM_TIMEOUT", 120.0)
        if timeout is not None and timeout <= 0:
            timeout = None

        return cls(
            output_dir=output_dir,
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_api_base=os.getenv("OPENAI_API_BASE") or "https://api.openai.com/v1",
            openai_model=os.getenv("OPENAI_MODEL") or "gpt-4o-mini",
            openai_temperature=_env_float("OPENAI_TEMPERATURE", 0.7) or 0.0,
            llm_timeout=timeout,
            workers=_env_int("DOCGEN_WORKERS", 5),
            queue_capacity=_env_int("DOCGEN_QUEUE_CAPACITY", 25),
            job_ttl_seconds=_env_float("DOCGEN_JOB_TTL_SECONDS", None),
            cors_origins=origins or list(DEFAULT_CORS_ORIGINS),
            log_level=(os.getenv("DOCGEN_LOG_LEVEL") or "INFO").upper(),
        )
