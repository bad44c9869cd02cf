"""Integration with OpenAI-compatible chat completion APIs."""
from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

import httpx
import structlog

from .llm import TextGenerationError

logger = structlog.get_logger(__name__)


class OpenAIChatClient:
    """Minimal client for the ``/chat/completions`` endpoint."""

    def __init__(
        self,
        api_key: str,
        *,
        api_base: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        timeout: float = 60.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        parsed = urlparse(api_base)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("api_base must include scheme and host")

        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._request_url = f"{api_base.rstrip('/')}/chat/completions"
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _build_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self._model,
            "temperature": self._temperature,
            "messages": [{"role": "user", "content": prompt}],
        }

    @staticmethod
    def _extract_content(body: Any) -> str:
        if not isinstance(body, dict):
            raise TextGenerationError("unexpected completion payload")
        error = body.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise TextGenerationError(str(message or "completion failed"))

        choices = body.get("choices") or []
        if not choices or not isinstance(choices[0], dict):
            raise TextGenerationError("completion returned no choices")
        message = choices[0].get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        if content is None:
            raise TextGenerationError("completion returned no content")
        if isinstance(content, list):
            # content-part arrays: keep text parts only
            return "".join(str(part.get("text", "")) for part in content if isinstance(part, dict))
        return str(content)

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def complete(self, prompt: str) -> str:
        logger.debug("chat_completion_request", model=self._model, prompt_chars=len(prompt))
        try:
            response = self._client.post(self._request_url, headers=self._build_headers(), json=self._build_payload(prompt))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TextGenerationError(f"completion request failed with status {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise TextGenerationError(f"completion request failed: {exc}") from exc
        try:
            body = response.json()
        except ValueError as exc:
            raise TextGenerationError("completion response is not valid JSON") from exc
        return self._extract_content(body)

    def close(self) -> None:  # pragma: no cover - best effort cleanup
        if self._owns_client:
            self._client.close()


__all__ = ["OpenAIChatClient"]
