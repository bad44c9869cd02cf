"""Turn free-text model output into sheet tables and slide lists."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Iterable

import structlog

from docgen.core.errors import StructuringFailed
from docgen.domain import SheetTable, Slide
from docgen.extractors.shapes import decode_sheet_table, decode_slides, parse_mapping, stringify
from docgen.infrastructure.llm import TextGenerator

logger = structlog.get_logger(__name__)

TABLE_FORMAT = '{ "Sheet1": [["Column1", "Column2"], ["Data1", "Data2"]], "Sheet2": [[...], [...]] }'
SLIDES_FORMAT = (
    '{ "slides": [{"title": "Slide 1 title", "content": "Slide 1 body", "notes": "Slide 1 speaker notes"}, ...] }'
)
SECTIONS_FORMAT = '{ "section1": "content1", "section2": "content2", ... }'

PREVIEW_CHARS = 300


def _section_lines(sections: Iterable[str]) -> str:
    return "".join(f"- {section}\n" for section in sections)


def table_prompt(title: str, content: str, sections: Iterable[str] = ()) -> str:
    prompt = (
        f"Title: {title}\n\n"
        f"Content: {content}\n\n"
        "Create the structure of a spreadsheet based on the information above.\n"
        "It may consist of several sheets; each sheet holds data arranged in rows and columns.\n"
        "The first row of every sheet must contain the column headings.\n"
        "Return JSON where each sheet name is a key and its value is a two-dimensional array of rows."
    )
    listed = _section_lines(sections)
    if listed:
        prompt += f"\nUse the following sections as sheets where it makes sense:\n{listed}"
    return prompt


def slides_prompt(title: str, content: str, sections: Iterable[str] = ()) -> str:
    prompt = (
        f"Title: {title}\n\n"
        f"Content: {content}\n\n"
        "Create the slide structure of a presentation based on the information above.\n"
        "Each slide has a title, body content and optionally speaker notes.\n"
        "Separate bullet points in the body content with line breaks.\n"
        "Return the list of slides as JSON; every slide must be an object with title, content and notes."
    )
    listed = _section_lines(sections)
    if listed:
        prompt += f"\nCover the following sections in this order:\n{listed}"
    return prompt


def sections_prompt(title: str, sections: Iterable[str]) -> str:
    return (
        f"Title: {title}\n\n"
        "Write the content of a document made of the following sections:\n"
        f"{_section_lines(sections)}"
        "\nReturn the content of each section as JSON. Each section name is a key and its value is the section text."
    )


class ContentStructurer:
    """Calls the text generator and decodes its answer into typed data.

    ``timeout`` bounds each text-generation call in seconds; the call runs on a
    helper thread so an unresponsive backend only fails the job that waits on it.
    """

    def __init__(self, generator: TextGenerator, *, timeout: float | None = None, max_pending_calls: int = 10) -> None:
        self._generator = generator
        self._timeout = timeout
        self._max_pending_calls = max_pending_calls
        self._calls: ThreadPoolExecutor | None = None
        self._calls_lock = threading.Lock()

    def _call_executor(self) -> ThreadPoolExecutor:
        with self._calls_lock:
            if self._calls is None:
                self._calls = ThreadPoolExecutor(max_workers=self._max_pending_calls, thread_name_prefix="docgen-llm")
            return self._calls

    # ------------------------------------------------------------------
    # text generation boundary
    # ------------------------------------------------------------------
    def generate_text(self, prompt: str) -> str:
        try:
            if self._timeout is None:
                return self._generator.complete(prompt)
            future = self._call_executor().submit(self._generator.complete, prompt)
            try:
                return future.result(timeout=self._timeout)
            except FutureTimeoutError:
                future.cancel()
                raise StructuringFailed(f"Text generation timed out after {self._timeout:g} seconds.") from None
        except StructuringFailed:
            raise
        except Exception as exc:
            raise StructuringFailed(f"Text generation failed: {exc}") from exc

    def structure_mapping(self, prompt: str, output_format: str) -> dict[str, Any]:
        structured_prompt = (
            f"{prompt}\n\n"
            f"The response must use the following format: {output_format}\n"
            "Return valid JSON."
        )
        logger.debug("structured_prompt", prompt_chars=len(structured_prompt))
        raw = self.generate_text(structured_prompt)
        try:
            return parse_mapping(raw)
        except StructuringFailed:
            logger.warning("structured_response_unparseable", preview=raw[:PREVIEW_CHARS])
            raise

    # ------------------------------------------------------------------
    # document shapes
    # ------------------------------------------------------------------
    def structure_table(self, title: str, content: str, sections: Iterable[str] = ()) -> SheetTable:
        payload = self.structure_mapping(table_prompt(title, content, sections), TABLE_FORMAT)
        table = decode_sheet_table(payload)
        if not table:
            logger.warning("structured_response_without_sheets", keys=list(payload)[:20])
            raise StructuringFailed("The AI response did not contain any sheet data.")
        return table

    def structure_slides(self, title: str, content: str, sections: Iterable[str] = ()) -> list[Slide]:
        payload = self.structure_mapping(slides_prompt(title, content, sections), SLIDES_FORMAT)
        try:
            return decode_slides(payload)
        except StructuringFailed:
            logger.warning("structured_response_without_slides", keys=list(payload)[:20])
            raise

    def structure_sections(self, title: str, sections: Iterable[str]) -> dict[str, str]:
        payload = self.structure_mapping(sections_prompt(title, sections), SECTIONS_FORMAT)
        return {str(key): stringify(value) for key, value in payload.items()}

    def close(self) -> None:
        with self._calls_lock:
            if self._calls is not None:
                self._calls.shutdown(wait=False, cancel_futures=True)
                self._calls = None
