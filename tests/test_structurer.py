from __future__ import annotations

import sys
import threading
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from docgen.core.errors import StructuringFailed
from docgen.domain import Slide
from docgen.extractors import ContentStructurer
from docgen.extractors.shapes import extract_json_object
from docgen.infrastructure import TextGenerationError


class CannedGenerator:
    def __init__(self, response: str) -> None:
        self.response = response
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.response


def test_table_tolerates_prose_around_json():
    generator = CannedGenerator('Sure! Here you go: {"Sheet1":[["a"]]}  Hope that helps.')
    table = ContentStructurer(generator).structure_table("Budget", "Costs per quarter")

    assert table == {"Sheet1": [["a"]]}


def test_table_prompt_embeds_request_and_shape_example():
    generator = CannedGenerator('{"Sheet1": [["a"]]}')
    ContentStructurer(generator).structure_table("Budget 2025", "Costs per quarter", ("Summary", "Details"))

    prompt = generator.prompts[0]
    assert "Title: Budget 2025" in prompt
    assert "Content: Costs per quarter" in prompt
    assert "- Summary\n- Details" in prompt
    assert '"Sheet1": [["Column1", "Column2"]' in prompt
    assert prompt.rstrip().endswith("Return valid JSON.")


def test_table_keeps_only_list_of_list_values_and_stringifies_cells():
    generator = CannedGenerator(
        '{"S1": [["Name", "Score"], [1, 2.5], [true, null]],'
        ' "note": "not a sheet",'
        ' "mixed": [["a"], "b"],'
        ' "S2": [["x", ["nested", 1]]]}'
    )
    table = ContentStructurer(generator).structure_table("t", "c")

    assert table == {
        "S1": [["Name", "Score"], ["1", "2.5"], ["true", ""]],
        "S2": [["x", '["nested",1]']],
    }


def test_table_without_any_sheet_fails():
    generator = CannedGenerator('{"summary": "no tables here", "rows": 3}')

    with pytest.raises(StructuringFailed):
        ContentStructurer(generator).structure_table("t", "c")


@pytest.mark.parametrize("response", ["I cannot help with that.", "{not json}", "[1, 2, 3]", "} oops {"])
def test_unparseable_response_fails(response):
    with pytest.raises(StructuringFailed):
        ContentStructurer(CannedGenerator(response)).structure_table("t", "c")


def test_deeply_nested_response_fails_structuring():
    response = '{"a":' + "[" * 100000 + "]" * 100000 + "}"

    with pytest.raises(StructuringFailed, match="Could not convert"):
        ContentStructurer(CannedGenerator(response)).structure_table("t", "c")


def test_extract_json_object_uses_first_open_and_last_close_brace():
    raw = 'prefix {"a": {"b": 1}} middle {"c": 2} suffix'

    assert extract_json_object(raw) == '{"a": {"b": 1}} middle {"c": 2}'
    assert extract_json_object("no braces") == "no braces"


def test_slides_from_keyed_list():
    generator = CannedGenerator(
        '```json\n{"slides": ['
        '{"title": "Intro", "content": "line one\\nline two", "notes": "say hi"},'
        '{"title": "Numbers", "content": 42},'
        '"not a slide"'
        "]}\n```"
    )
    slides = ContentStructurer(generator).structure_slides("Deck", "About things")

    assert slides == [
        Slide(title="Intro", content="line one\nline two", notes="say hi"),
        Slide(title="Numbers", content="42", notes=""),
    ]


def test_slides_from_implicit_mapping_keep_response_order():
    generator = CannedGenerator(
        '{"second": {"title": "B", "notes": null},'
        ' "meta": "ignored",'
        ' "first": {"Title": "A", "content": "body"}}'
    )
    slides = ContentStructurer(generator).structure_slides("Deck", "About things")

    assert [slide.title for slide in slides] == ["B", "A"]
    assert slides[0].notes == ""
    assert slides[1].content == "body"


@pytest.mark.parametrize(
    "response",
    [
        '{"summary": "plain text", "count": 3}',
        '{"slides": []}',
        '{"slides": ["a", "b"]}',
    ],
)
def test_zero_slides_is_a_failure(response):
    with pytest.raises(StructuringFailed):
        ContentStructurer(CannedGenerator(response)).structure_slides("Deck", "About things")


def test_boundary_error_becomes_structuring_failure():
    class BrokenGenerator:
        def complete(self, prompt: str) -> str:
            raise TextGenerationError("quota exceeded")

    with pytest.raises(StructuringFailed, match="quota exceeded"):
        ContentStructurer(BrokenGenerator()).structure_slides("Deck", "About things")


def test_slow_backend_hits_deadline():
    release = threading.Event()

    class SlowGenerator:
        def complete(self, prompt: str) -> str:
            release.wait(5)
            return '{"Sheet1": [["a"]]}'

    structurer = ContentStructurer(SlowGenerator(), timeout=0.05)
    try:
        with pytest.raises(StructuringFailed, match="timed out"):
            structurer.structure_table("t", "c")
    finally:
        release.set()
        structurer.close()


def test_structure_sections_returns_text_per_section():
    generator = CannedGenerator('{"Intro": "Hello", "Numbers": 12}')
    sections = ContentStructurer(generator).structure_sections("Report", ["Intro", "Numbers"])

    assert sections == {"Intro": "Hello", "Numbers": "12"}
    assert "- Intro\n- Numbers\n" in generator.prompts[0]


def test_structure_mapping_returns_raw_payload():
    generator = CannedGenerator('{"a": [1, {"b": true}]}')
    payload = ContentStructurer(generator).structure_mapping("Give me data", '{"a": [...]}')

    assert payload == {"a": [1, {"b": True}]}
    assert generator.prompts[0].startswith("Give me data\n\nThe response must use the following format:")
