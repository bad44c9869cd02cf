from __future__ import annotations

import re
from typing import Sequence

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import PP_ALIGN
from pptx.util import Pt

from docgen.domain import Slide

from .base import DocumentExporter

FONT_NAME = "Malgun Gothic"
TITLE_SLIDE_FONT_SIZE = 44
SLIDE_TITLE_FONT_SIZE = 32
BODY_FONT_SIZE = 20
HEADING_COLOR = RGBColor(44, 62, 80)
HEADING_FILL = RGBColor(240, 240, 240)

# Layout indices of the default python-pptx template
TITLE_LAYOUT = 0
TITLE_AND_CONTENT_LAYOUT = 1

TITLE_PLACEHOLDER_IDX = 0
BODY_PLACEHOLDER_IDX = 1

_LINE_BREAK_RE = re.compile(r"\r?\n")


def split_paragraphs(content: str) -> list[str]:
    """Split on line breaks, keeping interior blank lines and dropping trailing ones."""

    lines = _LINE_BREAK_RE.split(content)
    while len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return lines


def _placeholder(slide, idx: int):
    for shape in slide.placeholders:
        if shape.placeholder_format.idx == idx:
            return shape
    return None


def _style_heading(shape, text: str, font_size: int):
    shape.fill.solid()
    shape.fill.fore_color.rgb = HEADING_FILL

    text_frame = shape.text_frame
    text_frame.clear()
    paragraph = text_frame.paragraphs[0]
    run = paragraph.add_run()
    run.text = text
    font = run.font
    font.name = FONT_NAME
    font.size = Pt(font_size)
    font.bold = True
    font.color.rgb = HEADING_COLOR
    return paragraph


class SlideDeckExporter(DocumentExporter):
    """Render a title slide plus one slide per record into a ``.pptx`` deck."""

    extension = ".pptx"
    format_label = "presentation"

    def build(self, title: str, slides: Sequence[Slide]) -> str:
        return self._publish(title, lambda path: self.render(title, slides).save(str(path)))

    def render(self, title: str, slides: Sequence[Slide]):
        presentation = Presentation()
        self._add_title_slide(presentation, title)
        for record in slides:
            self._add_content_slide(presentation, record)
        return presentation

    def _add_title_slide(self, presentation, title: str) -> None:
        slide = presentation.slides.add_slide(presentation.slide_layouts[TITLE_LAYOUT])
        title_shape = _placeholder(slide, TITLE_PLACEHOLDER_IDX)
        if title_shape is None:
            return
        paragraph = _style_heading(title_shape, title, TITLE_SLIDE_FONT_SIZE)
        paragraph.alignment = PP_ALIGN.CENTER

    def _add_content_slide(self, presentation, record: Slide) -> None:
        slide = presentation.slides.add_slide(presentation.slide_layouts[TITLE_AND_CONTENT_LAYOUT])

        title_shape = _placeholder(slide, TITLE_PLACEHOLDER_IDX)
        if title_shape is not None:
            _style_heading(title_shape, record.title, SLIDE_TITLE_FONT_SIZE)

        body_shape = _placeholder(slide, BODY_PLACEHOLDER_IDX)
        if body_shape is not None:
            text_frame = body_shape.text_frame
            text_frame.clear()
            for index, line in enumerate(split_paragraphs(record.content)):
                paragraph = text_frame.paragraphs[0] if index == 0 else text_frame.add_paragraph()
                run = paragraph.add_run()
                run.text = line
                run.font.name = FONT_NAME
                run.font.size = Pt(BODY_FONT_SIZE)

        if record.notes.strip():
            slide.notes_slide.notes_text_frame.text = record.notes
