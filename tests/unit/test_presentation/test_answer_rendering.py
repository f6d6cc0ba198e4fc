"""
Tests for the pure helpers behind the answer popup and main window.
"""
import pytest

pytest.importorskip("PySide6.QtWidgets")

from answerlens.domain.models.geometry import PhysicalRect
from answerlens.domain.models.knowledge import (
    AnswerOption, KnowledgeEntry, MatchResult, MatchTier, NotFound, OptionListAnswer, SimpleAnswer
)
from answerlens.presentation.components.answer_window import popup_position, render_answer_html
from answerlens.presentation.main_window import describe_region


class TestRenderAnswerHtml:

    def test_simple_answer(self):
        entry = KnowledgeEntry(question="天龙八部的创始人是谁", answer=SimpleAnswer("段正明"), category="exam")

        body = render_answer_html(MatchResult(entry=entry, tier=MatchTier.EXACT))

        assert "段正明" in body
        assert "天龙八部的创始人是谁" in body
        assert "matched by exact" in body

    def test_option_list_marks_recommended(self):
        answer = OptionListAnswer(options=[
            AnswerOption("向左", subtitle="近路"),
            AnswerOption("向右", recommend=True),
        ], label="迷宫一")
        entry = KnowledgeEntry(question="走哪边", answer=answer, category="maze")

        body = render_answer_html(MatchResult(entry=entry, tier=MatchTier.KEYWORD, score=2.0))

        assert "迷宫一" in body
        assert "&#9733; 向右" in body
        assert "&#9733; 向左" not in body
        assert "近路" in body

    def test_not_found_echoes_escaped_text(self):
        body = render_answer_html(NotFound("<b>x</b>"))

        assert "No matching question found" in body
        assert "&lt;b&gt;x&lt;/b&gt;" in body

    def test_not_found_with_empty_text(self):
        assert "(empty)" in render_answer_html(NotFound(""))


class TestPopupPosition:

    def test_right_of_region(self):
        assert popup_position(PhysicalRect(100, 50, 200, 80)) == (320, 50)

    def test_scaled_to_logical(self):
        assert popup_position(PhysicalRect(100, 50, 200, 80), scale=2.0) == (160, 25)

    def test_no_anchor(self):
        assert popup_position(None) is None


def test_describe_region():
    assert describe_region(None) == "No region set"
    assert describe_region(PhysicalRect(240, 120, 400, 160)) == "Region 400x160 at (240, 120)"
