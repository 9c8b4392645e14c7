"""Tests for history formatting and query-formulation parsing."""

from __future__ import annotations

from focus_engine.engine.history import format_chat_history
from focus_engine.engine.models import ChatTurn, history_from_wire
from focus_engine.search.query import parse_formulation


class TestFormatChatHistory:
    def test_turns_render_as_role_lines(self):
        history = [
            ChatTurn(role="human", content="Hi"),
            ChatTurn(role="assistant", content="Hello"),
        ]
        assert format_chat_history(history) == "human: Hi\nassistant: Hello"

    def test_empty_history_is_empty_string(self):
        assert format_chat_history([]) == ""

    def test_multiline_content_kept_verbatim(self):
        history = [ChatTurn(role="human", content="line one\nline two")]
        assert format_chat_history(history) == "human: line one\nline two"

    def test_history_from_wire_pairs(self):
        turns = history_from_wire([["human", "q"], ["assistant", "a"]])
        assert [(t.role, t.content) for t in turns] == [("human", "q"), ("assistant", "a")]


class TestParseFormulation:
    def test_question_block(self):
        result = parse_formulation("<question>\nCapital of France\n</question>", "orig", 2)
        assert result.queries == ["Capital of France"]
        assert result.links == []
        assert not result.not_needed

    def test_untagged_output_is_the_question(self):
        result = parse_formulation("Stable diffusion working", "orig", 2)
        assert result.queries == ["Stable diffusion working"]

    def test_queries_capped_by_policy(self):
        output = "<question>\nfirst\nsecond\nthird\n</question>"
        assert parse_formulation(output, "orig", 2).queries == ["first", "second"]
        assert parse_formulation(output, "orig", 0).queries == ["first"]

    def test_not_needed(self):
        result = parse_formulation("<question>\nnot_needed\n</question>", "hi", 2)
        assert result.queries == []
        assert result.not_needed

    def test_empty_output_falls_back_to_original(self):
        result = parse_formulation("   ", "what is rust?", 2)
        assert result.queries == ["what is rust?"]

    def test_links_block(self):
        output = (
            "<question>\nsummarize\n</question>\n"
            "<links>\nhttps://example.com/a\nnot a link\nhttp://example.com/b\n</links>"
        )
        result = parse_formulation(output, "orig", 2)
        assert result.queries == ["summarize"]
        assert result.links == ["https://example.com/a", "http://example.com/b"]
        assert not result.not_needed
