"""Tests for accordo/services/suggestion_service.py — directive text, strict reply parsing, fallback."""

import logging
from unittest.mock import MagicMock

import httpx
import pytest

from conftest import llm_reply

from accordo.services.models import FALLBACK_SCORE, FALLBACK_SUGGESTION, ClauseCategory, Objectives
from accordo.services.suggestion_service import (
    RISK_SCALE_INSTRUCTION,
    SYSTEM_PROMPT,
    ClauseAlternativesReply,
    ClauseSuggestionService,
    MalformedReply,
    ParsedReply,
    build_directive,
    parse_suggestion_reply,
)


class TestBuildDirective:

    def test_payment_goal(self, objectives):
        directive = build_directive(ClauseCategory.PAYMENT, objectives)
        assert "extract the payment terms clause" in directive
        assert "for the PAYMENT TERMS clause, optimizing for payment within 30 days." in directive

    def test_delivery_goal(self, objectives):
        directive = build_directive(ClauseCategory.DELIVERY, objectives)
        assert "optimizing for delivery within 14 days" in directive

    @pytest.mark.parametrize("rate, rendered", [(5.0, "5%"), (2.5, "2.5%"), (0, "0%")])
    def test_penalty_goal(self, rate, rendered):
        objectives = Objectives(payment_days=30, delivery_days=14, penalty_rate=rate)
        directive = build_directive(ClauseCategory.PENALTY, objectives)
        assert f"implementing a {rendered} penalty rate for late delivery or services" in directive

    def test_states_score_polarity_and_reply_format(self, objectives):
        for category in ClauseCategory:
            directive = build_directive(category, objectives)
            assert RISK_SCALE_INSTRUCTION in directive
            assert '{"suggestions": [string, string, string], "scores": [number, number, number]}' in directive
            assert "3 alternative formulations" in directive


class TestParseSuggestionReply:

    def test_valid_reply(self):
        result = parse_suggestion_reply(llm_reply(["A", "B", "C"], [3, 5, 8]))
        assert result == ParsedReply(suggestions=("A", "B", "C"), scores=(3, 5, 8))

    def test_fenced_reply(self):
        content = "```json\n" + llm_reply(["A"], [2]) + "\n```"
        assert parse_suggestion_reply(content) == ParsedReply(suggestions=("A",), scores=(2,))

    def test_scores_are_rounded_and_clamped(self):
        result = parse_suggestion_reply(llm_reply(["A", "B", "C"], [3.4, 11, 0]))
        assert result.scores == (3, 10, 1)

    def test_suggestions_are_stripped(self):
        result = parse_suggestion_reply(llm_reply(["  padded  "], [4]))
        assert result.suggestions == ("padded",)

    def test_oversized_integer_scores_are_clamped(self):
        reply = ClauseAlternativesReply.model_validate({"suggestions": ["A", "B"], "scores": [10**400, -(10**400)]})
        assert reply.scores == [10, 1]

    def test_oversized_json_score_does_not_raise(self):
        content = '{"suggestions": ["A"], "scores": [' + "9" * 400 + "]}"
        result = parse_suggestion_reply(content)
        assert result == ParsedReply(suggestions=("A",), scores=(10,)) or isinstance(result, MalformedReply)

    def test_non_finite_float_score(self):
        with pytest.raises(ValueError):
            ClauseAlternativesReply.model_validate({"suggestions": ["A"], "scores": [float("inf")]})

    @pytest.mark.parametrize(
        "content",
        [
            None,
            "",
            "   ",
            "not json at all",
            '["A", "B"]',
            '{"suggestions": ["A"]}',
            '{"suggestions": ["A"], "scores": [1, 2]}',
            '{"suggestions": [], "scores": []}',
            '{"suggestions": ["A"], "scores": ["high"]}',
            '{"suggestions": ["A"], "scores": [true]}',
            '{"suggestions": [" "], "scores": [1]}',
            '{"suggestions": [1], "scores": [1]}',
            '{"suggestions": ["A"], "scores": [1], "notes": "extra"}',
        ],
    )
    def test_malformed_replies(self, content):
        assert isinstance(parse_suggestion_reply(content), MalformedReply)


class TestClauseSuggestionService:

    def test_returns_parsed_suggestions(self, mock_llm_provider, objectives, sample_contract):
        service = ClauseSuggestionService(mock_llm_provider)
        result = service.generate(ClauseCategory.DELIVERY, sample_contract, objectives)

        assert result.category is ClauseCategory.DELIVERY
        assert result.suggestions == ("delivery clause 1", "delivery clause 2", "delivery clause 3")
        assert result.scores == (3, 5, 8)
        assert not result.is_degraded

    def test_sends_system_directive_and_contract_text(self, mock_llm_provider, objectives, sample_contract):
        ClauseSuggestionService(mock_llm_provider, temperature=0.4).generate(
            ClauseCategory.PAYMENT, sample_contract, objectives
        )
        kwargs = mock_llm_provider.chat_json.call_args.kwargs
        assert kwargs["system_prompt"] == SYSTEM_PROMPT
        assert kwargs["user_prompt"].startswith(build_directive(ClauseCategory.PAYMENT, objectives))
        assert kwargs["user_prompt"].endswith(f"\n\nContract text: {sample_contract}")
        assert kwargs["temperature"] == 0.4

    @pytest.mark.parametrize(
        "failure",
        [
            RuntimeError("boom"),
            httpx.ReadTimeout("timed out"),
            ValueError("Empty response from language model"),
        ],
    )
    def test_provider_errors_degrade(self, failure, objectives, sample_contract, caplog):
        provider = MagicMock()
        provider.chat_json.side_effect = failure

        with caplog.at_level(logging.WARNING, logger="accordo.services.suggestion_service"):
            result = ClauseSuggestionService(provider).generate(ClauseCategory.PENALTY, sample_contract, objectives)

        assert result.category is ClauseCategory.PENALTY
        assert result.suggestions == (FALLBACK_SUGGESTION,)
        assert result.scores == (FALLBACK_SCORE,)
        assert "penalty suggestion call failed" in caplog.text

    def test_malformed_reply_degrades(self, objectives, sample_contract, caplog):
        provider = MagicMock()
        provider.chat_json.return_value = '{"suggestions": ["A", "B"], "scores": [1]}'

        with caplog.at_level(logging.WARNING, logger="accordo.services.suggestion_service"):
            result = ClauseSuggestionService(provider).generate(ClauseCategory.PAYMENT, sample_contract, objectives)

        assert result.is_degraded
        assert "payment suggestion reply rejected" in caplog.text

    def test_unexpected_parse_error_degrades(self, objectives, sample_contract, monkeypatch, caplog):
        def explode(content):
            raise OverflowError("int too large to convert to float")

        monkeypatch.setattr("accordo.services.suggestion_service.parse_suggestion_reply", explode)
        provider = MagicMock()
        provider.chat_json.return_value = llm_reply(["A"], [3])

        with caplog.at_level(logging.WARNING, logger="accordo.services.suggestion_service"):
            result = ClauseSuggestionService(provider).generate(ClauseCategory.DELIVERY, sample_contract, objectives)

        assert result.is_degraded
        assert "delivery suggestion reply rejected" in caplog.text
