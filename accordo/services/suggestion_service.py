from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from accordo.services.llm_provider import LLMProvider
from accordo.services.models import ClauseCategory, Objectives, SuggestionSet, format_number

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a contract negotiation expert specializing in legal language optimization."

RISK_SCALE_INSTRUCTION = (
    "For each alternative, assign a risk score from 1-10 "
    "(1 being most favorable to client, 10 being most favorable to provider)."
)
REPLY_FORMAT_INSTRUCTION = (
    'Return ONLY a JSON object with format: '
    '{"suggestions": [string, string, string], "scores": [number, number, number]}'
)

MIN_SCORE = 1
MAX_SCORE = 10

# category -> (clause name in the source text, clause heading, goal template)
_CATEGORY_GOALS: dict[ClauseCategory, tuple[str, str, str]] = {
    ClauseCategory.PAYMENT: (
        "payment terms",
        "PAYMENT TERMS",
        "optimizing for payment within {value} days",
    ),
    ClauseCategory.DELIVERY: (
        "delivery timeframe",
        "DELIVERY TIME",
        "optimizing for delivery within {value} days",
    ),
    ClauseCategory.PENALTY: (
        "penalties",
        "PENALTIES",
        "implementing a {value}% penalty rate for late delivery or services",
    ),
}


class ClauseAlternativesReply(BaseModel):
    """Exact shape the language model must return for one clause category."""

    model_config = ConfigDict(extra="forbid")

    suggestions: list[str]
    scores: list[int]

    @field_validator("suggestions")
    @classmethod
    def _non_blank_suggestions(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip() for item in value]
        if any(not item for item in cleaned):
            raise ValueError("suggestions must not contain empty strings")
        return cleaned

    @field_validator("scores", mode="before")
    @classmethod
    def _normalize_scores(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        normalized: list[int] = []
        for item in value:
            if isinstance(item, bool) or not isinstance(item, (int, float)):
                raise ValueError(f"score is not a number: {item!r}")
            if isinstance(item, float):
                if not math.isfinite(item):
                    raise ValueError(f"score is not a finite number: {item!r}")
                item = int(round(item))
            # Integers of any size clamp without a float conversion.
            normalized.append(max(MIN_SCORE, min(MAX_SCORE, item)))
        return normalized

    @model_validator(mode="after")
    def _parallel_lists(self) -> "ClauseAlternativesReply":
        if not self.suggestions:
            raise ValueError("suggestions must not be empty")
        if len(self.suggestions) != len(self.scores):
            raise ValueError(
                f"field count mismatch: {len(self.suggestions)} suggestions, {len(self.scores)} scores"
            )
        return self


@dataclass(frozen=True, slots=True)
class ParsedReply:
    suggestions: tuple[str, ...]
    scores: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class MalformedReply:
    reason: str


ReplyParseResult = ParsedReply | MalformedReply


def build_directive(category: ClauseCategory, objectives: Objectives) -> str:
    clause_name, heading, goal = _CATEGORY_GOALS[category]
    goal_text = goal.format(value=format_number(objectives.goal_value(category)))
    return (
        f"Analyze the following contract text and extract the {clause_name} clause.\n"
        f"Then provide 3 alternative formulations for the {heading} clause, {goal_text}.\n"
        f"{RISK_SCALE_INSTRUCTION}\n"
        f"{REPLY_FORMAT_INSTRUCTION}"
    )


def parse_suggestion_reply(content: str | None) -> ReplyParseResult:
    text = str(content or "").strip()
    if not text:
        return MalformedReply("empty reply")

    # Strip a single markdown fence if present.
    if text.startswith("```"):
        text = re.sub(r"^```[a-zA-Z0-9]*\s*", "", text)
        text = re.sub(r"\s*```$", "", text)

    try:
        reply = ClauseAlternativesReply.model_validate_json(text)
    except ValidationError as exc:
        return MalformedReply(f"{exc.error_count()} validation error(s): {exc.errors()[0]['msg']}")

    return ParsedReply(suggestions=tuple(reply.suggestions), scores=tuple(reply.scores))


class ClauseSuggestionService:
    def __init__(self, llm_provider: LLMProvider, temperature: float = 0.2) -> None:
        self.llm_provider = llm_provider
        self.temperature = temperature

    def generate(self, category: ClauseCategory, contract_text: str, objectives: Objectives) -> SuggestionSet:
        directive = build_directive(category, objectives)
        try:
            content = self.llm_provider.chat_json(
                system_prompt=SYSTEM_PROMPT,
                user_prompt=f"{directive}\n\nContract text: {contract_text}",
                temperature=self.temperature,
            )
        except Exception as exc:
            logger.warning("%s suggestion call failed (%s), using fallback", category.value, exc)
            return SuggestionSet.degraded(category)

        try:
            result = parse_suggestion_reply(content)
        except Exception as exc:
            result = MalformedReply(f"unreadable reply: {exc}")
        if isinstance(result, MalformedReply):
            logger.warning("%s suggestion reply rejected (%s), using fallback", category.value, result.reason)
            return SuggestionSet.degraded(category)

        return SuggestionSet(category=category, suggestions=result.suggestions, scores=result.scores)
