from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ClauseCategory(str, Enum):
    PAYMENT = "payment"
    DELIVERY = "delivery"
    PENALTY = "penalty"


# Fixed negotiation order; every negotiation yields exactly one set per entry.
CLAUSE_CATEGORIES: tuple[ClauseCategory, ...] = (
    ClauseCategory.PAYMENT,
    ClauseCategory.DELIVERY,
    ClauseCategory.PENALTY,
)

FALLBACK_SUGGESTION = "Error generating suggestions. Please try again."
FALLBACK_SCORE = 5


@dataclass(frozen=True, slots=True)
class Objectives:
    payment_days: int
    delivery_days: int
    penalty_rate: float

    def goal_value(self, category: ClauseCategory) -> int | float:
        if category is ClauseCategory.PAYMENT:
            return self.payment_days
        if category is ClauseCategory.DELIVERY:
            return self.delivery_days
        return self.penalty_rate


@dataclass(frozen=True, slots=True)
class SuggestionSet:
    category: ClauseCategory
    suggestions: tuple[str, ...]
    scores: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.suggestions or len(self.suggestions) != len(self.scores):
            raise ValueError("suggestions and scores must be non-empty and of equal length")

    @classmethod
    def degraded(cls, category: ClauseCategory) -> "SuggestionSet":
        return cls(category=category, suggestions=(FALLBACK_SUGGESTION,), scores=(FALLBACK_SCORE,))

    @property
    def is_degraded(self) -> bool:
        return self.suggestions == (FALLBACK_SUGGESTION,) and self.scores == (FALLBACK_SCORE,)


@dataclass(frozen=True, slots=True)
class ClauseSelection:
    payment: str
    delivery: str
    penalty: str

    def for_category(self, category: ClauseCategory) -> str:
        return getattr(self, category.value)


@dataclass(slots=True)
class DocumentSection:
    heading: str
    paragraphs: list[str] = field(default_factory=list)
    negotiated: bool = False


@dataclass(slots=True)
class AssembledDocument:
    sections: list[DocumentSection] = field(default_factory=list)
    title: str = "Contract Agreement"

    def headings(self) -> list[str]:
        return [section.heading for section in self.sections]


def format_number(value: int | float) -> str:
    """Render an objective value without a trailing ``.0``."""
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else f"{value:g}"
    return str(value)
