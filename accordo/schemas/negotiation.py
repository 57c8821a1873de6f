from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from accordo.services.models import CLAUSE_CATEGORIES, ClauseSelection, SuggestionSet


class SuggestionSetResponse(BaseModel):
    category: str = Field(..., pattern=r"^(payment|delivery|penalty)$", serialization_alias="field")
    suggestions: list[str] = Field(..., min_length=1)
    scores: list[int] = Field(..., min_length=1)

    @classmethod
    def from_domain(cls, item: SuggestionSet) -> "SuggestionSetResponse":
        return cls(category=item.category.value, suggestions=list(item.suggestions), scores=list(item.scores))


class NegotiationResponse(BaseModel):
    suggestions: list[SuggestionSetResponse]
    contract_text: str = Field(..., serialization_alias="contractText")


class GenerateContractRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contract_text: str | None = Field(default=None, alias="contractText")
    selected_clauses: Any = Field(default=None, alias="selectedClauses")

    def require_contract_text(self) -> str:
        text = (self.contract_text or "").strip()
        if not text:
            raise ValueError("Contract text is required")
        return self.contract_text

    def require_selection(self) -> ClauseSelection:
        if not isinstance(self.selected_clauses, dict):
            raise ValueError("Selected clauses are required")
        missing = [
            category.value
            for category in CLAUSE_CATEGORIES
            if not isinstance(self.selected_clauses.get(category.value), str)
            or not self.selected_clauses[category.value].strip()
        ]
        if missing:
            raise ValueError(f"Missing selected clauses: {', '.join(missing)}")
        return ClauseSelection(**{category.value: self.selected_clauses[category.value] for category in CLAUSE_CATEGORIES})


class GenerateContractResponse(BaseModel):
    pdf_url: str = Field(..., serialization_alias="pdfUrl")
