from concurrent.futures import ThreadPoolExecutor
import logging

from accordo.services.models import CLAUSE_CATEGORIES, Objectives, SuggestionSet
from accordo.services.suggestion_service import ClauseSuggestionService

logger = logging.getLogger(__name__)


class NegotiationOrchestrator:
    """Fans clause generation out across the fixed categories and joins by position."""

    def __init__(self, suggestion_service: ClauseSuggestionService, max_workers: int = 3) -> None:
        self.suggestion_service = suggestion_service
        self.max_workers = max(1, max_workers)

    def negotiate(self, contract_text: str, objectives: Objectives) -> list[SuggestionSet]:
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="negotiate") as executor:
            # executor.map yields in input order regardless of completion order.
            results = list(
                executor.map(
                    lambda category: self.suggestion_service.generate(category, contract_text, objectives),
                    CLAUSE_CATEGORIES,
                )
            )

        degraded = [item.category.value for item in results if item.is_degraded]
        if degraded:
            logger.warning("negotiation finished with degraded categories: %s", ", ".join(degraded))
        return results
