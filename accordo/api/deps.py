from functools import lru_cache

from fastapi import Depends

from accordo.config import Settings, get_settings
from accordo.services.artifact_store import ArtifactStore
from accordo.services.clause_substitution import ClauseSubstitutionService
from accordo.services.document_assembler import DocumentAssembler
from accordo.services.document_validator import DocumentValidationService
from accordo.services.llm_provider import LLMProvider, build_llm_provider
from accordo.services.negotiator import NegotiationOrchestrator
from accordo.services.pdf_renderer import PdfRenderer, ReportLabPdfRenderer
from accordo.services.suggestion_service import ClauseSuggestionService


@lru_cache
def get_llm_provider() -> LLMProvider:
    return build_llm_provider(get_settings())


def get_negotiator(
    llm_provider: LLMProvider = Depends(get_llm_provider),
    settings: Settings = Depends(get_settings),
) -> NegotiationOrchestrator:
    suggestion_service = ClauseSuggestionService(llm_provider, temperature=settings.llm_temperature)
    return NegotiationOrchestrator(suggestion_service, max_workers=settings.negotiation_max_workers)


def get_document_validator() -> DocumentValidationService:
    return DocumentValidationService()


def get_substitution_service() -> ClauseSubstitutionService:
    return ClauseSubstitutionService()


def get_artifact_store(settings: Settings = Depends(get_settings)) -> ArtifactStore:
    return ArtifactStore(settings.artifact_dir, download_route=settings.download_route)


def get_pdf_renderer() -> PdfRenderer:
    return ReportLabPdfRenderer()


def get_document_assembler(
    renderer: PdfRenderer = Depends(get_pdf_renderer),
    artifact_store: ArtifactStore = Depends(get_artifact_store),
) -> DocumentAssembler:
    return DocumentAssembler(renderer, artifact_store)
