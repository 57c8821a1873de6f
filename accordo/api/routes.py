import logging
import math

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile

from accordo.api.deps import (
    get_artifact_store,
    get_document_assembler,
    get_document_validator,
    get_negotiator,
    get_substitution_service,
)
from accordo.config import Settings, get_settings
from accordo.schemas.negotiation import (
    GenerateContractRequest,
    GenerateContractResponse,
    NegotiationResponse,
    SuggestionSetResponse,
)
from accordo.services.artifact_store import ArtifactNotFoundError, ArtifactStore
from accordo.services.clause_substitution import ClauseSubstitutionService
from accordo.services.contract_template import generate_generic_contract
from accordo.services.document_assembler import DocumentAssembler
from accordo.services.document_validator import DocumentFormatError, DocumentValidationService
from accordo.services.models import Objectives
from accordo.services.negotiator import NegotiationOrchestrator

router = APIRouter(prefix="/api", tags=["negotiation"])
logger = logging.getLogger(__name__)

DOCUMENT_FORMAT_DETAIL = "Failed to process the document. Please ensure it is a valid PDF or DOCX file."


def _parse_number(raw: str | None, name: str) -> float:
    if raw is None or not raw.strip():
        raise ValueError(f"{name} is required")
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number") from None
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number")
    return value


def _parse_days(raw: str | None, name: str) -> int:
    value = _parse_number(raw, name)
    if value <= 0 or not value.is_integer():
        raise ValueError(f"{name} must be a positive whole number of days")
    return int(value)


def _parse_objectives(payment_days: str | None, delivery_days: str | None, penalty_rate: str | None) -> Objectives:
    penalty = _parse_number(penalty_rate, "penaltyRate")
    if penalty < 0:
        raise ValueError("penaltyRate must not be negative")
    return Objectives(
        payment_days=_parse_days(payment_days, "paymentDays"),
        delivery_days=_parse_days(delivery_days, "deliveryDays"),
        penalty_rate=penalty,
    )


@router.post("/negotiate", response_model=NegotiationResponse)
def negotiate_contract(
    file: UploadFile | None = File(default=None),
    payment_days: str | None = Form(default=None, alias="paymentDays"),
    delivery_days: str | None = Form(default=None, alias="deliveryDays"),
    penalty_rate: str | None = Form(default=None, alias="penaltyRate"),
    negotiator: NegotiationOrchestrator = Depends(get_negotiator),
    validator: DocumentValidationService = Depends(get_document_validator),
    settings: Settings = Depends(get_settings),
) -> NegotiationResponse:
    try:
        if file is None or not (file.filename or "").strip():
            raise ValueError("No file uploaded")
        objectives = _parse_objectives(payment_days, delivery_days, penalty_rate)

        file_bytes = file.file.read(settings.max_upload_bytes + 1)
        if len(file_bytes) > settings.max_upload_bytes:
            raise ValueError(f"Uploaded file exceeds {settings.max_upload_bytes} bytes")

        # Validity check only; negotiation runs on the synthesized contract below.
        validator.validate(file.filename, file_bytes)
        contract_text = generate_generic_contract(objectives)

        logger.info("negotiating %s with %s", file.filename, objectives)
        results = negotiator.negotiate(contract_text, objectives)
        return NegotiationResponse(
            suggestions=[SuggestionSetResponse.from_domain(item) for item in results],
            contract_text=contract_text,
        )
    except DocumentFormatError as exc:
        logger.warning("rejected upload %s: %s", file.filename if file else None, exc)
        raise HTTPException(status_code=415, detail=DOCUMENT_FORMAT_DETAIL) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("negotiation failed")
        raise HTTPException(status_code=500, detail=f"Failed to process contract: {exc}") from exc
    finally:
        if file is not None:
            file.file.close()


@router.post("/generate", response_model=GenerateContractResponse)
def generate_contract(
    request: GenerateContractRequest,
    substitution_service: ClauseSubstitutionService = Depends(get_substitution_service),
    assembler: DocumentAssembler = Depends(get_document_assembler),
) -> GenerateContractResponse:
    try:
        contract_text = request.require_contract_text()
        selection = request.require_selection()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        document = substitution_service.build(contract_text, selection)
        pdf_url = assembler.assemble(document)
    except Exception as exc:
        logger.exception("contract assembly failed")
        raise HTTPException(status_code=500, detail="Failed to generate contract") from exc

    return GenerateContractResponse(pdf_url=pdf_url)


@router.get("/download")
def download_contract(
    file: str | None = Query(default=None),
    artifact_store: ArtifactStore = Depends(get_artifact_store),
) -> Response:
    if not file:
        raise HTTPException(status_code=400, detail="No file specified")
    try:
        content = artifact_store.read(file)
    except ArtifactNotFoundError as exc:
        raise HTTPException(status_code=404, detail="File not found") from exc
    except Exception as exc:
        logger.exception("failed to read artifact %s", file)
        raise HTTPException(status_code=500, detail="Failed to download file") from exc

    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{file}"'},
    )
