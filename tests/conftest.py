"""Shared pytest fixtures for the Accordo test suite."""

import io
import json
import zipfile
from unittest.mock import MagicMock

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from accordo.services.models import Objectives


SAMPLE_CONTRACT = """
    AGREEMENT BETWEEN PARTIES

    PAYMENT TERMS:
    The Client shall pay the Provider the agreed amount of $10,000 within 45 days of receiving the invoice.

    DELIVERY TIME:
    The Provider shall deliver all products within 30 days from the date of this agreement.

    PENALTIES:
    In case of late delivery, a penalty of 2% will be applied for each week of delay.
"""

# Directive phrase that identifies the category of an outgoing prompt.
CATEGORY_MARKERS = {
    "payment": "for the PAYMENT TERMS clause",
    "delivery": "for the DELIVERY TIME clause",
    "penalty": "for the PENALTIES clause",
}


def llm_reply(suggestions, scores) -> str:
    return json.dumps({"suggestions": suggestions, "scores": scores})


def category_of(user_prompt: str) -> str:
    for category, marker in CATEGORY_MARKERS.items():
        if marker in user_prompt:
            return category
    raise AssertionError("prompt does not name a clause category")


# ---------------------------------------------------------------------------
# Sample data fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_contract():
    return SAMPLE_CONTRACT


@pytest.fixture
def objectives():
    return Objectives(payment_days=30, delivery_days=14, penalty_rate=5)


@pytest.fixture
def mock_llm_provider():
    """Provider double that answers every category with three suggestions."""
    provider = MagicMock()

    def reply(*, system_prompt, user_prompt, temperature=0.2):
        category = category_of(user_prompt)
        return llm_reply(
            [f"{category} clause 1", f"{category} clause 2", f"{category} clause 3"],
            [3, 5, 8],
        )

    provider.chat_json.side_effect = reply
    return provider


@pytest.fixture
def docx_bytes():
    document_xml = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        "<w:body>"
        "<w:p><w:r><w:t>SERVICE AGREEMENT</w:t></w:r></w:p>"
        "<w:p><w:r><w:t>Payment is due within </w:t></w:r><w:r><w:t>60 days.</w:t></w:r></w:p>"
        "</w:body>"
        "</w:document>"
    )
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("[Content_Types].xml", "<Types/>")
        archive.writestr("word/document.xml", document_xml)
    return buffer.getvalue()


@pytest.fixture
def pdf_bytes():
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.drawString(72, 720, "Master Services Agreement")
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()
