import re

from accordo.services.models import AssembledDocument, ClauseCategory, ClauseSelection, DocumentSection
from accordo.services.section_parser import parse_contract_sections, sanitize_text

# Substring markers matched case-sensitively against parsed section titles.
# First match wins.
SECTION_MARKERS: tuple[tuple[str, ClauseCategory], ...] = (
    ("PAYMENT", ClauseCategory.PAYMENT),
    ("DELIVERY", ClauseCategory.DELIVERY),
    ("PENALTIES", ClauseCategory.PENALTY),
)

SIGNATURE_HEADING = "SIGNATURES"
SIGNATURE_LINES = (
    "Client: _______________________   Date: ____________",
    "Provider: _____________________   Date: ____________",
)

_SENTENCE_BOUNDARY = re.compile(r"\.\s+")


def format_clause_text(text: str) -> list[str]:
    """Split clause text into one period-terminated paragraph per sentence."""
    paragraphs: list[str] = []
    for fragment in _SENTENCE_BOUNDARY.split(sanitize_text(text)):
        fragment = fragment.strip()
        if not fragment:
            continue
        paragraphs.append(fragment if fragment.endswith(".") else f"{fragment}.")
    return paragraphs


def match_category(title: str) -> ClauseCategory | None:
    for marker, category in SECTION_MARKERS:
        if marker in title:
            return category
    return None


class ClauseSubstitutionService:
    def build(self, contract_text: str, selections: ClauseSelection) -> AssembledDocument:
        document = AssembledDocument()
        for title, body in parse_contract_sections(contract_text).items():
            category = match_category(title)
            if category is None:
                document.sections.append(DocumentSection(heading=title, paragraphs=format_clause_text(body)))
                continue
            document.sections.append(
                DocumentSection(
                    heading=title,
                    paragraphs=format_clause_text(selections.for_category(category)),
                    negotiated=True,
                )
            )

        document.sections.append(DocumentSection(heading=SIGNATURE_HEADING, paragraphs=list(SIGNATURE_LINES)))
        return document
