from __future__ import annotations

import io
from pathlib import Path
import zipfile
from xml.etree import ElementTree as ET

from pypdf import PdfReader

DOCX_NS = {"w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main"}


class DocumentFormatError(ValueError):
    pass


class DocumentValidationService:
    """Checks that an upload opens as PDF or DOCX. The extracted text is not used downstream."""

    SUPPORTED_EXTENSIONS = {".pdf", ".docx"}

    def validate(self, file_name: str, file_bytes: bytes) -> str:
        suffix = Path(file_name or "").suffix.lower()
        if suffix not in self.SUPPORTED_EXTENSIONS:
            raise DocumentFormatError("Unsupported file format. Please upload a PDF or DOCX file.")
        if not file_bytes:
            raise DocumentFormatError("The uploaded document is empty.")

        if suffix == ".pdf":
            return self._read_pdf(file_bytes)
        return self._read_docx(file_bytes)

    @staticmethod
    def _read_pdf(file_bytes: bytes) -> str:
        try:
            reader = PdfReader(io.BytesIO(file_bytes))
            if len(reader.pages) == 0:
                raise DocumentFormatError("The PDF document has no pages.")
            # Only the first page is read; this is a validity check.
            return (reader.pages[0].extract_text() or "").strip()
        except DocumentFormatError:
            raise
        except Exception as exc:
            raise DocumentFormatError(f"Failed to open PDF: {exc}") from exc

    @staticmethod
    def _read_docx(file_bytes: bytes) -> str:
        try:
            with zipfile.ZipFile(io.BytesIO(file_bytes), "r") as archive:
                document_xml = archive.read("word/document.xml")
        except Exception as exc:
            raise DocumentFormatError(f"Failed to open DOCX: {exc}") from exc

        try:
            root = ET.fromstring(document_xml)
        except Exception as exc:
            raise DocumentFormatError(f"Failed to parse DOCX XML: {exc}") from exc

        paragraphs: list[str] = []
        for paragraph in root.findall(".//w:p", DOCX_NS):
            text = "".join(node.text or "" for node in paragraph.findall(".//w:t", DOCX_NS)).strip()
            if text:
                paragraphs.append(text)
        return "\n\n".join(paragraphs)
