from __future__ import annotations

from dataclasses import dataclass
import io
import re
from typing import Protocol
from xml.etree import ElementTree as ET
from xml.sax.saxutils import escape

from reportlab.lib import colors, pagesizes
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer


@dataclass(frozen=True, slots=True)
class PageOptions:
    page_format: str = "A4"
    margin_cm: float = 2.0
    print_background: bool = True
    prefer_css_page_size: bool = True


class PdfRenderer(Protocol):
    def render(self, markup: str, options: PageOptions) -> bytes:
        ...


_CSS_PAGE_SIZE = re.compile(r"@page\s*\{[^}]*?\bsize\s*:\s*([A-Za-z0-9]+)", re.IGNORECASE)


def _page_size(name: str) -> tuple[float, float]:
    size = getattr(pagesizes, name.upper(), None)
    if not isinstance(size, tuple):
        raise ValueError(f"Unsupported page format: {name}")
    return size


def _inline(element: ET.Element) -> str:
    return escape(" ".join("".join(element.itertext()).split()))


def _classes(element: ET.Element) -> set[str]:
    return set((element.get("class") or "").split())


class ReportLabPdfRenderer:
    """Lays out the assembler's XHTML markup as a paged PDF with ReportLab."""

    def render(self, markup: str, options: PageOptions) -> bytes:
        try:
            root = ET.fromstring(markup)
        except ET.ParseError as exc:
            raise ValueError(f"Failed to parse document markup: {exc}") from exc

        body = root.find("body")
        if body is None:
            raise ValueError("Document markup has no body")

        page_format = options.page_format
        stylesheet = "".join(style.text or "" for style in root.iter("style"))
        if options.prefer_css_page_size:
            match = _CSS_PAGE_SIZE.search(stylesheet)
            if match:
                page_format = match.group(1)

        title_node = root.find("head/title")
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=_page_size(page_format),
            leftMargin=options.margin_cm * cm,
            rightMargin=options.margin_cm * cm,
            topMargin=options.margin_cm * cm,
            bottomMargin=options.margin_cm * cm,
            title=(title_node.text or "") if title_node is not None else "",
        )
        styles = self._styles(options)
        elements: list = []
        self._collect(body, styles, elements)
        doc.build(elements, onFirstPage=self._draw_page_number, onLaterPages=self._draw_page_number)
        return buffer.getvalue()

    def _collect(self, element: ET.Element, styles: dict[str, ParagraphStyle], elements: list) -> None:
        for child in element:
            classes = _classes(child)
            if child.tag == "h1":
                elements.append(Paragraph(_inline(child), styles["title"]))
            elif child.tag == "h2":
                elements.append(Paragraph(_inline(child), styles["heading"]))
            elif child.tag == "p":
                style = styles["clause"] if "clause" in classes else styles["body"]
                elements.append(Paragraph(_inline(child), style))
            elif child.tag == "li":
                elements.append(Paragraph(_inline(child), styles["body"]))
            elif child.tag == "nav" and "toc" in classes:
                self._collect(child, styles, elements)
                elements.append(PageBreak())
            elif child.tag == "div" and "footer" in classes:
                elements.append(Spacer(1, 18))
                elements.append(Paragraph(_inline(child), styles["footer"]))
            else:
                self._collect(child, styles, elements)

    @staticmethod
    def _styles(options: PageOptions) -> dict[str, ParagraphStyle]:
        base = getSampleStyleSheet()
        clause = ParagraphStyle(
            name="Clause",
            parent=base["Normal"],
            fontName="Helvetica",
            fontSize=12,
            leading=18,
            alignment=TA_JUSTIFY,
            spaceBefore=6,
            spaceAfter=6,
        )
        if options.print_background:
            clause.backColor = colors.HexColor("#F9F9F9")
            clause.borderColor = colors.HexColor("#007ACC")
            clause.borderWidth = 0.5
            clause.borderPadding = 6
        return {
            "title": ParagraphStyle(
                name="ContractTitle",
                parent=base["Title"],
                fontName="Helvetica-Bold",
                fontSize=24,
                leading=28,
                spaceAfter=18,
            ),
            "heading": ParagraphStyle(
                name="SectionHeading",
                parent=base["Heading2"],
                fontName="Helvetica-Bold",
                fontSize=16,
                textColor=colors.HexColor("#2A3F54"),
                spaceBefore=18,
                spaceAfter=8,
            ),
            "body": ParagraphStyle(
                name="Body",
                parent=base["Normal"],
                fontName="Helvetica",
                fontSize=12,
                leading=18,
                alignment=TA_JUSTIFY,
                spaceAfter=6,
            ),
            "clause": clause,
            "footer": ParagraphStyle(
                name="Footer",
                parent=base["Normal"],
                fontName="Helvetica",
                fontSize=10,
                textColor=colors.HexColor("#666666"),
                alignment=TA_CENTER,
            ),
        }

    @staticmethod
    def _draw_page_number(canvas, doc) -> None:
        canvas.saveState()
        canvas.setFont("Helvetica", 10)
        canvas.setFillColor(colors.HexColor("#666666"))
        canvas.drawCentredString(doc.pagesize[0] / 2.0, doc.bottomMargin / 2.0, f"Page {doc.page}")
        canvas.restoreState()
