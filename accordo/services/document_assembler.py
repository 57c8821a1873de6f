from __future__ import annotations

from datetime import date
import logging
import re
from xml.sax.saxutils import escape

from accordo.services.artifact_store import ArtifactStore
from accordo.services.models import AssembledDocument
from accordo.services.pdf_renderer import PageOptions, PdfRenderer

logger = logging.getLogger(__name__)

FOOTER_BRAND = "Accordo"

STYLESHEET = """
  @page { size: A4; margin: 2cm; }
  body { font-family: 'Roboto', sans-serif; color: #333; margin: 0; padding: 0; }
  .container { margin: 2cm; }
  h1 { text-align: center; font-size: 24pt; margin-bottom: 1em; border-bottom: 2px solid #ccc; padding-bottom: 0.2em; }
  h2 { font-size: 16pt; font-weight: 600; color: #2a3f54; margin-top: 1.5em; margin-bottom: 0.5em; border-bottom: 1px solid #eee; }
  p { font-size: 12pt; line-height: 1.5; margin: 0.5em 0; text-align: justify; }
  section { margin-bottom: 1.5em; page-break-inside: avoid; }
  .clause { background: #f9f9f9; border-left: 4px solid #007acc; padding: 10px; margin: 1em 0; }
  .footer { text-align: center; margin-top: 2em; font-size: 10pt; color: #666; border-top: 1px solid #eee; }
  nav.toc { page-break-after: always; margin-bottom: 2em; }
  nav.toc ul { list-style: none; padding-left: 0; }
"""


# Complement of the XML 1.0 Char production (U+FFFE, U+FFFF, lone surrogates, ...).
_NON_XML_CHARS = re.compile("[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


class ArtifactGenerationError(RuntimeError):
    pass


def _xml_text(value: str) -> str:
    return escape(_NON_XML_CHARS.sub("", value))


def render_markup(document: AssembledDocument, generated_on: date | None = None) -> str:
    """Render the document as a standalone XHTML page.

    The table of contents is a placeholder: the ``nav`` block is emitted with
    an empty list and is never populated.
    """
    generated_on = generated_on or date.today()
    lines = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8"/>',
        f"<title>{_xml_text(document.title)}</title>",
        f"<style>{STYLESHEET}</style>",
        "</head>",
        "<body>",
        '<div class="container">',
        f"<h1>{_xml_text(document.title)}</h1>",
        '<nav class="toc">',
        "<h2>Table of Contents</h2>",
        "<ul></ul>",
        "</nav>",
    ]
    for section in document.sections:
        lines.append("<section>")
        lines.append(f"<h2>{_xml_text(section.heading)}</h2>")
        paragraph_open = '<p class="clause">' if section.negotiated else "<p>"
        for paragraph in section.paragraphs:
            lines.append(f"{paragraph_open}{_xml_text(paragraph)}</p>")
        lines.append("</section>")
    lines.extend(
        [
            f'<div class="footer">Generated by {FOOTER_BRAND} - {generated_on.strftime("%m/%d/%Y")}</div>',
            "</div>",
            "</body>",
            "</html>",
        ]
    )
    return "\n".join(lines)


class DocumentAssembler:
    def __init__(
        self,
        renderer: PdfRenderer,
        artifact_store: ArtifactStore,
        page_options: PageOptions | None = None,
    ) -> None:
        self.renderer = renderer
        self.artifact_store = artifact_store
        self.page_options = page_options or PageOptions()

    def assemble(self, document: AssembledDocument) -> str:
        name = self.artifact_store.new_name()
        try:
            markup = render_markup(document)
            self.artifact_store.write_text(f"{name}.html", markup)
            pdf_bytes = self.renderer.render(markup, self.page_options)
            if not pdf_bytes:
                raise ValueError("renderer returned an empty document")
            self.artifact_store.write_bytes(f"{name}.pdf", pdf_bytes)
        except Exception as exc:
            raise ArtifactGenerationError(f"Failed to generate {name}.pdf: {exc}") from exc

        logger.info("assembled %s with sections: %s", name, ", ".join(document.headings()))
        return self.artifact_store.reference_for(f"{name}.pdf")
