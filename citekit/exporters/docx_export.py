"""DOCX rendering of an enriched Markdown document."""

import logging
import re

from docx import Document
from docx.shared import Inches, Pt

from citekit.citations.models import EnrichmentResult

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")
_BULLET_RE = re.compile(r"^\s*[-*]\s+(.*)$")
_NUMBERED_RE = re.compile(r"^\s*\d+\.\s+(.*)$")


def export_document_docx(
    result: EnrichmentResult, output_path: str, title: str | None = None
) -> None:
    """Export the enriched document as DOCX.

    Markdown headings become Word headings, bullets and numbered items become
    list paragraphs, everything else is body text. Emphasis markers are kept
    verbatim.
    """
    doc = Document()

    section = doc.sections[0]
    section.left_margin = Inches(1)
    section.right_margin = Inches(1)

    if title:
        doc.add_heading(title, level=0)

    paragraphs = 0
    for line in result.content.splitlines():
        if not line.strip():
            continue

        heading = _HEADING_RE.match(line)
        bullet = _BULLET_RE.match(line)
        numbered = _NUMBERED_RE.match(line)

        if heading:
            level = min(len(heading.group(1)), 4)
            doc.add_heading(heading.group(2).strip(), level=level)
        elif bullet:
            doc.add_paragraph(bullet.group(1), style="List Bullet")
        elif numbered:
            doc.add_paragraph(numbered.group(1), style="List Number")
        else:
            para = doc.add_paragraph()
            run = para.add_run(line.strip())
            run.font.size = Pt(11)
        paragraphs += 1

    doc.save(output_path)
    logger.info("Document DOCX exported to %s (%d paragraphs)", output_path, paragraphs)
