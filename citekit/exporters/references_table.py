"""Reference table exports: CSV and Excel."""

import csv
import logging

import openpyxl

from citekit.citations.formatter import format_citation
from citekit.citations.models import EnrichmentResult
from citekit.citations.quality import confidence_distribution

logger = logging.getLogger(__name__)

HEADERS = [
    "position",
    "id",
    "title",
    "organization",
    "domain",
    "published_at",
    "confidence",
    "source_type",
    "key_finding",
    "url",
    "bibliography_entry",
]


# ── Helpers ──────────────────────────────────────────────────────────


def _build_reference_rows(result: EnrichmentResult) -> list[list]:
    """One row per selected citation, in selection order."""
    rows = []
    for pos, c in enumerate(result.citations, 1):
        rows.append([
            pos,
            c.id,
            c.title,
            c.organization or "",
            c.domain,
            c.published_at.isoformat(),
            c.confidence.value,
            c.source_type.value if c.source_type else "",
            c.key_finding,
            c.url,
            format_citation(c, result.style).bibliography,
        ])
    return rows


# ── CSV Export ───────────────────────────────────────────────────────


def export_references_csv(result: EnrichmentResult, output_path: str) -> None:
    """Export the selected citations as CSV."""
    rows = _build_reference_rows(result)

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(HEADERS)
        writer.writerows(rows)

    logger.info("References CSV exported to %s (%d rows)", output_path, len(rows))


# ── Excel Export ─────────────────────────────────────────────────────


def export_references_excel(result: EnrichmentResult, output_path: str) -> None:
    """Export citations and quality metrics as Excel with 2 sheets."""
    wb = openpyxl.Workbook()

    # Sheet 1: References
    ws1 = wb.active
    ws1.title = "References"
    ws1.append(HEADERS)
    for row in _build_reference_rows(result):
        ws1.append(row)
    _style_header(ws1)

    # Sheet 2: Quality Metrics
    ws2 = wb.create_sheet("Quality Metrics")
    ws2.append(["metric", "value"])
    for name, value in result.metrics.model_dump().items():
        ws2.append([name, value])
    for level, count in confidence_distribution(result.citations).items():
        ws2.append([f"confidence_{level.lower()}", count])
    _style_header(ws2)

    wb.save(output_path)
    logger.info("References Excel exported to %s", output_path)


def _style_header(ws) -> None:
    """Bold the header row."""
    from openpyxl.styles import Font
    for cell in ws[1]:
        cell.font = Font(bold=True)
