"""Enriched document as a Markdown file."""

import logging

from citekit.citations.models import EnrichmentResult

logger = logging.getLogger(__name__)


def export_document_md(result: EnrichmentResult, output_path: str) -> None:
    """Write the enriched content (markers and references included) to disk."""
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(result.content)
        if not result.content.endswith("\n"):
            f.write("\n")

    logger.info(
        "Document exported to %s (%d citations)", output_path, result.citation_count
    )
