"""Export convenience function."""

import logging
from pathlib import Path

from citekit.citations.models import EnrichmentResult
from citekit.exporters.docx_export import export_document_docx
from citekit.exporters.markdown import export_document_md
from citekit.exporters.references_table import (
    export_references_csv,
    export_references_excel,
)

logger = logging.getLogger(__name__)


def export_all(
    result: EnrichmentResult,
    output_dir: str,
    name: str = "document",
    title: str | None = None,
) -> dict:
    """Run all exports and return dict of file paths created."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    paths = {}

    md_path = str(out / f"{name}.md")
    export_document_md(result, md_path)
    paths["document_md"] = md_path

    docx_path = str(out / f"{name}.docx")
    export_document_docx(result, docx_path, title=title)
    paths["document_docx"] = docx_path

    csv_path = str(out / f"{name}_references.csv")
    export_references_csv(result, csv_path)
    paths["references_csv"] = csv_path

    xlsx_path = str(out / f"{name}_references.xlsx")
    export_references_excel(result, xlsx_path)
    paths["references_xlsx"] = xlsx_path

    logger.info("All exports written to %s", output_dir)
    return paths
