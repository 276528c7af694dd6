#!/usr/bin/env python3
"""Enrich a Markdown document with citations and export it."""

import argparse
import json
import logging
import sys
import time
from pathlib import Path

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from citekit.citations import enrich_document_safely
from citekit.citations.quality import check_requirements
from citekit.core.options import CitationStyle, EnrichmentOptions
from citekit.core.requirements import load_citation_requirements
from citekit.corpus.store import CitationStore, CorpusLoadError
from citekit.exporters import export_all

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("enrich")


def run(
    input_path: str,
    keywords: list[str],
    industry: str | None,
    min_citations: int | None,
    style: str,
    document_type: str | None,
    corpus_path: str | None,
    output_dir: str,
) -> dict:
    """Enrich one document, check the quality gate, write exports."""
    t_start = time.time()

    content = Path(input_path).read_text(encoding="utf-8")
    logger.info("Loaded %s (%d chars)", input_path, len(content))

    table = load_citation_requirements()
    requirements = table.for_document(document_type)

    overrides = {"style": style, "industry": industry}
    if min_citations:
        overrides["min_citations"] = min_citations
    if document_type:
        options = EnrichmentOptions.for_document(requirements, **overrides)
    else:
        options = EnrichmentOptions(**overrides)

    store = None
    if corpus_path:
        try:
            store = CitationStore.load(corpus_path)
            logger.info("Citation corpus: %d records from %s", len(store), corpus_path)
        except CorpusLoadError as exc:
            logger.warning("Citation corpus unavailable, continuing without citations: %s", exc)
            options = options.model_copy(update={"include_citations": False})

    result = enrich_document_safely(content, keywords, options, store=store)
    gate = check_requirements(result.metrics, result.citations, requirements, industry)

    name = Path(input_path).stem
    paths = export_all(result, output_dir, name=name)

    elapsed = time.time() - t_start
    summary = {
        "citations": result.citation_count,
        "sources": result.sources,
        "metrics": result.metrics.model_dump(),
        "quality_gate": gate.model_dump(),
        "exports": paths,
        "elapsed": round(elapsed, 2),
    }
    logger.info("=" * 60)
    logger.info("ENRICHMENT COMPLETE in %.1fs", elapsed)
    logger.info("Summary: %s", json.dumps(summary, indent=2))
    return summary


def main() -> None:
    parser = argparse.ArgumentParser(description="Add citations to a Markdown document")
    parser.add_argument("input", help="Path to the Markdown document")
    parser.add_argument(
        "--keywords", required=True,
        help="Comma-separated keywords, e.g. 'automation,ai,customer service'",
    )
    parser.add_argument("--industry", default=None, help="Industry tag, e.g. saas")
    parser.add_argument("--min-citations", type=int, default=None)
    parser.add_argument(
        "--style", default=CitationStyle.BUSINESS.value,
        choices=[s.value for s in CitationStyle],
    )
    parser.add_argument(
        "--document-type", default=None,
        help="Requirements profile, e.g. business_case, executive_onepager",
    )
    parser.add_argument("--corpus", default=None, help="Citation corpus JSON/YAML file")
    parser.add_argument("--output-dir", default="output", help="Export directory")
    args = parser.parse_args()

    keywords = [k.strip() for k in args.keywords.split(",") if k.strip()]
    run(
        args.input,
        keywords,
        args.industry,
        args.min_citations,
        args.style,
        args.document_type,
        args.corpus,
        args.output_dir,
    )


if __name__ == "__main__":
    main()
