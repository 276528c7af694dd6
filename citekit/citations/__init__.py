"""Citation enrichment entry point used by the document generators."""

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from citekit.citations.enricher import enrich_content
from citekit.citations.matcher import SearchCriteria, search_citations
from citekit.citations.models import EnrichmentResult, QualityMetrics
from citekit.citations.quality import score_citations
from citekit.citations.ranker import rank_and_select
from citekit.core.options import EnrichmentOptions
from citekit.corpus.store import CitationStore, CorpusLoadError, get_default_store

logger = logging.getLogger(__name__)


def enrich_document(
    content: str,
    keywords: Sequence[str],
    options: Optional[EnrichmentOptions] = None,
    store: Optional[CitationStore] = None,
    now: Optional[datetime] = None,
) -> EnrichmentResult:
    """Select, place and score citations for one generated document.

    Raises CorpusLoadError if no store is given and the default corpus
    cannot be loaded.
    """
    options = options or EnrichmentOptions()
    if not options.include_citations:
        return _unchanged(content, options)

    store = store if store is not None else get_default_store()
    now = now or datetime.now(timezone.utc)

    criteria = SearchCriteria(
        keywords=list(keywords),
        industry=options.industry,
        minimum_confidence=options.minimum_confidence,
        max_age_months=options.max_citation_age_months,
        exclude_domains=options.exclude_domains,
    )
    candidates = search_citations(store.all(), criteria, today=now.date())
    selected = rank_and_select(candidates, options.min_citations)

    enriched = enrich_content(content, selected, options.style)
    body = enriched.content
    if options.include_bibliography:
        body += enriched.bibliography

    metrics = score_citations(selected, now=now)
    logger.info(
        "Enriched document with %d citation(s): credibility=%d recency=%d diversity=%d",
        metrics.total_citations,
        metrics.credibility_score,
        metrics.recency_score,
        metrics.diversity_score,
    )

    return EnrichmentResult(
        content=body,
        citation_count=len(selected),
        sources=[c.source_name for c in selected],
        metrics=metrics,
        citations=selected,
        style=options.style,
    )


def enrich_document_safely(
    content: str,
    keywords: Sequence[str],
    options: Optional[EnrichmentOptions] = None,
    store: Optional[CitationStore] = None,
    now: Optional[datetime] = None,
) -> EnrichmentResult:
    """enrich_document(), but an unavailable corpus yields the content uncited."""
    options = options or EnrichmentOptions()
    try:
        return enrich_document(content, keywords, options, store=store, now=now)
    except CorpusLoadError as exc:
        logger.warning("Citation corpus unavailable, continuing without citations: %s", exc)
        return _unchanged(content, options)


def _unchanged(content: str, options: EnrichmentOptions) -> EnrichmentResult:
    return EnrichmentResult(
        content=content,
        citation_count=0,
        sources=[],
        metrics=QualityMetrics(),
        style=options.style,
    )
