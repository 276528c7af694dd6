"""Relevance matching: narrow the corpus to candidates for a keyword query."""

import logging
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, Field

from citekit.corpus.models import Citation, Confidence, SourceType

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30


class SearchCriteria(BaseModel):
    """Keyword query plus optional narrowing filters."""

    keywords: list[str]
    industry: Optional[str] = None
    source_types: Optional[list[SourceType]] = None
    minimum_confidence: Optional[Confidence] = None
    published_after: Optional[date] = None
    published_before: Optional[date] = None
    max_age_months: Optional[int] = Field(default=None, ge=1)
    exclude_domains: list[str] = Field(default_factory=list)


# ── Public API ───────────────────────────────────────────────────────


def filter_citations(
    corpus: Iterable[Citation],
    keywords: Sequence[str],
    industry: Optional[str] = None,
) -> list[Citation]:
    """Citations matching any keyword (and the industry, if given).

    Keywords are case-insensitive substrings of the title, key finding or an
    industry tag. No keywords means no candidates. Corpus order is kept.
    """
    needles = [k.lower() for k in keywords if k and k.strip()]
    if not needles:
        return []

    industry_needle = industry.strip().lower() if industry and industry.strip() else None

    return [
        c
        for c in corpus
        if matches_keywords(c, needles)
        and (industry_needle is None or matches_industry(c, industry_needle))
    ]


def search_citations(
    corpus: Iterable[Citation],
    criteria: SearchCriteria,
    today: Optional[date] = None,
) -> list[Citation]:
    """filter_citations() followed by the optional criteria filters."""
    candidates = filter_citations(corpus, criteria.keywords, criteria.industry)

    excluded = {d.lower() for d in criteria.exclude_domains}
    cutoff = None
    if criteria.max_age_months:
        cutoff = (today or date.today()) - timedelta(
            days=criteria.max_age_months * DAYS_PER_MONTH
        )

    result = []
    for c in candidates:
        if criteria.source_types and c.source_type not in criteria.source_types:
            continue
        if (
            criteria.minimum_confidence
            and c.confidence.rank < criteria.minimum_confidence.rank
        ):
            continue
        if criteria.published_after and c.published_at < criteria.published_after:
            continue
        if criteria.published_before and c.published_at > criteria.published_before:
            continue
        if cutoff and c.published_at < cutoff:
            continue
        if c.domain.lower() in excluded:
            continue
        result.append(c)

    logger.debug(
        "Citation search %s: %d keyword matches, %d after filters",
        criteria.keywords,
        len(candidates),
        len(result),
    )
    return result


# ── Predicates ───────────────────────────────────────────────────────


def matches_keywords(citation: Citation, needles: Sequence[str]) -> bool:
    """True if any lowercased needle occurs in title, key finding or a tag."""
    title = citation.title.lower()
    finding = citation.key_finding.lower()
    tags = [t.lower() for t in citation.industry_focus]
    return any(
        n in title or n in finding or any(n in t for t in tags) for n in needles
    )


def matches_industry(citation: Citation, industry: str) -> bool:
    industry = industry.lower()
    return any(industry in t.lower() for t in citation.industry_focus)
