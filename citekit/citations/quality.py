"""Quality scoring for a selected citation set: credibility, recency, diversity."""

import logging
import math
from datetime import datetime, time, timezone
from typing import Optional, Sequence

from citekit.citations.models import QualityGate, QualityMetrics
from citekit.core.requirements import CitationRequirements
from citekit.corpus.models import Citation, Confidence

logger = logging.getLogger(__name__)

CREDIBILITY_SCALE = 33.33
RECENCY_POINTS_PER_MONTH = 2
SECONDS_PER_MONTH = 30 * 24 * 60 * 60

MAX_LOW_CONFIDENCE_SHARE = 0.3
MIN_RECENCY_SCORE = 60
MIN_DIVERSITY_SCORE = 40
CREDIBILITY_WEIGHT = 0.4
RECENCY_WEIGHT = 0.3
DIVERSITY_WEIGHT = 0.3


# ── Public API ───────────────────────────────────────────────────────


def score_citations(
    citations: Sequence[Citation], now: Optional[datetime] = None
) -> QualityMetrics:
    """Compute QualityMetrics; an empty set scores zero everywhere."""
    if not citations:
        return QualityMetrics()

    now = _as_utc(now or datetime.now(timezone.utc))

    return QualityMetrics(
        total_citations=len(citations),
        credibility_score=credibility_score(citations),
        recency_score=recency_score(citations, now),
        diversity_score=diversity_score(citations),
        unique_sources=unique_sources(citations),
    )


def credibility_score(citations: Sequence[Citation]) -> int:
    """Mean confidence rank (High=3 … Low=1) scaled to 0–100."""
    if not citations:
        return 0
    mean = sum(c.confidence.rank for c in citations) / len(citations)
    return min(100, _round_half_up(mean * CREDIBILITY_SCALE))


def recency_score(citations: Sequence[Citation], now: Optional[datetime] = None) -> int:
    """Mean of max(0, 100 - 2 × months old) over the set (30-day months)."""
    if not citations:
        return 0
    now = _as_utc(now or datetime.now(timezone.utc))
    scores = [
        min(100.0, max(0.0, 100 - months_old(c, now) * RECENCY_POINTS_PER_MONTH))
        for c in citations
    ]
    return _round_half_up(sum(scores) / len(scores))


def diversity_score(citations: Sequence[Citation]) -> int:
    """Share of distinct domains in the set, 0–100."""
    if not citations:
        return 0
    return _round_half_up(min(100.0, unique_sources(citations) / len(citations) * 100))


def unique_sources(citations: Sequence[Citation]) -> int:
    return len({c.domain for c in citations})


def months_old(citation: Citation, now: datetime) -> float:
    """Fractional 30-day months from publication (UTC midnight) to now."""
    published = datetime.combine(citation.published_at, time(), tzinfo=timezone.utc)
    return (_as_utc(now) - published).total_seconds() / SECONDS_PER_MONTH


def confidence_distribution(citations: Sequence[Citation]) -> dict[str, int]:
    """Count of citations per confidence level, all levels present."""
    dist = {level.value: 0 for level in Confidence}
    for c in citations:
        dist[c.confidence.value] += 1
    return dist


# ── Quality Gate ─────────────────────────────────────────────────────


def check_requirements(
    metrics: QualityMetrics,
    citations: Sequence[Citation],
    requirements: CitationRequirements,
    industry: Optional[str] = None,
    now: Optional[datetime] = None,
) -> QualityGate:
    """Check a selection against a document type's citation requirements.

    Every failed check adds one issue and one recommendation. The aggregate
    recency, diversity and source-type checks only run on a non-empty set.
    """
    now = _as_utc(now or datetime.now(timezone.utc))
    issues: list[str] = []
    recommendations: list[str] = []

    shortfall = requirements.minimum_citations - metrics.total_citations
    if shortfall > 0:
        issues.append(
            f"{metrics.total_citations} citation(s), "
            f"{requirements.minimum_citations} required"
        )
        recommendations.append(f"Add {shortfall} more relevant citation(s)")

    floor = requirements.minimum_confidence_level
    weak = [c.id for c in citations if c.confidence.rank < floor.rank]
    if weak:
        issues.append(f"Below {floor.value} confidence: {', '.join(weak)}")
        recommendations.append(
            f"Replace sources below {floor.value} confidence with more authoritative ones"
        )

    low = sum(1 for c in citations if c.confidence is Confidence.LOW)
    if low > len(citations) * MAX_LOW_CONFIDENCE_SHARE:
        issues.append(f"Too many low-confidence citations: {low} of {len(citations)}")
        recommendations.append(
            "Replace low-confidence sources with more authoritative references"
        )

    window = requirements.recency_requirement_months
    stale = [c.id for c in citations if months_old(c, now) > window]
    if stale:
        issues.append(f"Older than {window} months: {', '.join(stale)}")
        recommendations.append(f"Use sources published in the last {window} months")

    if citations:
        if metrics.recency_score < MIN_RECENCY_SCORE:
            issues.append(f"Citations are too old (recency score {metrics.recency_score})")
            recommendations.append("Include more recent sources from the last 12-18 months")

        if metrics.diversity_score < MIN_DIVERSITY_SCORE:
            issues.append(
                f"Limited source diversity (diversity score {metrics.diversity_score})"
            )
            recommendations.append("Include citations from different sources and domains")

        present = {c.source_type for c in citations if c.source_type is not None}
        missing = [
            t.value for t in requirements.required_source_types if t not in present
        ]
        if missing:
            issues.append(f"Missing required source types: {', '.join(missing)}")
            recommendations.append(f"Add citations of type: {', '.join(missing)}")

    if requirements.industry_specific and not (industry and industry.strip()):
        issues.append("Industry-specific document generated without an industry")
        recommendations.append("Pass the target industry so citations can be matched to it")

    gate = QualityGate(
        document_type=requirements.document_type,
        passed=not issues,
        quality_score=quality_score(metrics),
        issues=issues,
        recommendations=recommendations,
    )
    if not gate.passed:
        logger.warning(
            "Citation quality gate failed for %s: %s",
            requirements.document_type,
            "; ".join(issues),
        )
    return gate


def quality_score(metrics: QualityMetrics) -> int:
    """Weighted overall score: 40% credibility, 30% recency, 30% diversity."""
    return _round_half_up(
        metrics.credibility_score * CREDIBILITY_WEIGHT
        + metrics.recency_score * RECENCY_WEIGHT
        + metrics.diversity_score * DIVERSITY_WEIGHT
    )


# ── Helpers ──────────────────────────────────────────────────────────


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
