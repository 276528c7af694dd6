"""Rank candidates by confidence then recency and bound the selection."""

import logging
from typing import Sequence

from citekit.corpus.models import Citation

logger = logging.getLogger(__name__)


def rank_citations(candidates: Sequence[Citation]) -> list[Citation]:
    """Confidence descending, then newest first. Full ties keep input order."""
    return sorted(
        candidates,
        key=lambda c: (c.confidence.rank, c.published_at),
        reverse=True,
    )


def rank_and_select(candidates: Sequence[Citation], min_count: int) -> list[Citation]:
    """Ranked selection of max(min_count, len(candidates)) citations.

    A pool larger than min_count is returned whole; a smaller pool is returned
    as-is (never padded).
    """
    ranked = rank_citations(candidates)
    selected = ranked[: max(min_count, len(ranked))]

    if len(selected) < min_count:
        logger.info(
            "Only %d citation(s) available, %d requested", len(selected), min_count
        )
    return selected
