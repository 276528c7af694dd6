"""Insert inline citation markers into prose and build the reference block."""

import logging
import re
from typing import Optional, Sequence

from citekit.citations.formatter import format_citation
from citekit.citations.models import EnrichedContent
from citekit.core.options import CitationStyle
from citekit.corpus.models import Citation

logger = logging.getLogger(__name__)

NEEDLE_LENGTH = 30
FALLBACK_SLOTS = 2  # only the first N unmatched citations go to the first paragraph
BIBLIOGRAPHY_HEADER = "\n\n## References\n\n"


# ── Public API ───────────────────────────────────────────────────────


def enrich_content(
    content: str,
    citations: Sequence[Citation],
    style: CitationStyle | str = CitationStyle.BUSINESS,
) -> EnrichedContent:
    """Place one inline marker per citation and build the bibliography.

    A citation is anchored at the end of the sentence that contains the first
    NEEDLE_LENGTH characters of its key finding (case-insensitive). Unmatched
    citations among the first FALLBACK_SLOTS go to the end of the first
    paragraph; the rest only appear in the bibliography.
    """
    style = CitationStyle.parse(style)
    formatted = [format_citation(c, style) for c in citations]

    placements = plan_insertions(content, citations)
    inserts = [
        (offset, fc.inline)
        for fc, offset in zip(formatted, placements)
        if offset is not None
    ]
    enriched = apply_insertions(content, inserts)

    placed = sum(1 for p in placements if p is not None)
    logger.info(
        "Placed %d/%d inline citations (%s style)", placed, len(citations), style.value
    )

    return EnrichedContent(
        content=enriched,
        bibliography=build_bibliography(citations, style),
        placements={c.id: p for c, p in zip(citations, placements)},
    )


def build_bibliography(
    citations: Sequence[Citation],
    style: CitationStyle | str = CitationStyle.BUSINESS,
) -> str:
    """'## References' header then one entry per citation, each followed by a blank line.

    The header is emitted even when there are no citations.
    """
    entries = "".join(
        format_citation(c, style).bibliography + "\n\n" for c in citations
    )
    return BIBLIOGRAPHY_HEADER + entries


# ── Insertion Planning ───────────────────────────────────────────────


def plan_insertions(content: str, citations: Sequence[Citation]) -> list[Optional[int]]:
    """Marker offset in the original content for each citation, or None.

    Offsets index the unmodified text; markers sharing an offset keep
    selection order when applied.
    """
    paragraph_end = content.find("\n\n")
    offsets: list[Optional[int]] = []

    for index, citation in enumerate(citations):
        match_at = find_needle(content, citation.key_finding[:NEEDLE_LENGTH])

        if match_at is not None:
            sentence_end = content.find(".", match_at)
            offsets.append(sentence_end if sentence_end != -1 else None)
        elif index < FALLBACK_SLOTS and paragraph_end != -1:
            offsets.append(paragraph_end)
        else:
            offsets.append(None)

    return offsets


def find_needle(content: str, needle: str) -> Optional[int]:
    """Case-insensitive position of needle in content (code-point offset)."""
    if not needle:
        return None
    m = re.search(re.escape(needle), content, re.IGNORECASE)
    return m.start() if m else None


def apply_insertions(content: str, inserts: Sequence[tuple[int, str]]) -> str:
    """Splice ' marker' texts into content, right to left.

    Markers at the same offset are joined in the order given.
    """
    grouped: dict[int, list[str]] = {}
    for offset, marker in inserts:
        grouped.setdefault(offset, []).append(marker)

    result = content
    for offset in sorted(grouped, reverse=True):
        joined = "".join(f" {m}" for m in grouped[offset])
        result = result[:offset] + joined + result[offset:]
    return result
