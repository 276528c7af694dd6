"""Render citations as inline markers and bibliography entries."""

from citekit.citations.models import FormattedCitation
from citekit.core.options import CitationStyle
from citekit.corpus.models import Citation


def format_citation(
    citation: Citation, style: CitationStyle | str = CitationStyle.BUSINESS
) -> FormattedCitation:
    """Inline marker and bibliography entry for one citation.

    business: [id] / "[id] Title. Org (Year). Finding. Available: URL"
    apa:      (Org, Year) / "Org (Year). Title. Retrieved from URL"
    default:  [id] / "[id] Title (Year). Org. URL"
    Organization falls back to domain when absent.
    """
    style = CitationStyle.parse(style)
    year = citation.year
    org = citation.source_name

    if style is CitationStyle.APA:
        inline = f"({org}, {year})"
        entry = f"{org} ({year}). {citation.title}. Retrieved from {citation.url}"
    elif style is CitationStyle.BUSINESS:
        inline = f"[{citation.id}]"
        finding = citation.key_finding.rstrip(".")
        entry = (
            f"[{citation.id}] {citation.title}. {org} ({year}). "
            f"{finding}. Available: {citation.url}"
        )
    else:
        inline = f"[{citation.id}]"
        entry = f"[{citation.id}] {citation.title} ({year}). {org}. {citation.url}"

    return FormattedCitation(
        citation_id=citation.id,
        style=style,
        inline=inline,
        bibliography=entry,
        hyperlink=citation.url,
    )
