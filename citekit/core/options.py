"""Enrichment options: citation style enum and per-request settings."""

from enum import Enum
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field, field_validator

from citekit.corpus.models import Confidence

if TYPE_CHECKING:
    from citekit.core.requirements import CitationRequirements

DEFAULT_MIN_CITATIONS = 3


class CitationStyle(str, Enum):
    """Closed set of rendering styles for inline markers and references."""

    BUSINESS = "business"
    APA = "apa"
    DEFAULT = "default"

    @classmethod
    def parse(cls, value: "str | CitationStyle | None") -> "CitationStyle":
        """Map a free-form style name onto the enum; unknown names → DEFAULT."""
        if isinstance(value, CitationStyle):
            return value
        if not value:
            return cls.DEFAULT
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.DEFAULT


class EnrichmentOptions(BaseModel):
    """Per-request citation settings supplied by a document generator."""

    include_citations: bool = True
    include_bibliography: bool = True
    min_citations: int = Field(default=DEFAULT_MIN_CITATIONS, ge=1, le=20)
    style: CitationStyle = CitationStyle.BUSINESS
    industry: Optional[str] = Field(
        default=None, description="Industry tag candidates must carry (substring match)"
    )
    minimum_confidence: Optional[Confidence] = None
    max_citation_age_months: Optional[int] = Field(default=None, ge=6, le=60)
    exclude_domains: list[str] = Field(default_factory=list)

    @field_validator("style", mode="before")
    @classmethod
    def lenient_style(cls, v):
        return CitationStyle.parse(v)

    @field_validator("minimum_confidence", mode="before")
    @classmethod
    def lenient_confidence(cls, v):
        if isinstance(v, str):
            return Confidence(v)
        return v

    @classmethod
    def for_document(
        cls, requirements: "CitationRequirements", **overrides
    ) -> "EnrichmentOptions":
        """Derive min citations and confidence floor from a document type.

        Recency is checked afterwards by the quality gate, not used as a filter.
        """
        data = {
            "min_citations": requirements.minimum_citations,
            "minimum_confidence": requirements.minimum_confidence_level,
        }
        data.update(overrides)
        return cls.model_validate(data)
