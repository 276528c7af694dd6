"""Shared data models for citation selection, rendering and scoring."""

from typing import Optional

from pydantic import BaseModel, Field

from citekit.core.options import CitationStyle
from citekit.corpus.models import Citation


class FormattedCitation(BaseModel):
    """One citation rendered in a given style."""

    citation_id: str
    style: CitationStyle
    inline: str
    bibliography: str
    hyperlink: str


class EnrichedContent(BaseModel):
    """Prose with inline markers, plus the separate reference block."""

    content: str
    bibliography: str
    # citation id -> offset of the marker in the *original* text (None = not placed)
    placements: dict[str, Optional[int]] = Field(default_factory=dict)


class QualityMetrics(BaseModel):
    """Aggregate quality signal for a selected citation set (all 0 when empty)."""

    total_citations: int = Field(default=0, ge=0)
    credibility_score: int = Field(default=0, ge=0, le=100)
    recency_score: int = Field(default=0, ge=0, le=100)
    diversity_score: int = Field(default=0, ge=0, le=100)
    unique_sources: int = Field(default=0, ge=0)


class QualityGate(BaseModel):
    """Outcome of checking metrics against a document type's requirements."""

    document_type: str
    passed: bool
    quality_score: int = Field(default=0, ge=0, le=100)
    issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class EnrichmentResult(BaseModel):
    """What a document generator gets back from one enrichment call."""

    content: str
    citation_count: int
    sources: list[str]
    metrics: QualityMetrics
    citations: list[Citation] = Field(default_factory=list)
    style: CitationStyle = CitationStyle.BUSINESS
