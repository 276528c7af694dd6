"""Shared data models for the citation corpus."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── Enums ────────────────────────────────────────────────────────────


class Confidence(str, Enum):
    """Credibility tier of a citation source."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        """Ordinal used for sorting and scoring (High=3, Medium=2, Low=1)."""
        return _CONFIDENCE_RANK[self]

    @classmethod
    def _missing_(cls, value):
        # Corpus files disagree on casing ("high", "High", "HIGH")
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None


_CONFIDENCE_RANK = {
    Confidence.HIGH: 3,
    Confidence.MEDIUM: 2,
    Confidence.LOW: 1,
}


class SourceType(str, Enum):
    """Kind of publication a citation comes from."""

    ACADEMIC_PAPER = "academic_paper"
    INDUSTRY_REPORT = "industry_report"
    CONSULTING_STUDY = "consulting_study"
    GOVERNMENT_DATA = "government_data"
    COMPANY_BLOG = "company_blog"
    SURVEY_DATA = "survey_data"
    BENCHMARK_STUDY = "benchmark_study"
    CASE_STUDY = "case_study"
    WHITE_PAPER = "white_paper"
    RESEARCH_PUBLICATION = "research_publication"


# ── Citation ─────────────────────────────────────────────────────────


class Citation(BaseModel):
    """A single external reference record from the corpus."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    url: str
    domain: str = Field(min_length=1)
    published_at: date
    organization: Optional[str] = None
    key_finding: str = Field(min_length=1)
    industry_focus: tuple[str, ...] = ()
    confidence: Confidence
    source_type: Optional[SourceType] = None
    authors: tuple[str, ...] = ()
    methodology: Optional[str] = None
    sample_size: Optional[int] = Field(default=None, ge=0)
    geographic_scope: Optional[str] = None

    @field_validator("id", "title", "domain", "key_finding")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("industry_focus", "authors", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return () if v is None else v

    @field_validator("confidence", mode="before")
    @classmethod
    def normalize_confidence(cls, v):
        if isinstance(v, str):
            return Confidence(v)
        return v

    @property
    def year(self) -> int:
        return self.published_at.year

    @property
    def source_name(self) -> str:
        """Organization when known, otherwise the publishing domain."""
        return self.organization or self.domain
