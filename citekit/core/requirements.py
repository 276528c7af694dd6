"""Citation requirements per document type: YAML parser and Pydantic models."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from citekit.corpus.models import Confidence, SourceType

DEFAULT_REQUIREMENTS_PATH = (
    Path(__file__).resolve().parent.parent.parent / "citation_requirements.yaml"
)


# ── Requirements ─────────────────────────────────────────────────────


class CitationRequirements(BaseModel):
    """Quality bar a document type's citations should clear."""

    document_type: str
    minimum_citations: int = Field(ge=1, le=20)
    required_source_types: list[SourceType] = Field(default_factory=list)
    minimum_confidence_level: Confidence = Confidence.MEDIUM
    industry_specific: bool = False
    recency_requirement_months: int = Field(ge=6, le=60)

    @field_validator("minimum_confidence_level", mode="before")
    @classmethod
    def lenient_confidence(cls, v):
        if isinstance(v, str):
            return Confidence(v)
        return v


class RequirementsTable(BaseModel):
    """All known document types plus the fallback for unknown ones."""

    default: CitationRequirements
    documents: dict[str, CitationRequirements] = Field(default_factory=dict)

    @field_validator("documents")
    @classmethod
    def keys_match_types(
        cls, v: dict[str, CitationRequirements]
    ) -> dict[str, CitationRequirements]:
        for key, req in v.items():
            if key != req.document_type:
                raise ValueError(
                    f"Key {key!r} does not match document_type {req.document_type!r}"
                )
        return v

    def for_document(self, document_type: Optional[str]) -> CitationRequirements:
        """Requirements for a document type; unknown types get the default."""
        if document_type and document_type in self.documents:
            return self.documents[document_type]
        return self.default.model_copy(
            update={"document_type": document_type or self.default.document_type}
        )


# ── Loading ──────────────────────────────────────────────────────────


def load_citation_requirements(path: str | Path | None = None) -> RequirementsTable:
    """Load the YAML requirements table from disk and return a validated model."""
    path = Path(path) if path else DEFAULT_REQUIREMENTS_PATH
    with open(path) as f:
        raw = yaml.safe_load(f)

    documents = {}
    for doc_type, body in (raw.get("documents") or {}).items():
        documents[doc_type] = {"document_type": doc_type, **body}
    default = {"document_type": "default", **raw["default"]}

    return RequirementsTable.model_validate({"default": default, "documents": documents})
