"""Citation Store: loads the static corpus once and serves it read-only."""

import json
import logging
import os
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, NamedTuple

import yaml
from pydantic import ValidationError

from citekit.corpus.models import Citation

logger = logging.getLogger(__name__)

DEFAULT_CORPUS_PATH = (
    Path(__file__).resolve().parent.parent.parent / "corpus" / "business_citations.json"
)
CORPUS_PATH_ENV = "CITEKIT_CORPUS_PATH"


class CorpusLoadError(RuntimeError):
    """Corpus source is missing or cannot be parsed."""


# ── CitationStore ────────────────────────────────────────────────────


class _Snapshot(NamedTuple):
    citations: tuple[Citation, ...]
    by_id: Mapping[str, Citation]


def _snapshot(citations) -> _Snapshot:
    citations = tuple(citations)
    return _Snapshot(citations, MappingProxyType({c.id: c for c in citations}))


class CitationStore:
    """Immutable, ordered collection of Citation records."""

    def __init__(self, citations: list[Citation], source: Path | None = None):
        self.source = source
        self._state = _snapshot(citations)

    @classmethod
    def load(cls, source: str | Path) -> "CitationStore":
        """Parse a JSON or YAML corpus file into a new store."""
        path = Path(source)
        return cls(_read_corpus(path), source=path)

    def reload(self) -> None:
        """Re-read the original source and swap in the new records."""
        if self.source is None:
            raise CorpusLoadError("Store was not loaded from a file; nothing to reload")
        # Records and id index are replaced together in one assignment
        self._state = _snapshot(_read_corpus(self.source))

    def all(self) -> tuple[Citation, ...]:
        """All citations, in source order."""
        return self._state.citations

    def get(self, citation_id: str) -> Citation | None:
        return self._state.by_id.get(citation_id)

    def __len__(self) -> int:
        return len(self._state.citations)

    def __iter__(self) -> Iterator[Citation]:
        return iter(self._state.citations)


def load_citation_store(path: str | Path) -> CitationStore:
    """Load a corpus file from disk and return a populated store."""
    return CitationStore.load(path)


# ── Process-wide default ─────────────────────────────────────────────

_default_store: CitationStore | None = None
_default_lock = threading.Lock()


def get_default_store() -> CitationStore:
    """Lazily load the bundled corpus (or $CITEKIT_CORPUS_PATH) once per process."""
    global _default_store
    if _default_store is None:
        with _default_lock:
            if _default_store is None:
                path = os.environ.get(CORPUS_PATH_ENV) or DEFAULT_CORPUS_PATH
                _default_store = CitationStore.load(path)
    return _default_store


def reset_default_store() -> None:
    """Drop the cached default store so the next access reloads it."""
    global _default_store
    with _default_lock:
        _default_store = None


# ── Parsing ──────────────────────────────────────────────────────────


def _read_corpus(path: Path) -> list[Citation]:
    if not path.is_file():
        raise CorpusLoadError(f"Citation corpus not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in (".yaml", ".yml"):
            raw = yaml.safe_load(text)
        else:
            raw = json.loads(text)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise CorpusLoadError(f"Could not parse citation corpus {path}: {exc}") from exc

    if isinstance(raw, dict):
        raw = raw.get("citations")
    if not isinstance(raw, list):
        raise CorpusLoadError(
            f"Citation corpus {path} must be a list of records "
            "or a mapping with a 'citations' list"
        )

    citations = _parse_records(raw)
    logger.info("Loaded %d/%d citations from %s", len(citations), len(raw), path)
    return citations


def _parse_records(records: list) -> list[Citation]:
    """Validate each record, skipping malformed ones and duplicate ids."""
    citations: list[Citation] = []
    seen: set[str] = set()

    for i, rec in enumerate(records):
        if not isinstance(rec, dict):
            logger.warning("Skipping corpus record %d: not a mapping", i)
            continue
        try:
            citation = Citation.model_validate(rec)
        except ValidationError as exc:
            logger.warning(
                "Skipping corpus record %d (%s): %d validation error(s): %s",
                i,
                rec.get("id", "<no id>"),
                exc.error_count(),
                "; ".join(
                    f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}"
                    for e in exc.errors()
                ),
            )
            continue

        if citation.id in seen:
            logger.warning("Skipping corpus record %d: duplicate id %r", i, citation.id)
            continue
        seen.add(citation.id)
        citations.append(citation)

    return citations
