"""End-to-end tests for the enrichment call contract."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from citekit.citations import enrich_document, enrich_document_safely
from citekit.citations.models import QualityMetrics
from citekit.core.options import CitationStyle, EnrichmentOptions
from citekit.corpus.models import Citation
from citekit.corpus.store import (
    CORPUS_PATH_ENV,
    CitationStore,
    CorpusLoadError,
    reset_default_store,
)

NOW = datetime(2024, 12, 1, tzinfo=timezone.utc)

CONTENT = (
    "# AI Support Platform\n"
    "AI adoption accelerates in support teams. Budgets are shifting.\n"
    "\n"
    "## Recommendation\n"
    "Proceed with the pilot."
)


def _cit(cid, **kw):
    defaults = dict(
        id=cid,
        title=f"Report {cid}",
        url=f"https://{cid.lower()}.example.com",
        domain=f"{cid.lower()}.example.com",
        published_at="2024-01-01",
        organization=f"Org {cid}",
        key_finding=f"Finding for {cid}",
        industry_focus=["saas"],
        confidence="High",
    )
    defaults.update(kw)
    return Citation.model_validate(defaults)


@pytest.fixture(autouse=True)
def _fresh_default_store():
    reset_default_store()
    yield
    reset_default_store()


# ── Concrete Scenarios ───────────────────────────────────────────────


def test_single_citation_scenario():
    c1 = _cit(
        "C1",
        domain="mckinsey.com",
        organization="McKinsey & Company",
        key_finding="AI adoption accelerates",
    )
    store = CitationStore([c1])
    opts = EnrichmentOptions(min_citations=1, industry="saas")

    result = enrich_document(CONTENT, ["ai"], opts, store=store, now=NOW)

    assert [c.id for c in result.citations] == ["C1"]
    assert result.citation_count == 1
    assert result.metrics.total_citations == 1
    assert result.metrics.credibility_score == 100
    assert result.sources == ["McKinsey & Company"]
    assert "support teams [C1]. Budgets" in result.content
    assert result.content.endswith("\n\n## References\n\n" + (
        "[C1] Report C1. McKinsey & Company (2024). AI adoption accelerates. "
        "Available: https://c1.example.com\n\n"
    ))


def test_no_match_appends_header_only():
    store = CitationStore([_cit("C1")])
    result = enrich_document(CONTENT, ["blockchain"], store=store, now=NOW)

    assert result.citation_count == 0
    assert result.sources == []
    assert result.metrics == QualityMetrics()
    assert result.content == CONTENT + "\n\n## References\n\n"


def test_pool_larger_than_minimum_returns_whole_pool():
    store = CitationStore([_cit(f"P{i}", title="AI report") for i in range(5)])
    opts = EnrichmentOptions(min_citations=3)
    result = enrich_document(CONTENT, ["ai"], opts, store=store, now=NOW)
    assert result.citation_count == 5


def test_pool_smaller_than_minimum():
    store = CitationStore([_cit("A", title="AI report"), _cit("B", title="AI report")])
    opts = EnrichmentOptions(min_citations=3)
    result = enrich_document(CONTENT, ["ai"], opts, store=store, now=NOW)
    assert result.citation_count == 2


def test_sources_in_selection_order():
    store = CitationStore([
        _cit("M", title="AI report", confidence="Medium", organization="Mid"),
        _cit("H", title="AI report", confidence="High", organization="Top"),
        _cit("N", title="AI report", confidence="High", organization=None,
             domain="nameless.io"),
    ])
    result = enrich_document(CONTENT, ["ai"], store=store, now=NOW)
    assert result.sources == ["Top", "nameless.io", "Mid"]


# ── Options ──────────────────────────────────────────────────────────


def test_without_bibliography():
    store = CitationStore([_cit("C1", key_finding="AI adoption accelerates")])
    opts = EnrichmentOptions(include_bibliography=False)
    result = enrich_document(CONTENT, ["ai"], opts, store=store, now=NOW)
    assert "## References" not in result.content
    assert "[C1]" in result.content


def test_citations_disabled():
    store = CitationStore([_cit("C1", key_finding="AI adoption accelerates")])
    opts = EnrichmentOptions(include_citations=False)
    result = enrich_document(CONTENT, ["ai"], opts, store=store, now=NOW)
    assert result.content == CONTENT
    assert result.citation_count == 0


def test_minimum_confidence_option():
    store = CitationStore([
        _cit("H", title="AI report", confidence="High"),
        _cit("L", title="AI report", confidence="Low"),
    ])
    opts = EnrichmentOptions(minimum_confidence="medium")
    result = enrich_document(CONTENT, ["ai"], opts, store=store, now=NOW)
    assert [c.id for c in result.citations] == ["H"]


def test_max_age_option_uses_now():
    store = CitationStore([
        _cit("NEW", title="AI report", published_at="2024-10-01"),
        _cit("OLD", title="AI report", published_at="2022-01-01"),
    ])
    opts = EnrichmentOptions(max_citation_age_months=12)
    result = enrich_document(CONTENT, ["ai"], opts, store=store, now=NOW)
    assert [c.id for c in result.citations] == ["NEW"]


def test_apa_style_result():
    store = CitationStore([_cit("C1", key_finding="AI adoption accelerates")])
    opts = EnrichmentOptions(style="apa")
    result = enrich_document(CONTENT, ["ai"], opts, store=store, now=NOW)
    assert result.style is CitationStyle.APA
    assert "(Org C1, 2024)" in result.content
    assert "Retrieved from https://c1.example.com" in result.content


def test_repeated_calls_are_independent():
    store = CitationStore([_cit("C1", key_finding="AI adoption accelerates")])
    first = enrich_document(CONTENT, ["ai"], store=store, now=NOW)
    second = enrich_document(CONTENT, ["ai"], store=store, now=NOW)
    assert first == second
    assert first.content.count("[C1]") == 2  # inline marker + bibliography entry


# ── Default Store & Degraded Mode ────────────────────────────────────


def test_uses_bundled_corpus_by_default(monkeypatch):
    monkeypatch.delenv(CORPUS_PATH_ENV, raising=False)
    result = enrich_document(
        CONTENT, ["customer", "automation", "ai"], EnrichmentOptions(industry="saas"),
        now=NOW,
    )
    assert result.citation_count > 0
    assert "## References" in result.content
    assert result.metrics.total_citations == result.citation_count


def test_missing_corpus_raises(monkeypatch, tmp_path):
    monkeypatch.setenv(CORPUS_PATH_ENV, str(tmp_path / "missing.json"))
    with pytest.raises(CorpusLoadError):
        enrich_document(CONTENT, ["ai"], now=NOW)


def test_missing_corpus_degrades_gracefully(monkeypatch, tmp_path, caplog):
    monkeypatch.setenv(CORPUS_PATH_ENV, str(tmp_path / "missing.json"))
    with caplog.at_level(logging.WARNING):
        result = enrich_document_safely(CONTENT, ["ai"], now=NOW)
    assert result.content == CONTENT
    assert result.citation_count == 0
    assert result.metrics == QualityMetrics()
    assert "without citations" in caplog.text


def test_failing_call_does_not_affect_concurrent_calls(monkeypatch, tmp_path):
    monkeypatch.setenv(CORPUS_PATH_ENV, str(tmp_path / "missing.json"))
    store = CitationStore([_cit("C1", key_finding="AI adoption accelerates")])
    expected = enrich_document(CONTENT, ["ai"], store=store, now=NOW)
    rounds = 20
    barrier = threading.Barrier(2)

    def degraded():
        barrier.wait()
        return enrich_document_safely(CONTENT, ["ai"], now=NOW)

    def healthy():
        barrier.wait()
        return enrich_document(CONTENT, ["ai"], store=store, now=NOW)

    with ThreadPoolExecutor(max_workers=2) as pool:
        pairs = [(pool.submit(degraded), pool.submit(healthy)) for _ in range(rounds)]
        results = [(d.result(timeout=10), h.result(timeout=10)) for d, h in pairs]

    for degraded_result, healthy_result in results:
        assert degraded_result.content == CONTENT
        assert degraded_result.citation_count == 0
        assert healthy_result == expected
        assert healthy_result.citation_count == 1
