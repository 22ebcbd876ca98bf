import asyncio

from refscan.cache import ExpansionCache
from refscan.diagnostics import RecordingDiagnostics
from refscan.engine import ReferenceExplorer
from refscan.models import MatchHit


def _run(coro):
    return asyncio.run(coro)


def test_cache_get_put_clear():
    cache = ExpansionCache()
    hit = MatchHit(path="a", line=0, column=0, length=1, preview="a")

    assert cache.get("a") is None
    cache.put("a", (hit,))
    assert cache.get("a") == (hit,)
    assert "a" in cache
    assert len(cache) == 1
    assert cache.queries() == ["a"]
    assert cache.clear() == 1
    assert cache.get("a") is None


def test_second_expansion_is_served_from_cache(pricing_corpus):
    explorer = ReferenceExplorer(pricing_corpus, diagnostics=RecordingDiagnostics(), match_mode="word")

    async def scenario():
        first, first_cached = await explorer.expand("calculateDiscount")
        (pricing_corpus / "src" / "b.ts").write_text("calculateDiscount(1);\n", encoding="utf-8")
        second, second_cached = await explorer.expand("calculateDiscount")
        return first, first_cached, second, second_cached

    first, first_cached, second, second_cached = _run(scenario())

    assert not first_cached
    assert second_cached
    # No invalidation: the new file is not picked up until the cache is cleared.
    assert second == first
    assert len(first) == 2

    explorer.cache.clear()
    third, third_cached = _run(explorer.expand("calculateDiscount"))
    assert not third_cached
    assert len(third) == 3


def test_root_search_does_not_populate_cache(pricing_corpus):
    explorer = ReferenceExplorer(pricing_corpus, diagnostics=RecordingDiagnostics())

    outcome = _run(explorer.search("totalPrice"))

    assert len(outcome.hits) == 2
    assert len(explorer.cache) == 0


def test_truncated_results_are_not_cached(tmp_path):
    for i in range(200):
        (tmp_path / f"f{i:03d}.txt").write_text("needle\n", encoding="utf-8")

    async def slow(batch):
        await asyncio.sleep(0.1)

    explorer = ReferenceExplorer(tmp_path, diagnostics=RecordingDiagnostics(), max_search_ms=400)
    hits, cached = _run(explorer.expand("needle", on_batch=slow))

    assert not cached
    assert 0 < len(hits) < 200
    assert "needle" not in explorer.cache


def test_failed_enumeration_is_not_cached(tmp_path):
    explorer = ReferenceExplorer(tmp_path / "missing", diagnostics=RecordingDiagnostics())

    hits, cached = _run(explorer.expand("anything"))

    assert hits == ()
    assert not cached
    assert len(explorer.cache) == 0


def test_expand_and_summarize_reports_inline_symbols(pricing_corpus):
    explorer = ReferenceExplorer(pricing_corpus, diagnostics=RecordingDiagnostics(), match_mode="word")

    summary = _run(explorer.expand_and_summarize("calculateDiscount"))
    assert any(
        {"totalPrice", "discountedPrice"} <= set(item["inline_symbols"]) for item in summary
    )

    assignments = _run(explorer.expand_and_summarize("discountedPrice"))
    assert any("discountedPrice = calculateDiscount" in item["label"] for item in assignments)
    assert all(item["label"].startswith("src/a.ts:") for item in assignments)
