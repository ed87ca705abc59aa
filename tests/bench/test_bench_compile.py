"""Compile benchmarks for urlpat.

Measures pattern construction cost: path regex assembly, query spec parsing,
and router construction over many patterns.

Run: uv run pytest tests/bench/test_bench_compile.py --benchmark-only
"""

from __future__ import annotations

from urlpat import Router, UrlPattern

# ── Patterns ─────────────────────────────────────────────────────────────────


def test_bench_compile_static(benchmark):
    benchmark(UrlPattern, "/api/v1/users")


def test_bench_compile_captures(benchmark):
    benchmark(UrlPattern, "/api/:version{v1|v2}/users/:id/posts/:slug")


def test_bench_compile_wildcards(benchmark):
    benchmark(UrlPattern, "/static/**/assets/*/file")


def test_bench_compile_query(benchmark):
    benchmark(UrlPattern, "/search?q&page&sort{asc|desc}&tag[]&lang{en|fr|de}[]")


def test_bench_compile_origin(benchmark):
    benchmark(UrlPattern, "https://example.com:8443/api/:id")


# ── Router ───────────────────────────────────────────────────────────────────


def _routes(n: int) -> dict[str, str]:
    return {f"route_{i}": f"/section_{i}/:id?page" for i in range(n)}


def test_bench_compile_router_10(benchmark):
    benchmark(Router, _routes(10))


def test_bench_compile_router_100(benchmark):
    benchmark(Router, _routes(100))
