"""Conformance tests: YAML fixtures from tests/fixtures/ run through UrlPattern.

Pattern fixtures carry a pattern and match cases; error fixtures
(``*_errors.yaml``) carry a pattern and the token compilation must reject.

Run with: uv run pytest tests/test_conformance.py -v
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import yaml

from urlpat import PatternSyntaxError, UrlPattern

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"


@dataclass
class FixtureCase:
    """A single match case from a pattern fixture."""

    fixture_name: str
    case_name: str
    pattern: str
    url: str
    expect: dict[str, Any] | None


@dataclass
class ErrorFixture:
    """A pattern that must fail to compile."""

    name: str
    pattern: str
    token: str


def load_fixture_docs(glob: str = "*.yaml") -> list[dict[str, Any]]:
    """Load every YAML document from fixture files matching *glob*."""
    docs: list[dict[str, Any]] = []
    if not FIXTURE_DIR.exists():
        return docs

    for yaml_file in sorted(FIXTURE_DIR.glob(glob)):
        with yaml_file.open(encoding="utf-8") as f:
            for doc in yaml.safe_load_all(f):
                if doc is None:
                    continue
                doc["_source"] = yaml_file.name
                docs.append(doc)
    return docs


def load_match_cases() -> list[FixtureCase]:
    """Flatten pattern fixtures into one FixtureCase per match case."""
    cases: list[FixtureCase] = []
    for doc in load_fixture_docs():
        if "cases" not in doc:
            continue
        for case in doc["cases"]:
            cases.append(
                FixtureCase(
                    fixture_name=f"{doc['_source']}::{doc['name']}",
                    case_name=case["name"],
                    pattern=doc["pattern"],
                    url=case["url"],
                    expect=case["expect"],
                )
            )
    return cases


def load_error_fixtures() -> list[ErrorFixture]:
    """Load the fixtures describing patterns that must not compile."""
    return [
        ErrorFixture(name=doc["name"], pattern=doc["pattern"], token=doc["token"])
        for doc in load_fixture_docs("*_errors.yaml")
    ]


# ─── Tests ───────────────────────────────────────────────────────────────────

_match_cases = load_match_cases()
_error_fixtures = load_error_fixtures()


def _case_id(case: FixtureCase) -> str:
    return f"{case.fixture_name}::{case.case_name}"


@pytest.mark.parametrize("case", _match_cases, ids=[_case_id(c) for c in _match_cases])
def test_fixture_case(case: FixtureCase) -> None:
    pattern = UrlPattern(case.pattern)
    result = pattern.match(case.url)

    if case.expect is None:
        assert result is None, (
            f"{_case_id(case)}: expected no match for {case.url!r}, got {result!r}"
        )
        return

    assert result is not None, f"{_case_id(case)}: expected a match for {case.url!r}"
    assert result.params == case.expect["params"]
    assert result.search == case.expect["search"]


@pytest.mark.parametrize("case", _match_cases, ids=[_case_id(c) for c in _match_cases])
def test_fixture_case_is_deterministic(case: FixtureCase) -> None:
    first = UrlPattern(case.pattern)
    second = UrlPattern(case.pattern)
    assert first.match(case.url) == second.match(case.url) == first.match(case.url)


@pytest.mark.parametrize("fixture", _error_fixtures, ids=[f.name for f in _error_fixtures])
def test_error_fixture(fixture: ErrorFixture) -> None:
    with pytest.raises(PatternSyntaxError) as exc_info:
        UrlPattern(fixture.pattern)
    assert exc_info.value.pattern == fixture.pattern
    assert exc_info.value.token == fixture.token


def test_fixtures_were_loaded() -> None:
    assert len(_match_cases) > 50
    assert len(_error_fixtures) == 8
