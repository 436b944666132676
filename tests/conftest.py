"""Conformance fixture loader for arrayasserts.

Loads YAML fixtures from tests/fixtures/. Each document names one matcher
(built in test_conformance.py) and lists cases to evaluate against it.
Tests that request ``conformance_case`` are parametrized over them.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import yaml

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"


@dataclass
class ConformanceCase:
    """A single evaluation case from a conformance fixture."""

    fixture_name: str
    case_name: str
    matcher: str
    actual: Any
    expect: bool
    reason: str | None


# ─── Fixture loading ────────────────────────────────────────────────────────


def load_documents() -> list[dict[str, Any]]:
    """Load every YAML document under FIXTURE_DIR, tagged with its file name."""
    docs: list[dict[str, Any]] = []
    for yaml_file in sorted(FIXTURE_DIR.glob("*.yaml")):
        with yaml_file.open() as f:
            for doc in yaml.safe_load_all(f):
                if doc is None:
                    continue
                doc["_source"] = yaml_file.stem
                docs.append(doc)
    return docs


def load_conformance_cases() -> list[ConformanceCase]:
    cases: list[ConformanceCase] = []
    for doc in load_documents():
        for case in doc["cases"]:
            cases.append(
                ConformanceCase(
                    fixture_name=f"{doc['_source']}::{doc['name']}",
                    case_name=case["name"],
                    matcher=doc["matcher"],
                    actual=case["actual"],
                    expect=case["expect"],
                    reason=case.get("reason"),
                )
            )
    return cases


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    if "conformance_case" in metafunc.fixturenames:
        cases = load_conformance_cases()
        metafunc.parametrize(
            "conformance_case",
            cases,
            ids=[f"{c.fixture_name}::{c.case_name}" for c in cases],
        )
