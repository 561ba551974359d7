"""Shared test fixtures for nbtext tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from nbtext.models import Document

# Each class has distinctive vocabulary to make classification feasible;
# a few words ("report", "week", "new") are shared by both.
FINANCE_DOCS = [
    "The stock market rallied this week as investors bought shares in banks.",
    "Investors watched the stock market closely after the interest rate decision.",
    "Bond prices fell and the stock market slipped as interest rate fears grew.",
    "The central bank raised the interest rate again, and investors sold shares.",
    "Quarterly earnings beat forecasts, lifting shares across the stock market.",
    "Trading volume on the stock market hit a new record this week.",
    "Investors moved money into bonds as shares lost value in heavy trading.",
    "The report showed bank lending grew while the interest rate held steady.",
    "Share prices of tech firms climbed on the stock market after strong earnings.",
    "Currency traders expect the interest rate to rise, pushing bond prices lower.",
    "A new report on earnings sent investors back to bank shares.",
    "Heavy trading in shares and bonds kept the stock market volatile.",
]

HEALTH_DOCS = [
    "The hospital opened a new clinic to improve patient care this week.",
    "Doctors at the hospital started a clinical trial of the new treatment.",
    "Patient care improved after the clinic hired more nurses and doctors.",
    "The clinical trial showed the treatment reduced symptoms in most patients.",
    "Nurses reported that hospital wards were full of flu patients.",
    "A report on patient care praised doctors at the rural clinic.",
    "The new vaccine treatment entered a clinical trial at the hospital.",
    "Doctors warned that the flu season would strain hospital beds.",
    "The clinic offers free treatment and patient care for children.",
    "Researchers at the hospital published results of the clinical trial.",
    "Patients waited hours to see doctors at the busy clinic this week.",
    "Nurses and doctors praised the new treatment for improving patient care.",
]


@pytest.fixture
def documents() -> list[Document]:
    """The 24-document, two-class corpus (12 finance, 12 health)."""
    docs = [
        Document(doc_id=f"fin-{i:02d}", text=text, label="finance")
        for i, text in enumerate(FINANCE_DOCS)
    ]
    docs += [
        Document(doc_id=f"hea-{i:02d}", text=text, label="health")
        for i, text in enumerate(HEALTH_DOCS)
    ]
    return docs


@pytest.fixture
def labels(documents: list[Document]) -> list[str]:
    return [d.label for d in documents]


@pytest.fixture
def token_sequences() -> list[list[str]]:
    """Small hand-built token sequences for matrix tests."""
    return [
        ["apple", "banana", "apple"],
        ["banana", "cherry"],
        ["apple", "cherry", "date"],
        ["elderberry"],
    ]


@pytest.fixture
def corpus_file(tmp_path: Path, documents: list[Document]) -> Path:
    """The shared corpus written as a JSON file."""
    path = tmp_path / "corpus.json"
    path.write_text(
        json.dumps([d.to_dict() for d in documents], indent=2), encoding="utf-8"
    )
    return path
