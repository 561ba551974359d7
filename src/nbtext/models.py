"""Data models for labeled documents."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Document:
    """A single labeled document, immutable after ingestion."""

    doc_id: str
    text: str
    label: str

    def to_dict(self) -> dict:
        return {"id": self.doc_id, "text": self.text, "label": self.label}


@dataclass(frozen=True)
class TokenizedDocument:
    """A document after tokenization: identifier, tokens, label."""

    doc_id: str
    tokens: tuple[str, ...]
    label: str

    @property
    def is_empty(self) -> bool:
        return not self.tokens
