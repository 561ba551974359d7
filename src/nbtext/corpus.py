"""Read labeled corpora from JSON, JSON Lines or CSV files.

Every record needs ``id``, ``text`` and ``label`` fields. Text extraction and
boilerplate removal happen before this point.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path

from .models import Document

_REQUIRED_FIELDS = ("id", "text", "label")


def _to_document(record: object, source: Path, position: int) -> Document:
    if not isinstance(record, dict):
        raise ValueError(f"{source}: record {position} is not an object")
    missing = [name for name in _REQUIRED_FIELDS if name not in record]
    if missing:
        raise ValueError(f"{source}: record {position} is missing fields {missing}")
    return Document(
        doc_id=str(record["id"]),
        text=str(record["text"] or ""),
        label=str(record["label"]),
    )


def load_corpus(path: str | Path) -> list[Document]:
    """Load documents from ``.json``, ``.jsonl`` or ``.csv``.

    Args:
        path: Corpus file.

    Returns:
        Documents in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: For unsupported formats, malformed records, or
            duplicate document identifiers.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        with open(path, "r", encoding="utf-8") as f:
            records = json.load(f)
        if not isinstance(records, list):
            raise ValueError(f"{path} must contain a JSON array of documents")
    elif suffix == ".jsonl":
        with open(path, "r", encoding="utf-8") as f:
            records = [json.loads(line) for line in f if line.strip()]
    elif suffix == ".csv":
        with open(path, "r", encoding="utf-8", newline="") as f:
            records = list(csv.DictReader(f))
    else:
        raise ValueError(
            f"Unsupported corpus format: '{suffix}'. Supported: .json, .jsonl, .csv"
        )

    documents = [_to_document(r, path, i) for i, r in enumerate(records)]

    seen: set[str] = set()
    for doc in documents:
        if doc.doc_id in seen:
            raise ValueError(f"{path}: duplicate document id {doc.doc_id!r}")
        seen.add(doc.doc_id)
    return documents
