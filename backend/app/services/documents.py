from __future__ import annotations

import json
import logging
import re
import threading
from pathlib import Path
from typing import Any

from app.core.errors import CollectionNotFound, GiaError
from app.insights.stats import ID_FIELD

_COLLECTION_NAME = re.compile(r"^[A-Za-z0-9_-]+$")

logger = logging.getLogger("gia")


class DocumentStore:
    """Read-only document database backed by one JSON array per collection."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def _collection_path(self, name: str) -> Path:
        if not _COLLECTION_NAME.match(name):
            raise CollectionNotFound(name)
        return self.data_dir / f"{name}.json"

    def list_collections(self) -> list[str]:
        if not self.data_dir.is_dir():
            return []
        return sorted(path.stem for path in self.data_dir.glob("*.json"))

    def fetch_collection(self, name: str) -> list[dict[str, Any]]:
        path = self._collection_path(name)
        try:
            documents = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise CollectionNotFound(name) from exc
        except json.JSONDecodeError as exc:
            raise GiaError(f"Corrupted collection: {name}", details=str(exc)) from exc
        if not isinstance(documents, list):
            raise GiaError(f"Corrupted collection: {name}", details="expected a JSON array")

        records: list[dict[str, Any]] = []
        for index, document in enumerate(documents):
            if not isinstance(document, dict):
                continue
            record = dict(document)
            record.setdefault(ID_FIELD, f"{name}-{index}")
            records.append(record)
        return records

    def fetch_dataset(self, names: list[str] | None = None) -> dict[str, list[dict[str, Any]]]:
        collection_names = names if names is not None else self.list_collections()
        return {name: self.fetch_collection(name) for name in collection_names}


class DatasetSnapshot:
    """Holds the current dataset; a refresh swaps in a fully rebuilt mapping."""

    def __init__(self, store: DocumentStore, names: list[str] | None = None) -> None:
        self.store = store
        self.names = names
        self._dataset: dict[str, list[dict[str, Any]]] | None = None
        self._lock = threading.Lock()

    def refresh(self) -> dict[str, list[dict[str, Any]]]:
        dataset = self.store.fetch_dataset(self.names)
        with self._lock:
            self._dataset = dataset
        logger.info(
            "dataset refreshed collections=%s records=%s",
            len(dataset),
            sum(len(records) for records in dataset.values()),
        )
        return dataset

    def get(self) -> dict[str, list[dict[str, Any]]]:
        with self._lock:
            dataset = self._dataset
        if dataset is None:
            return self.refresh()
        return dataset
