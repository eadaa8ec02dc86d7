from __future__ import annotations
import json
import logging
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import List, Optional

from pydantic import ValidationError

from app.schemas import ReadingDocument
from settings import get_settings

logger = logging.getLogger(__name__)


class PersistenceError(RuntimeError):
    """Raised when a document could not be written to the collection."""


class DocumentCollection:
    """Append-only reading collection with optional JSON Lines persistence."""

    def __init__(self, name: str, persistence_path: Optional[Path] = None) -> None:
        self.name = name
        self._documents: List[ReadingDocument] = []
        self.persistence_path = persistence_path
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def insert_one(self, document: ReadingDocument) -> ReadingDocument:
        stored = document.model_copy(deep=True)
        with self._lock:
            try:
                self._append_to_disk(stored)
            except OSError as exc:
                raise PersistenceError(
                    f"Could not write reading {stored.id!r} to collection {self.name!r}: {exc}"
                ) from exc
            self._documents.append(stored)
        return stored.model_copy(deep=True)

    def find_recent(self, limit: Optional[int] = None) -> list[ReadingDocument]:
        """Return deep copies of the newest documents, oldest first."""

        if limit is not None and limit <= 0:
            return []
        with self._lock:
            documents = self._documents if limit is None else self._documents[-limit:]
            return [document.model_copy(deep=True) for document in documents]

    def count(self) -> int:
        with self._lock:
            return len(self._documents)

    def _append_to_disk(self, document: ReadingDocument) -> None:
        if not self.persistence_path:
            return
        line = json.dumps(document.model_dump(mode="json"), sort_keys=True)
        with self.persistence_path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            lines = self.persistence_path.read_bytes().splitlines()
        except OSError:
            lines = []

        for line_number, raw_line in enumerate(lines, start=1):
            line = raw_line.decode("utf-8", errors="replace")
            if not line.strip():
                continue
            try:
                self._documents.append(ReadingDocument.model_validate_json(line))
            except ValidationError:
                logger.warning(
                    "Skipping malformed stored reading",
                    extra={"reason": f"{self.persistence_path}:{line_number}"},
                )


@lru_cache
def build_default_collection(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> DocumentCollection:
    settings = get_settings()
    collection_name = settings.collection_name if name is None else name
    collection_path = settings.collection_persistence_path if path is None else path
    persistence = Path(collection_path) if collection_path else None
    return DocumentCollection(name=collection_name, persistence_path=persistence)
