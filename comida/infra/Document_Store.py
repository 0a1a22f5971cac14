"""JSON document store: one file per (user, collection), documents keyed by generated id.

Every mutation rewrites the collection file through a temp file and a single
rename, so a batch written with add_many lands completely or not at all.
"""
import json
import logging
import os
import shutil
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional
from uuid import uuid4

from comida.infra.paths import collection_file

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid4().hex


class DocumentStore:
    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir) if data_dir else None
        self._ready = False
        self._lock = threading.RLock()

    def open(self) -> "DocumentStore":
        if self.data_dir is None:
            raise RuntimeError("DocumentStore has no data directory")
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._ready = True
        logger.info("Document store ready at %s", self.data_dir)
        return self

    @property
    def is_ready(self) -> bool:
        return self._ready

    # -------------------- File helpers --------------------
    def _path(self, uid: str, collection: str) -> Path:
        return collection_file(uid, collection, self.data_dir)

    def _read(self, uid: str, collection: str) -> Dict[str, dict]:
        path = self._path(uid, collection)
        if not path.exists():
            return {}
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Corrupted collection file: {path}")
        return data

    def _atomic_write(self, uid: str, collection: str, documents: Dict[str, dict]) -> None:
        path = self._path(uid, collection)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{collection}_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(documents, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, str(path))
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    # -------------------- Operations --------------------
    def list(self, uid: str, collection: str) -> List[dict]:
        with self._lock:
            documents = self._read(uid, collection)
        return [{**body, "id": doc_id} for doc_id, body in documents.items()]

    def add(self, uid: str, collection: str, data: dict) -> str:
        return self.add_many(uid, collection, [data])[0]

    def add_many(self, uid: str, collection: str, items: List[dict]) -> List[str]:
        """Insert every item in one write. Returns the generated ids in input order."""
        with self._lock:
            documents = self._read(uid, collection)
            ids = []
            for data in items:
                doc_id = _new_id()
                documents[doc_id] = {k: v for k, v in dict(data).items() if k != "id"}
                ids.append(doc_id)
            self._atomic_write(uid, collection, documents)
        return ids

    def update(self, uid: str, collection: str, doc_id: str, data: dict) -> None:
        with self._lock:
            documents = self._read(uid, collection)
            if doc_id not in documents:
                raise KeyError(doc_id)
            documents[doc_id] = {k: v for k, v in dict(data).items() if k != "id"}
            self._atomic_write(uid, collection, documents)

    def delete(self, uid: str, collection: str, doc_id: str) -> None:
        with self._lock:
            documents = self._read(uid, collection)
            if documents.pop(doc_id, None) is None:
                raise KeyError(doc_id)
            self._atomic_write(uid, collection, documents)
