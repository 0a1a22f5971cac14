"""Per-user collection repository on top of the DocumentStore.

Every call checks the store is open (StorageUnavailable otherwise), runs the
operation, and wraps any underlying failure into PersistenceFailure with a
Spanish message for the UI. The original exception stays as __cause__.
"""
import logging
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from comida.domain.errors import PersistenceFailure, StorageUnavailable
from comida.infra.Document_Store import DocumentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UserCollectionRepository(Generic[T]):
    collection: str = ""
    messages: Dict[str, str] = {}

    def __init__(self, store: Optional[DocumentStore]):
        self._store = store

    # Subclasses map between stored documents and entities
    def _from_doc(self, doc: dict) -> T:
        raise NotImplementedError

    def _to_doc(self, entity: T) -> dict:
        raise NotImplementedError

    def _require_store(self) -> DocumentStore:
        if self._store is None or not self._store.is_ready:
            raise StorageUnavailable(f"Document store not initialized ({self.collection})")
        return self._store

    def _run(self, operation: str, fn: Callable[[DocumentStore], T]):
        store = self._require_store()
        try:
            return fn(store)
        except Exception as e:
            logger.exception("Failed to %s %s", operation, self.collection)
            raise PersistenceFailure(
                f"{operation} on {self.collection} failed: {e}",
                user_message=self.messages.get(operation),
            ) from e

    def list_all(self, uid: str) -> List[T]:
        return self._run("list", lambda store: [self._from_doc(d) for d in store.list(uid, self.collection)])

    def add(self, uid: str, entity: T) -> T:
        doc_id = self._run("add", lambda store: store.add(uid, self.collection, self._to_doc(entity)))
        return entity.model_copy(update={"id": doc_id})

    def update(self, uid: str, entity: T) -> T:
        self._run("update", lambda store: store.update(uid, self.collection, entity.id, self._to_doc(entity)))
        return entity

    def delete(self, uid: str, doc_id: str) -> None:
        self._run("delete", lambda store: store.delete(uid, self.collection, doc_id))
