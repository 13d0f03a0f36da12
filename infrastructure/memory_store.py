# ============================================================================
# IN-MEMORY DOCUMENT STORE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - Process-local DocumentStore
# PURPOSE: Dict-backed store for tests and STORE_BACKEND=memory
# CREATED: 03 OCT 2026
# ============================================================================
"""
InMemoryDocumentStore

Same semantics as PostgresDocumentStore, including unique indexes, without a
database. Documents are deep-copied in and out so callers can never mutate
stored state by accident.

There are no awaits inside a method, so on a single event loop every
operation is atomic for its document, matching the store contract.
"""

import copy
import logging
from typing import Dict, List, Optional, Sequence

from core.errors import DuplicateKeyError
from infrastructure.document_store import Document, DocumentStore, Filter, matches, project

logger = logging.getLogger(__name__)


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed DocumentStore."""

    def __init__(self):
        self._collections: Dict[str, Dict[str, Document]] = {}
        self._unique: Dict[str, Sequence[str]] = {}

    def _collection(self, name: str) -> Dict[str, Document]:
        return self._collections.setdefault(name, {})

    def _check_unique(self, collection: str, doc: Document) -> None:
        for field in self._unique.get(collection, ()):
            value = doc.get(field)
            if value is None:
                continue
            for other in self._collection(collection).values():
                if other["_id"] != doc["_id"] and other.get(field) == value:
                    raise DuplicateKeyError(
                        f"Duplicate value '{value}' for {collection}.{field}",
                        field=field,
                        value=value,
                    )

    def _first(self, collection: str, filter: Filter) -> Optional[Document]:
        for doc in self._collection(collection).values():
            if matches(doc, filter):
                return doc
        return None

    # ========================================================================
    # DocumentStore
    # ========================================================================

    async def ensure_collection(self, collection: str, unique_fields: Sequence[str] = ()) -> None:
        self._collection(collection)
        self._unique[collection] = tuple(unique_fields)

    async def find_one(self, collection: str, filter: Filter) -> Optional[Document]:
        doc = self._first(collection, filter)
        return copy.deepcopy(doc) if doc is not None else None

    async def find(
        self,
        collection: str,
        filter: Optional[Filter] = None,
        projection: Optional[Sequence[str]] = None,
    ) -> List[Document]:
        return [
            project(doc, projection)
            for doc in self._collection(collection).values()
            if matches(doc, filter)
        ]

    async def insert_one(self, collection: str, doc: Document) -> Document:
        docs = self._collection(collection)
        if doc["_id"] in docs:
            raise DuplicateKeyError(f"Duplicate _id '{doc['_id']}'", field="_id", value=doc["_id"])
        self._check_unique(collection, doc)
        docs[doc["_id"]] = copy.deepcopy(doc)
        return copy.deepcopy(doc)

    async def update_one(
        self,
        collection: str,
        filter: Filter,
        set_fields: Optional[Document] = None,
        unset_fields: Sequence[str] = (),
    ) -> Optional[Document]:
        doc = self._first(collection, filter)
        if doc is None:
            return None
        updated = copy.deepcopy(doc)
        updated.update(copy.deepcopy(set_fields or {}))
        for field in unset_fields:
            updated.pop(field, None)
        self._check_unique(collection, updated)
        self._collection(collection)[doc["_id"]] = updated
        return copy.deepcopy(updated)

    async def update_many(
        self,
        collection: str,
        filter: Filter,
        set_fields: Optional[Document] = None,
        unset_fields: Sequence[str] = (),
    ) -> int:
        targets = [d for d in self._collection(collection).values() if matches(d, filter)]
        for doc in targets:
            updated = copy.deepcopy(doc)
            updated.update(copy.deepcopy(set_fields or {}))
            for field in unset_fields:
                updated.pop(field, None)
            self._check_unique(collection, updated)
            self._collection(collection)[doc["_id"]] = updated
        return len(targets)

    async def delete_one(self, collection: str, filter: Filter) -> int:
        doc = self._first(collection, filter)
        if doc is None:
            return 0
        del self._collection(collection)[doc["_id"]]
        return 1

    async def push(
        self, collection: str, doc_id: str, array_field: str, element: Document
    ) -> Optional[Document]:
        doc = self._collection(collection).get(doc_id)
        if doc is None:
            return None
        doc.setdefault(array_field, []).append(copy.deepcopy(element))
        return copy.deepcopy(doc)

    async def pull(
        self, collection: str, doc_id: str, array_field: str, element_id: str
    ) -> int:
        doc = self._collection(collection).get(doc_id)
        if doc is None:
            return 0
        before = doc.get(array_field) or []
        after = [e for e in before if e.get("_id") != element_id]
        doc[array_field] = after
        return 1 if len(after) != len(before) else 0

    async def set_array_element(
        self, collection: str, doc_id: str, array_field: str, element: Document
    ) -> Optional[Document]:
        doc = self._collection(collection).get(doc_id)
        if doc is None:
            return None
        items = doc.get(array_field) or []
        for index, item in enumerate(items):
            if item.get("_id") == element["_id"]:
                items[index] = copy.deepcopy(element)
                return copy.deepcopy(doc)
        return None

    async def close(self) -> None:
        logger.debug("In-memory store closed")


__all__ = ["InMemoryDocumentStore"]
