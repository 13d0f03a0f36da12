# ============================================================================
# DOCUMENT STORE INTERFACE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - Abstract collection-oriented store
# PURPOSE: Query and array-operator primitives the repositories are built on
# CREATED: 03 OCT 2026
# ============================================================================
"""
Document Store Interface

A collection-oriented store of JSON documents keyed by `_id`. Every method
is atomic for the single document it touches; nothing spans documents.

Filters are flat dicts of dotted paths:

    {"_id": "abc"}                      equality
    {"map._id": "abc"}                  equality on an embedded field
    {"_id": {"$in": ["a", "b"]}}        membership

Array operators mirror the usual document-database semantics:

    push                 append element to doc[array_field]
    pull                 remove every element whose _id matches
    set_array_element    replace the element whose _id matches (positional
                         update); no-op when nothing matches

Implementations:
    PostgresDocumentStore  - psycopg3, one JSONB table per collection
    InMemoryDocumentStore  - process-local dicts (tests, development)
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Sequence

Document = Dict[str, Any]
Filter = Dict[str, Any]


class DocumentStore(ABC):
    """Abstract async document store."""

    @abstractmethod
    async def ensure_collection(self, collection: str, unique_fields: Sequence[str] = ()) -> None:
        """Create the collection and its unique indexes if missing."""

    @abstractmethod
    async def find_one(self, collection: str, filter: Filter) -> Optional[Document]:
        """First document matching filter, or None."""

    @abstractmethod
    async def find(
        self,
        collection: str,
        filter: Optional[Filter] = None,
        projection: Optional[Sequence[str]] = None,
    ) -> List[Document]:
        """All matching documents, insertion order, optionally projected."""

    @abstractmethod
    async def insert_one(self, collection: str, doc: Document) -> Document:
        """Insert; raises DuplicateKeyError on unique collision."""

    @abstractmethod
    async def update_one(
        self,
        collection: str,
        filter: Filter,
        set_fields: Optional[Document] = None,
        unset_fields: Sequence[str] = (),
    ) -> Optional[Document]:
        """Set/unset top-level fields on one document; returns it updated or None."""

    @abstractmethod
    async def update_many(
        self,
        collection: str,
        filter: Filter,
        set_fields: Optional[Document] = None,
        unset_fields: Sequence[str] = (),
    ) -> int:
        """Set/unset top-level fields on all matching documents; returns count."""

    @abstractmethod
    async def delete_one(self, collection: str, filter: Filter) -> int:
        """Delete first match; returns deleted count (0 or 1)."""

    @abstractmethod
    async def push(
        self, collection: str, doc_id: str, array_field: str, element: Document
    ) -> Optional[Document]:
        """Append element to doc[array_field]; returns document or None."""

    @abstractmethod
    async def pull(
        self, collection: str, doc_id: str, array_field: str, element_id: str
    ) -> int:
        """Remove elements with _id == element_id; returns modified count."""

    @abstractmethod
    async def set_array_element(
        self, collection: str, doc_id: str, array_field: str, element: Document
    ) -> Optional[Document]:
        """
        Positional update: match (_id: doc_id, array_field._id: element._id)
        and replace that element. Returns None when nothing matched.
        """

    async def close(self) -> None:
        """Release resources."""


# ============================================================================
# HELPERS (shared by implementations)
# ============================================================================

def get_path(doc: Document, path: str) -> Any:
    """Resolve a dotted path; None if any segment is missing."""
    current: Any = doc
    for part in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def matches(doc: Document, filter: Optional[Filter]) -> bool:
    """True if doc satisfies every clause of filter."""
    if not filter:
        return True
    for path, expected in filter.items():
        value = get_path(doc, path)
        if isinstance(expected, dict) and "$in" in expected:
            if value not in set(expected["$in"]):
                return False
        elif value != expected:
            return False
    return True


def project(doc: Document, projection: Optional[Sequence[str]]) -> Document:
    """Keep _id plus the named top-level fields."""
    if not projection:
        return copy.deepcopy(doc)
    keep = {"_id", *projection}
    return {k: copy.deepcopy(v) for k, v in doc.items() if k in keep}


def ids_filter(ids: Iterable[str]) -> Filter:
    return {"_id": {"$in": list(ids)}}


__all__ = [
    "Document",
    "Filter",
    "DocumentStore",
    "get_path",
    "matches",
    "project",
    "ids_filter",
]
