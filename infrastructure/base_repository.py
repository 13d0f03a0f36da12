# ============================================================================
# BASE REPOSITORY - ERROR HANDLING AND DOCUMENT CRUD
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Infrastructure - Base repository patterns
# PURPOSE: Common CRUD, array operators, error handling for entity repositories
# CREATED: 03 OCT 2026
# ============================================================================
"""
Base Repository Patterns

Base class for the four entity repositories:
- Consistent error handling with a context manager
- Model <-> document conversion
- Thin wrappers over the DocumentStore array operators

Repositories own no business rules: they never decide which parent gets
which summary. That is the consistency engine's job.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterable, List, Optional, Sequence, Type, TypeVar

from core.contracts import EntityType, NATURAL_KEYS
from core.errors import AppError, InternalError
from core.models import ENTITY_MODELS, Entity
from infrastructure.document_store import Document, DocumentStore, Filter, ids_filter

E = TypeVar("E", bound=Entity)


class BaseDocumentRepository(Generic[E]):
    """
    Document CRUD for one entity type.

    Subclasses set `entity_type` and may override the list projections.
    """

    entity_type: EntityType
    list_projection: Sequence[str] = ()

    def __init__(self, store: DocumentStore):
        self.store = store
        self.model: Type[E] = ENTITY_MODELS[self.entity_type]
        self.collection = self.entity_type.collection
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def _error_context(self, operation: str, entity_id: Optional[str] = None):
        """
        Wrap store calls: AppErrors pass through, anything else becomes
        InternalError with context logged.

        Example:
            with self._error_context("map insert", map.id):
                await self.store.insert_one(...)
        """
        try:
            yield
        except AppError:
            raise
        except Exception as e:
            error_msg = f"{operation} failed"
            if entity_id:
                error_msg += f" for {entity_id}"
            error_msg += f": {e}"
            self.logger.error(error_msg)
            raise InternalError(error_msg) from e

    def _to_model(self, doc: Optional[Document]) -> Optional[E]:
        return self.model.from_document(doc) if doc is not None else None

    # ========================================================================
    # SCHEMA
    # ========================================================================

    async def ensure_collection(self) -> None:
        with self._error_context(f"{self.collection} bootstrap"):
            await self.store.ensure_collection(self.collection, NATURAL_KEYS[self.entity_type])

    # ========================================================================
    # READ
    # ========================================================================

    async def get(self, entity_id: str) -> Optional[E]:
        with self._error_context(f"{self.collection} get", entity_id):
            return self._to_model(await self.store.find_one(self.collection, {"_id": entity_id}))

    async def find_one_by(self, **filter: Any) -> Optional[E]:
        with self._error_context(f"{self.collection} find_one"):
            return self._to_model(await self.store.find_one(self.collection, filter))

    async def get_many(self, ids: Iterable[str]) -> List[E]:
        ids = list(ids)
        if not ids:
            return []
        with self._error_context(f"{self.collection} get_many"):
            docs = await self.store.find(self.collection, ids_filter(ids))
            return [self.model.from_document(doc) for doc in docs]

    async def list_models(self, filter: Optional[Filter] = None) -> List[E]:
        with self._error_context(f"{self.collection} list"):
            docs = await self.store.find(self.collection, filter)
            return [self.model.from_document(doc) for doc in docs]

    async def list_projected(
        self,
        filter: Optional[Filter] = None,
        projection: Optional[Sequence[str]] = None,
    ) -> List[Document]:
        """Projected listing (partial documents, not models)."""
        with self._error_context(f"{self.collection} list"):
            return await self.store.find(
                self.collection, filter, projection or self.list_projection or None
            )

    # ========================================================================
    # WRITE
    # ========================================================================

    async def insert(self, entity: E) -> E:
        with self._error_context(f"{self.collection} insert", entity.id):
            doc = await self.store.insert_one(self.collection, entity.to_document())
            self.logger.info(f"Created {self.collection} {entity.id}")
            return self.model.from_document(doc)

    async def update_fields(
        self,
        entity_id: str,
        set_fields: Optional[Dict[str, Any]] = None,
        unset_fields: Sequence[str] = (),
    ) -> Optional[E]:
        """Set/unset top-level fields; None when the document vanished."""
        with self._error_context(f"{self.collection} update", entity_id):
            doc = await self.store.update_one(
                self.collection, {"_id": entity_id}, set_fields, unset_fields
            )
            return self._to_model(doc)

    async def update_many_fields(
        self,
        ids: Iterable[str],
        set_fields: Optional[Dict[str, Any]] = None,
        unset_fields: Sequence[str] = (),
    ) -> int:
        ids = list(ids)
        if not ids:
            return 0
        with self._error_context(f"{self.collection} update_many"):
            return await self.store.update_many(
                self.collection, ids_filter(ids), set_fields, unset_fields
            )

    async def update_matching(
        self,
        filter: Filter,
        set_fields: Optional[Dict[str, Any]] = None,
        unset_fields: Sequence[str] = (),
    ) -> int:
        with self._error_context(f"{self.collection} update_many"):
            return await self.store.update_many(self.collection, filter, set_fields, unset_fields)

    async def delete(self, entity_id: str) -> int:
        with self._error_context(f"{self.collection} delete", entity_id):
            count = await self.store.delete_one(self.collection, {"_id": entity_id})
            if count:
                self.logger.info(f"Deleted {self.collection} {entity_id}")
            return count

    # ========================================================================
    # EMBEDDED ARRAYS
    # ========================================================================

    async def push_child(self, parent_id: str, field: str, summary: Document) -> Optional[E]:
        with self._error_context(f"{self.collection}.{field} push", parent_id):
            return self._to_model(
                await self.store.push(self.collection, parent_id, field, summary)
            )

    async def pull_child(self, parent_id: str, field: str, child_id: str) -> int:
        with self._error_context(f"{self.collection}.{field} pull", parent_id):
            return await self.store.pull(self.collection, parent_id, field, child_id)

    async def set_child(self, parent_id: str, field: str, summary: Document) -> Optional[E]:
        """Positional update; None if the parent does not hold that child."""
        with self._error_context(f"{self.collection}.{field} set", parent_id):
            return self._to_model(
                await self.store.set_array_element(self.collection, parent_id, field, summary)
            )


__all__ = ["BaseDocumentRepository"]
