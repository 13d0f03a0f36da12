# ============================================================================
# RELATIONSHIP CONSISTENCY ENGINE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core service - Keeps denormalized summaries in sync
# PURPOSE: Reconcile embedded summaries after every create/update/delete
# CREATED: 05 OCT 2026
# ============================================================================
"""
ConsistencyEngine

Every relation in core.relations.RELATIONS is mirrored in both directions:
the parent holds child summaries in an array, the child holds the parent's
summary as a reference. The engine is the only code that writes those
embedded copies. It is driven entirely by the relation list and has no
per-pair code.

There is no cross-collection transaction. Each step is one atomic
single-document (or multi-document set) write, and steps run in a fixed
order. If a sequence is interrupted, the next mutation of the same entity
or `repair_drift()` restores the invariants.

Operations:
    reconcile_parent_change   child moved between parents (4 cases)
    guard_deletable           refuse deletion while children are embedded
    refresh_summary           republish an entity's summary to all holders
    assign_children           parent-driven membership (Location.chokePoints)
    detach_from_all_parents   pull an entity from every parent array
    upsert_by_natural_key     bulk update-existing-then-create-new
    repair_drift              re-derive every parent array from child refs

Usage:
    engine = ConsistencyEngine(registry)
    await engine.reconcile_parent_change(MAP_CHOKE_POINTS, old_id, new_id, cp.summary())
"""

from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence

from core.contracts import EntityType
from core.errors import HasDependentsError, NotFoundError, ValidationFailureError
from core.logging import get_logger
from core.models import Entity
from core.relations import RELATIONS, Relation, relations_as_child, relations_as_parent
from repositories.registry import RepositoryRegistry

logger = get_logger(__name__)

Row = Dict[str, Any]


class ConsistencyEngine:
    """Maintains the summary-mirror invariants over a RepositoryRegistry."""

    def __init__(self, registry: RepositoryRegistry, relations: Sequence[Relation] = RELATIONS):
        self.registry = registry
        self.relations = tuple(relations)

    # ================================================================
    # PARENT CHANGE
    # ================================================================

    async def reconcile_parent_change(
        self,
        relation: Relation,
        old_parent_id: Optional[str],
        new_parent_id: Optional[str],
        child_summary: Dict[str, Any],
    ) -> None:
        """
        Bring the parent arrays in line with a child's parent reference.

        | old  | new  | action                                    |
        |------|------|-------------------------------------------|
        | None | None | nothing                                   |
        | None | P    | push summary onto P                       |
        | P    | None | pull child from P                         |
        | P    | P    | positional update of the element in P     |
        | P    | Q    | pull from P, then push onto Q             |
        """
        parents = self.registry.for_type(relation.parent)
        field = relation.children_field
        child_id = child_summary["_id"]

        if old_parent_id == new_parent_id:
            if new_parent_id is None:
                return
            updated = await parents.set_child(new_parent_id, field, child_summary)
            if updated is None:
                logger.debug(
                    f"{relation.name}: {child_id} not held by {new_parent_id}, nothing to update"
                )
            return

        if old_parent_id is not None:
            await parents.pull_child(old_parent_id, field, child_id)
            logger.debug(f"{relation.name}: pulled {child_id} from {old_parent_id}")

        if new_parent_id is not None:
            await parents.push_child(new_parent_id, field, child_summary)
            logger.debug(f"{relation.name}: pushed {child_id} onto {new_parent_id}")

    # ================================================================
    # DELETION
    # ================================================================

    def guard_deletable(self, entity_type: EntityType, entity: Entity) -> None:
        """Raise HasDependentsError if any children array is non-empty. No writes."""
        for relation in self._as_parent(entity_type):
            if entity.children(relation.children_field):
                raise HasDependentsError(
                    f"{entity_type.label} '{entity.id}' still has "
                    f"{relation.children_field}; remove them first",
                    code=f"error.delete.{entity_type.label}_{relation.child.label}_exists",
                )

    async def detach_from_all_parents(self, entity_type: EntityType, entity: Entity) -> int:
        """Pull the entity from every parent array that references it."""
        pulled = 0
        for relation in self._as_child(entity_type):
            parent_id = entity.ref_id(relation.parent_field)
            if parent_id is None:
                continue
            parents = self.registry.for_type(relation.parent)
            pulled += await parents.pull_child(parent_id, relation.children_field, entity.id)
        if pulled:
            logger.debug(f"Detached {entity_type.label} {entity.id} from {pulled} parent(s)")
        return pulled

    # ================================================================
    # SUMMARY FAN-OUT
    # ================================================================

    async def refresh_summary(
        self, entity_type: EntityType, entity: Entity, parents: bool = True
    ) -> int:
        """
        Republish the entity's summary to every direct holder:
        (a) the parent holding it in a children array (positional update)
        (b) every child holding it as its parent reference

        Pass parents=False when reconcile_parent_change already handled (a).
        Returns the number of documents written.
        """
        summary = entity.summary()
        written = 0

        for relation in self._as_child(entity_type) if parents else ():
            parent_id = entity.ref_id(relation.parent_field)
            if parent_id is None:
                continue
            holder = self.registry.for_type(relation.parent)
            if await holder.set_child(parent_id, relation.children_field, summary) is not None:
                written += 1

        for relation in self._as_parent(entity_type):
            children = self.registry.for_type(relation.child)
            written += await children.update_matching(
                {f"{relation.parent_field}._id": entity.id},
                {relation.parent_field: summary},
            )

        logger.debug(f"Refreshed {entity_type.label} {entity.id} summary in {written} document(s)")
        return written

    # ================================================================
    # PARENT-DRIVEN MEMBERSHIP
    # ================================================================

    async def assign_children(
        self, relation: Relation, parent: Entity, child_ids: Iterable[str]
    ) -> Entity:
        """
        Make `child_ids` the complete child set of `parent` for `relation`.

        Children leaving the set get their parent reference unset. Children
        joining it are pulled from their previous parent and pointed at this
        one. The parent's array is rewritten from the children's current
        summaries. Unknown ids are ignored.
        """
        parents = self.registry.for_type(relation.parent)
        children = self.registry.for_type(relation.child)
        field = relation.children_field

        wanted = list(dict.fromkeys(child_ids))
        by_id = {child.id: child for child in await children.get_many(wanted)}
        found = [by_id[child_id] for child_id in wanted if child_id in by_id]
        found_ids = {child.id for child in found}

        current_ids = {c["_id"] for c in parent.children(field)}
        current_ids.update(
            doc["_id"]
            for doc in await children.list_projected(
                {f"{relation.parent_field}._id": parent.id}, ("_id",)
            )
        )

        removed = current_ids - found_ids
        if removed:
            await children.update_many_fields(removed, unset_fields=(relation.parent_field,))
            logger.debug(f"{relation.name}: released {len(removed)} child(ren) of {parent.id}")

        for child in found:
            previous = child.ref_id(relation.parent_field)
            if previous is not None and previous != parent.id:
                await parents.pull_child(previous, field, child.id)
                logger.debug(f"{relation.name}: moved {child.id} away from {previous}")

        if found:
            await children.update_many_fields(
                [child.id for child in found], {relation.parent_field: parent.summary()}
            )

        updated = await parents.update_fields(
            parent.id, {field: [child.summary() for child in found]}
        )
        if updated is None:
            raise NotFoundError.for_entity(relation.parent, parent.id)
        return updated

    # ================================================================
    # BULK UPSERT
    # ================================================================

    async def upsert_by_natural_key(
        self,
        entity_type: EntityType,
        key_field: str,
        rows: Sequence[Row],
        update: Callable[[Entity, Row], Awaitable[Entity]],
        create: Callable[[Row], Awaitable[Entity]],
    ) -> List[Entity]:
        """
        Resolve every row's natural key first, then apply all updates in row
        order, then all creates in row order.

        Returns updated records followed by created records.
        """
        repo = self.registry.for_type(entity_type)

        seen = set()
        for index, row in enumerate(rows):
            key = row.get(key_field)
            if not key:
                raise ValidationFailureError(f"Row {index + 1}: '{key_field}' is required")
            if key in seen:
                raise ValidationFailureError(f"Row {index + 1}: duplicate {key_field} '{key}'")
            seen.add(key)

        resolved = [(row, await repo.find_one_by(**{key_field: row[key_field]})) for row in rows]

        updated = [await update(existing, row) for row, existing in resolved if existing]
        created = [await create(row) for row, existing in resolved if existing is None]

        logger.info(
            f"Upserted {entity_type.label} by {key_field}: "
            f"{len(updated)} updated, {len(created)} created"
        )
        return updated + created

    # ================================================================
    # DRIFT REPAIR
    # ================================================================

    async def repair_drift(self) -> int:
        """
        Re-derive every parent array from the children's parent references
        and current summaries; fix stale or dangling parent references.

        Returns the number of documents corrected.
        """
        corrected = 0
        for relation in self.relations:
            corrected += await self._repair_relation(relation)
        if corrected:
            logger.warning(f"Drift repair corrected {corrected} document(s)")
        else:
            logger.info("Drift repair found no inconsistencies")
        return corrected

    async def _repair_relation(self, relation: Relation) -> int:
        parents_repo = self.registry.for_type(relation.parent)
        children_repo = self.registry.for_type(relation.child)
        field = relation.children_field

        parents = {p.id: p for p in await parents_repo.list_models()}
        corrected = 0
        expected: Dict[str, Dict[str, Dict[str, Any]]] = {pid: {} for pid in parents}

        for child in await children_repo.list_models():
            parent_id = child.ref_id(relation.parent_field)
            if parent_id is None:
                continue
            parent = parents.get(parent_id)
            if parent is None:
                await children_repo.update_fields(child.id, unset_fields=(relation.parent_field,))
                corrected += 1
                continue
            if child.to_document().get(relation.parent_field) != parent.summary():
                await children_repo.update_fields(
                    child.id, {relation.parent_field: parent.summary()}
                )
                corrected += 1
            expected[parent_id][child.id] = child.summary()

        for parent_id, parent in parents.items():
            current = parent.children(field)
            wanted = expected[parent_id]
            # keep the existing order, drop duplicates, append missing
            merged: Dict[str, Dict[str, Any]] = {}
            for element in current:
                if element["_id"] in wanted:
                    merged.setdefault(element["_id"], wanted[element["_id"]])
            for child_id, summary in wanted.items():
                merged.setdefault(child_id, summary)
            ordered = list(merged.values())
            if ordered != current:
                await parents_repo.update_fields(parent_id, {field: ordered})
                corrected += 1
                logger.debug(f"{relation.name}: rewrote array of {parent_id}")

        return corrected

    # ================================================================
    # HELPERS
    # ================================================================

    def _as_child(self, entity_type: EntityType) -> List[Relation]:
        return [r for r in relations_as_child(entity_type) if r in self.relations]

    def _as_parent(self, entity_type: EntityType) -> List[Relation]:
        return [r for r in relations_as_parent(entity_type) if r in self.relations]


__all__ = ["ConsistencyEngine"]
