# ============================================================================
# ENTITY BASE MODEL
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain model - Shared document behaviour
# PURPOSE: Identity, document conversion and summary extraction for entities
# CREATED: 02 OCT 2026
# ============================================================================
"""
Entity Base Model

All four graph entities are pydantic models persisted as documents. The
document form uses the stored field names (`_id`, `macAddress`,
`chokePoints`...); Python attributes are snake_case with aliases.

An entity knows its own summary (the fields other documents embed, see
core.contracts.SUMMARY_FIELDS) but nothing about who holds it; that is
core.relations' job.
"""

import uuid
from typing import Any, ClassVar, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError

from core.contracts import EntityType, SUMMARY_FIELDS
from core.errors import ValidationFailureError

E = TypeVar("E", bound="Entity")


def new_id() -> str:
    """Opaque document id."""
    return uuid.uuid4().hex


def validation_message(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one client-safe sentence."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "__root__")
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", "invalid"))
    return "; ".join(parts)


class Entity(BaseModel):
    """Base for Asset, Map, Location and ChokePoint."""

    __entity_type__: ClassVar[EntityType]

    id: str = Field(default_factory=new_id, alias="_id")

    model_config = {
        "populate_by_name": True,
        "str_strip_whitespace": True,
        "extra": "ignore",
    }

    # ----------------------------------------------------------------
    # Construction
    # ----------------------------------------------------------------

    @classmethod
    def build(cls: Type[E], **fields: Any) -> E:
        """Validate user-supplied fields, raising ValidationFailureError."""
        try:
            return cls.model_validate(fields)
        except ValidationError as e:
            raise ValidationFailureError(validation_message(e)) from e

    @classmethod
    def from_document(cls: Type[E], doc: Dict[str, Any]) -> E:
        return cls.model_validate(doc)

    def with_changes(self: E, **changes: Any) -> E:
        """Copy with changes applied and re-validated. None removes a field."""
        doc = self.to_document()
        for key, value in changes.items():
            alias = self.alias_of(key)
            if value is None:
                doc.pop(alias, None)
            else:
                doc[alias] = value
        try:
            return type(self).model_validate(doc)
        except ValidationError as e:
            raise ValidationFailureError(validation_message(e)) from e

    @classmethod
    def alias_of(cls, name: str) -> str:
        """Stored field name for a Python attribute (or pass through)."""
        info = cls.model_fields.get(name)
        if info is not None and info.alias:
            return info.alias
        return name

    # ----------------------------------------------------------------
    # Document / summary views
    # ----------------------------------------------------------------

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def summary(self) -> Dict[str, Any]:
        """The partial copy other documents embed: _id + SUMMARY_FIELDS."""
        doc = self.to_document()
        result = {"_id": self.id}
        for name in SUMMARY_FIELDS[self.__entity_type__]:
            if doc.get(name) is not None:
                result[name] = doc[name]
        return result

    def ref_id(self, field_name: str) -> Optional[str]:
        """Id of the summary embedded under field_name, if any."""
        ref = self.to_document().get(field_name)
        return ref.get("_id") if ref else None

    def children(self, field_name: str) -> List[Dict[str, Any]]:
        """Embedded summaries under an array field (stored name)."""
        return list(self.to_document().get(field_name) or [])


class Summary(BaseModel):
    """Embedded partial copy of another entity."""

    id: str = Field(..., alias="_id")

    model_config = {"populate_by_name": True, "extra": "ignore"}


__all__ = ["Entity", "Summary", "new_id", "validation_message"]
