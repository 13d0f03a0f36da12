# ============================================================================
# POSTGRESQL DOCUMENT STORE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - DocumentStore on PostgreSQL JSONB
# PURPOSE: Persist collections as JSONB tables with atomic array operators
# CREATED: 03 OCT 2026
# ============================================================================
"""
PostgresDocumentStore

One table per collection:

    {schema}.{collection} (
        _id  TEXT PRIMARY KEY,
        doc  JSONB NOT NULL,      -- full document, _id included
        seq  BIGSERIAL            -- insertion order
    )

Unique fields become expression indexes on (doc->>'field') named
uq_{collection}_{field}; a violation surfaces as DuplicateKeyError.

Every operator is a single UPDATE/DELETE statement, so each is atomic for
its document. push/pull/positional updates are done in SQL with jsonb_set
over jsonb_array_elements, never read-modify-write in Python.

All SQL uses psycopg sql.SQL composition for injection safety.
"""

import logging
from typing import Any, List, Optional, Sequence, Tuple

from psycopg import sql
from psycopg.errors import UniqueViolation
from psycopg.rows import dict_row
from psycopg.types.json import Json
from psycopg_pool import AsyncConnectionPool

from core.errors import DuplicateKeyError
from infrastructure.document_store import Document, DocumentStore, Filter, project

logger = logging.getLogger(__name__)


def _index_name(collection: str, field: str) -> str:
    return f"uq_{collection}_{field}"


class PostgresDocumentStore(DocumentStore):
    """DocumentStore backed by psycopg3 async pool."""

    def __init__(self, pool: AsyncConnectionPool, schema: str = "indoormap"):
        self.pool = pool
        self.schema = schema

    def _table(self, collection: str) -> sql.Identifier:
        return sql.Identifier(self.schema, collection)

    def _where(self, filter: Optional[Filter]) -> Tuple[sql.Composable, List[Any]]:
        """Compile a flat dotted-path filter into a WHERE clause."""
        if not filter:
            return sql.SQL("TRUE"), []

        clauses = []
        params: List[Any] = []
        for path, expected in filter.items():
            if path == "_id":
                target = sql.SQL("_id")
            else:
                target = sql.SQL("doc #>> %s::text[]")
                params.append(path.split("."))

            if isinstance(expected, dict) and "$in" in expected:
                clauses.append(sql.SQL("{} = ANY(%s)").format(target))
                params.append([str(v) for v in expected["$in"]])
            else:
                clauses.append(sql.SQL("{} = %s").format(target))
                params.append(str(expected))

        return sql.SQL(" AND ").join(clauses), params

    def _duplicate(self, collection: str, e: UniqueViolation) -> DuplicateKeyError:
        constraint = getattr(e.diag, "constraint_name", None) or ""
        prefix = f"uq_{collection}_"
        field = constraint[len(prefix):] if constraint.startswith(prefix) else "_id"
        return DuplicateKeyError(f"Duplicate value for {collection}.{field}", field=field)

    # ========================================================================
    # SCHEMA
    # ========================================================================

    async def ensure_collection(self, collection: str, unique_fields: Sequence[str] = ()) -> None:
        table = self._table(collection)
        async with self.pool.connection() as conn:
            await conn.execute(
                sql.SQL("CREATE SCHEMA IF NOT EXISTS {}").format(sql.Identifier(self.schema))
            )
            await conn.execute(
                sql.SQL("""
                    CREATE TABLE IF NOT EXISTS {} (
                        _id TEXT PRIMARY KEY,
                        doc JSONB NOT NULL,
                        seq BIGSERIAL
                    )
                """).format(table)
            )
            for field in unique_fields:
                await conn.execute(
                    sql.SQL("CREATE UNIQUE INDEX IF NOT EXISTS {} ON {} ((doc->>{}))").format(
                        sql.Identifier(_index_name(collection, field)),
                        table,
                        sql.Literal(field),
                    )
                )
        logger.info(f"Collection ready: {self.schema}.{collection} (unique={list(unique_fields)})")

    # ========================================================================
    # READ
    # ========================================================================

    async def find_one(self, collection: str, filter: Filter) -> Optional[Document]:
        where, params = self._where(filter)
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("SELECT doc FROM {} WHERE {} ORDER BY seq LIMIT 1").format(
                    self._table(collection), where
                ),
                params,
            )
            row = await result.fetchone()
            return row["doc"] if row else None

    async def find(
        self,
        collection: str,
        filter: Optional[Filter] = None,
        projection: Optional[Sequence[str]] = None,
    ) -> List[Document]:
        where, params = self._where(filter)
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("SELECT doc FROM {} WHERE {} ORDER BY seq").format(
                    self._table(collection), where
                ),
                params,
            )
            rows = await result.fetchall()
            return [project(row["doc"], projection) for row in rows]

    # ========================================================================
    # WRITE
    # ========================================================================

    async def insert_one(self, collection: str, doc: Document) -> Document:
        try:
            async with self.pool.connection() as conn:
                await conn.execute(
                    sql.SQL("INSERT INTO {} (_id, doc) VALUES (%s, %s)").format(
                        self._table(collection)
                    ),
                    (doc["_id"], Json(doc)),
                )
        except UniqueViolation as e:
            raise self._duplicate(collection, e) from e
        return doc

    async def update_one(
        self,
        collection: str,
        filter: Filter,
        set_fields: Optional[Document] = None,
        unset_fields: Sequence[str] = (),
    ) -> Optional[Document]:
        table = self._table(collection)
        where, params = self._where(filter)
        try:
            async with self.pool.connection() as conn:
                conn.row_factory = dict_row
                result = await conn.execute(
                    sql.SQL("""
                        UPDATE {table}
                           SET doc = (doc || %s::jsonb) - %s::text[]
                         WHERE _id = (
                            SELECT _id FROM {table} WHERE {where} ORDER BY seq LIMIT 1
                         )
                     RETURNING doc
                    """).format(table=table, where=where),
                    [Json(set_fields or {}), list(unset_fields), *params],
                )
                row = await result.fetchone()
        except UniqueViolation as e:
            raise self._duplicate(collection, e) from e
        return row["doc"] if row else None

    async def update_many(
        self,
        collection: str,
        filter: Filter,
        set_fields: Optional[Document] = None,
        unset_fields: Sequence[str] = (),
    ) -> int:
        where, params = self._where(filter)
        try:
            async with self.pool.connection() as conn:
                result = await conn.execute(
                    sql.SQL("""
                        UPDATE {}
                           SET doc = (doc || %s::jsonb) - %s::text[]
                         WHERE {}
                    """).format(self._table(collection), where),
                    [Json(set_fields or {}), list(unset_fields), *params],
                )
                return result.rowcount
        except UniqueViolation as e:
            raise self._duplicate(collection, e) from e

    async def delete_one(self, collection: str, filter: Filter) -> int:
        table = self._table(collection)
        where, params = self._where(filter)
        async with self.pool.connection() as conn:
            result = await conn.execute(
                sql.SQL("""
                    DELETE FROM {table}
                     WHERE _id = (SELECT _id FROM {table} WHERE {where} ORDER BY seq LIMIT 1)
                """).format(table=table, where=where),
                params,
            )
            return result.rowcount

    # ========================================================================
    # ARRAY OPERATORS
    # ========================================================================

    async def push(
        self, collection: str, doc_id: str, array_field: str, element: Document
    ) -> Optional[Document]:
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("""
                    UPDATE {}
                       SET doc = jsonb_set(
                            doc, %s::text[],
                            COALESCE(doc->%s, '[]'::jsonb) || jsonb_build_array(%s::jsonb)
                       )
                     WHERE _id = %s
                 RETURNING doc
                """).format(self._table(collection)),
                ([array_field], array_field, Json(element), doc_id),
            )
            row = await result.fetchone()
            return row["doc"] if row else None

    async def pull(
        self, collection: str, doc_id: str, array_field: str, element_id: str
    ) -> int:
        async with self.pool.connection() as conn:
            result = await conn.execute(
                sql.SQL("""
                    UPDATE {}
                       SET doc = jsonb_set(
                            doc, %s::text[],
                            COALESCE(
                                (SELECT jsonb_agg(e ORDER BY i)
                                   FROM jsonb_array_elements(doc->%s) WITH ORDINALITY AS a(e, i)
                                  WHERE e->>'_id' IS DISTINCT FROM %s),
                                '[]'::jsonb
                            )
                       )
                     WHERE _id = %s
                       AND doc->%s @> %s::jsonb
                """).format(self._table(collection)),
                (
                    [array_field], array_field, element_id,
                    doc_id, array_field, Json([{"_id": element_id}]),
                ),
            )
            return result.rowcount

    async def set_array_element(
        self, collection: str, doc_id: str, array_field: str, element: Document
    ) -> Optional[Document]:
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("""
                    UPDATE {}
                       SET doc = jsonb_set(
                            doc, %s::text[],
                            (SELECT jsonb_agg(
                                        CASE WHEN e->>'_id' = %s THEN %s::jsonb ELSE e END
                                        ORDER BY i)
                               FROM jsonb_array_elements(doc->%s) WITH ORDINALITY AS a(e, i))
                       )
                     WHERE _id = %s
                       AND doc->%s @> %s::jsonb
                 RETURNING doc
                """).format(self._table(collection)),
                (
                    [array_field], element["_id"], Json(element), array_field,
                    doc_id, array_field, Json([{"_id": element["_id"]}]),
                ),
            )
            row = await result.fetchone()
            return row["doc"] if row else None

    async def close(self) -> None:
        await self.pool.close()
        logger.info("Connection pool closed")


__all__ = ["PostgresDocumentStore"]
