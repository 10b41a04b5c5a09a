"""Document store adapter over the async SQLAlchemy session.

Services talk to collections (``users``, ``products``, ``bidRequests``,
``orders``) through this adapter instead of building queries themselves.
Filters accept either the Python attribute name (``bid_price``) or the
stored field name (``bidPrice``).

The adapter never commits on its own except inside ``transaction()``;
callers that need several writes to land together wrap them in one.
"""

import functools
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy import inspect, select
from sqlalchemy import update as sa_update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vendor_gpt.domain.errors import NotFoundError, StoreError
from vendor_gpt.domain.models import COLLECTIONS

logger = logging.getLogger(__name__)

_RANGE_OPS = {
    "gt": lambda col, v: col > v,
    "gte": lambda col, v: col >= v,
    "lt": lambda col, v: col < v,
    "lte": lambda col, v: col <= v,
}


def _wrap_store_errors(func):
    """Translate SQLAlchemy failures into ``StoreError``."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as exc:
            logger.error("Document store error in %s: %s", func.__name__, exc)
            raise StoreError(str(exc)) from exc

    return wrapper


class DocumentStore:
    """CRUD and conditional updates over the marketplace collections."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ------------------------------------------------------------------
    # Field resolution
    # ------------------------------------------------------------------

    @staticmethod
    def model_for(collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}") from None

    @staticmethod
    def _column(model, field: str):
        """Return the mapped attribute for *field* (attribute or stored name)."""
        mapper = inspect(model)
        if field in mapper.column_attrs:
            return getattr(model, field)
        for attr in mapper.column_attrs:
            if attr.columns[0].name == field:
                return getattr(model, attr.key)
        raise ValueError(f"Unknown field {field!r} on {model.__tablename__}")

    def _conditions(
        self,
        model,
        where: Optional[dict[str, Any]] = None,
        ranges: Optional[dict[str, dict[str, Any]]] = None,
    ) -> list:
        conditions = []
        for field, value in (where or {}).items():
            column = self._column(model, field)
            if value is None:
                conditions.append(column.is_(None))
            elif isinstance(value, (list, tuple, set)):
                conditions.append(column.in_(list(value)))
            else:
                conditions.append(column == value)
        for field, bounds in (ranges or {}).items():
            column = self._column(model, field)
            for op, value in bounds.items():
                if op not in _RANGE_OPS:
                    raise ValueError(f"Unsupported range operator: {op}")
                conditions.append(_RANGE_OPS[op](column, value))
        return conditions

    def _ordering(self, model, order_by: Optional[str]):
        if not order_by:
            return []
        descending = order_by.startswith("-")
        column = self._column(model, order_by.lstrip("-"))
        return [column.desc() if descending else column.asc()]

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @_wrap_store_errors
    async def get(self, collection: str, doc_id: str):
        """Return the document with *doc_id*, or None."""
        model = self.model_for(collection)
        result = await self.session.execute(select(model).where(model.id == doc_id))
        return result.scalar_one_or_none()

    async def get_or_raise(self, collection: str, doc_id: str):
        """Return the document with *doc_id* or raise ``NotFoundError``."""
        doc = await self.get(collection, doc_id)
        if doc is None:
            raise NotFoundError(collection, doc_id)
        return doc

    @_wrap_store_errors
    async def find(
        self,
        collection: str,
        where: Optional[dict[str, Any]] = None,
        ranges: Optional[dict[str, dict[str, Any]]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list:
        """Query a collection.

        Args:
            collection: Collection name.
            where: Equality filters. A list value means "any of"; None means
                "field is unset".
            ranges: Range filters, e.g. ``{"price": {"lte": 360}}``.
            order_by: Field to sort by; prefix with ``-`` for descending.
                Without it, rows come back in store order.
            limit: Maximum number of documents.
        """
        model = self.model_for(collection)
        query = select(model).where(*self._conditions(model, where, ranges))
        query = query.order_by(*self._ordering(model, order_by))
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @_wrap_store_errors
    async def insert(self, collection: str, data: dict[str, Any]):
        """Insert a document and return it with its store-assigned id."""
        model = self.model_for(collection)
        doc = model(**data)
        self.session.add(doc)
        await self.session.flush()
        return doc

    @_wrap_store_errors
    async def update(self, collection: str, doc_id: str, values: dict[str, Any]):
        """Unconditionally set *values* on a document and return it."""
        doc = await self.get_or_raise(collection, doc_id)
        for field, value in values.items():
            setattr(doc, self._column(type(doc), field).key, value)
        await self.session.flush()
        return doc

    @_wrap_store_errors
    async def update_where(
        self,
        collection: str,
        doc_id: str,
        values: Optional[dict[str, Any]] = None,
        expect: Optional[dict[str, Any]] = None,
        ranges: Optional[dict[str, dict[str, Any]]] = None,
        increments: Optional[dict[str, int | float]] = None,
    ) -> int:
        """Compare-and-set update of a single document.

        The write only applies if the document still matches *expect* and
        *ranges*. *increments* are applied relative to the stored value.

        Returns:
            Number of documents changed (0 or 1).
        """
        model = self.model_for(collection)
        new_values = {}
        for field, value in (values or {}).items():
            new_values[self._column(model, field).key] = value
        for field, delta in (increments or {}).items():
            column = self._column(model, field)
            new_values[column.key] = column + delta
        if not new_values:
            raise ValueError("update_where needs values or increments")

        stmt = (
            sa_update(model)
            .where(model.id == doc_id, *self._conditions(model, expect, ranges))
            .values(**new_values)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    @_wrap_store_errors
    async def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a document. Returns False if it did not exist."""
        model = self.model_for(collection)
        result = await self.session.execute(sa_delete(model).where(model.id == doc_id))
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def transaction(self):
        """Commit everything written inside the block, or nothing.

        Any exception rolls the session back and is re-raised (SQLAlchemy
        errors as ``StoreError``).
        """
        try:
            yield self
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("Document store transaction failed: %s", exc)
            raise StoreError(str(exc)) from exc
        except BaseException:
            await self.session.rollback()
            raise
