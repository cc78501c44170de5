"""Collection-oriented record store over the SQLAlchemy models.

Every call runs in its own session, so each ``insert`` is atomic on its
own while consecutive calls are independent of one another.

Usage::

    store = RecordStore()
    [project] = store.insert("projects", {"user_id": 1, "name": "Acme", ...})
    rows = store.select("keywords", {"project_id": project["id"]},
                        order_by="created_at", descending=True)
"""

import logging
from typing import Any, Iterable, Optional

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from seo_monitor.database import get_session
from seo_monitor.models import (
    Competitor,
    ContentGap,
    Keyword,
    Project,
    ProjectSettings,
    Report,
    SerpChange,
    User,
)

logger = logging.getLogger(__name__)

COLLECTIONS = {
    "users": User,
    "projects": Project,
    "project_settings": ProjectSettings,
    "keywords": Keyword,
    "competitors": Competitor,
    "serp_changes": SerpChange,
    "content_gaps": ContentGap,
    "reports": Report,
}

Row = dict[str, Any]


class StoreError(Exception):
    """A store operation was rejected; ``str(exc)`` is safe to show users."""


class RecordNotFound(StoreError):
    """No row matched a single-row lookup."""


def _row_to_dict(obj) -> Row:
    return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}


def _describe(exc: SQLAlchemyError) -> str:
    """Turn a driver error into a readable one-line message."""
    orig = getattr(exc, "orig", None)
    message = str(orig) if orig is not None else str(exc)
    return message.splitlines()[0] if message else exc.__class__.__name__


class RecordStore:
    """Insert / select / count / update rows by collection name."""

    def _model(self, collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise StoreError(f"Unknown collection '{collection}'") from None

    def _check_columns(self, collection: str, model, names: Iterable[str]) -> None:
        known = {attr.key for attr in inspect(model).column_attrs}
        for name in names:
            if name not in known:
                raise StoreError(f"Column '{name}' does not exist on '{collection}'")

    def _column(self, collection: str, model, name: str):
        self._check_columns(collection, model, [name])
        return getattr(model, name)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, collection: str, rows: Row | list[Row]) -> list[Row]:
        """Insert one row or a bulk list of rows in a single transaction.

        Returns the created rows with generated ids and defaults filled in.
        Raises :class:`StoreError` when the store rejects the write; in that
        case nothing from this call is committed.
        """
        model = self._model(collection)
        payload = [rows] if isinstance(rows, dict) else list(rows)
        if not payload:
            raise StoreError(f"Nothing to insert into '{collection}'")
        for row in payload:
            self._check_columns(collection, model, row)

        try:
            with get_session() as session:
                objs = [model(**row) for row in payload]
                session.add_all(objs)
                session.flush()
                created = [_row_to_dict(obj) for obj in objs]
        except SQLAlchemyError as exc:
            logger.error("Insert into %s failed: %s", collection, exc)
            raise StoreError(_describe(exc)) from exc

        logger.debug("Inserted %d row(s) into %s", len(created), collection)
        return created

    def update(self, collection: str, filters: Row, values: Row) -> list[Row]:
        """Set ``values`` on every row matching ``filters``; return updated rows."""
        model = self._model(collection)
        self._check_columns(collection, model, filters)
        self._check_columns(collection, model, values)
        try:
            with get_session() as session:
                objs = session.query(model).filter_by(**filters).all()
                for obj in objs:
                    for key, value in values.items():
                        setattr(obj, key, value)
                session.flush()
                updated = [_row_to_dict(obj) for obj in objs]
        except SQLAlchemyError as exc:
            logger.error("Update of %s failed: %s", collection, exc)
            raise StoreError(_describe(exc)) from exc
        return updated

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def select(
        self,
        collection: str,
        filters: Optional[Row] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Row]:
        """Return rows matching equality ``filters``, optionally ordered and limited."""
        model = self._model(collection)
        filters = filters or {}
        self._check_columns(collection, model, filters)

        try:
            with get_session() as session:
                query = session.query(model).filter_by(**filters)
                if order_by:
                    column = self._column(collection, model, order_by)
                    query = query.order_by(column.desc() if descending else column.asc())
                # Stable tie-break for rows created within the same instant.
                for pk in inspect(model).primary_key:
                    query = query.order_by(pk.desc() if descending else pk.asc())
                if limit is not None:
                    query = query.limit(limit)
                return [_row_to_dict(obj) for obj in query.all()]
        except SQLAlchemyError as exc:
            logger.error("Select from %s failed: %s", collection, exc)
            raise StoreError(_describe(exc)) from exc

    def select_one(self, collection: str, filters: Row) -> Row:
        """Return exactly one row or raise :class:`RecordNotFound`."""
        rows = self.select(collection, filters, limit=1)
        if not rows:
            raise RecordNotFound(f"No row in '{collection}' matches {filters}")
        return rows[0]

    def count(self, collection: str, filters: Optional[Row] = None) -> int:
        model = self._model(collection)
        filters = filters or {}
        self._check_columns(collection, model, filters)
        try:
            with get_session() as session:
                return session.query(model).filter_by(**filters).count()
        except SQLAlchemyError as exc:
            logger.error("Count of %s failed: %s", collection, exc)
            raise StoreError(_describe(exc)) from exc
