"""
Repository layer abstracting the remote table store (SQLAlchemy vs Firebase Firestore).

Every table is addressed by name and every row travels as a plain dict with
an ``id`` key. Errors propagate to the caller unchanged; nothing here retries.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from wedding_planner.core.config import settings
from wedding_planner.core.db import generate_id
from wedding_planner.models import MODELS
from wedding_planner.realtime.events import ChangeEvent, ChangeType
from wedding_planner.realtime.feed import InProcessChangeFeed, local_feed

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


def use_firestore() -> bool:
    return settings.USE_FIREBASE is True


class StoreError(Exception):
    """A table store call failed (unknown table/column, rejected write, backend error)"""


class RecordNotFound(StoreError):
    def __init__(self, table: str, record_id: Any):
        super().__init__(f"{table} record {record_id} not found")
        self.table = table
        self.record_id = record_id


class TableStore(ABC):
    @abstractmethod
    def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Record]:
        ...

    @abstractmethod
    def get(self, table: str, record_id: Any) -> Optional[Record]:
        ...

    @abstractmethod
    def insert(self, table: str, values: Record) -> Record:
        ...

    def insert_many(self, table: str, rows: Iterable[Record]) -> List[Record]:
        return [self.insert(table, row) for row in rows]

    @abstractmethod
    def update(self, table: str, record_id: Any, values: Record) -> Record:
        ...

    def update_where(self, table: str, filters: Dict[str, Any], values: Record) -> List[Record]:
        return [self.update(table, row["id"], values) for row in self.select(table, filters)]

    @abstractmethod
    def delete(self, table: str, record_id: Any) -> None:
        ...

    def delete_where(self, table: str, filters: Dict[str, Any]) -> int:
        rows = self.select(table, filters)
        for row in rows:
            self.delete(table, row["id"])
        return len(rows)

    @abstractmethod
    def assign_exclusive(self, table: str, column: str, value: Any, record_id: Any) -> Record:
        """Atomically clear ``column == value`` on every other row and set it on ``record_id``"""


# -------- SQL store --------

class SqlTableStore(TableStore):
    """Table store over SQLAlchemy; publishes change events after each commit"""

    def __init__(self, session_factory, feed: InProcessChangeFeed):
        self.session_factory = session_factory
        self.feed = feed

    @staticmethod
    def _model(table: str):
        try:
            return MODELS[table]
        except KeyError:
            raise StoreError(f"Unknown table '{table}'")

    @staticmethod
    def _column(model, name: str):
        if name not in model.__table__.columns:
            raise StoreError(f"Unknown column '{name}' on {model.__tablename__}")
        return getattr(model, name)

    @staticmethod
    def _check_columns(model, values: Record) -> None:
        unknown = [key for key in values if key not in model.__table__.columns]
        if unknown:
            raise StoreError(f"Unknown columns on {model.__tablename__}: {', '.join(sorted(unknown))}")

    @staticmethod
    def to_record(obj) -> Record:
        return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}

    def _publish(self, table: str, change_type: ChangeType, new: Optional[Record] = None, old: Optional[Record] = None) -> None:
        self.feed.publish(ChangeEvent(table, change_type, new=new, old=old))

    def _query(self, db: Session, model, filters: Optional[Dict[str, Any]]):
        query = db.query(model)
        for name, value in (filters or {}).items():
            column = self._column(model, name)
            query = query.filter(column.is_(None) if value is None else column == value)
        return query

    def select(self, table, filters=None, order_by=None, descending=False, limit=None):
        model = self._model(table)
        with self.session_factory() as db:
            query = self._query(db, model, filters)
            if order_by:
                column = self._column(model, order_by)
                query = query.order_by(column.desc() if descending else column.asc())
            if limit:
                query = query.limit(limit)
            return [self.to_record(obj) for obj in query.all()]

    def get(self, table, record_id):
        model = self._model(table)
        with self.session_factory() as db:
            obj = db.get(model, record_id)
            return self.to_record(obj) if obj else None

    def insert(self, table, values):
        return self.insert_many(table, [values])[0]

    def insert_many(self, table, rows):
        model = self._model(table)
        rows = list(rows)
        for values in rows:
            self._check_columns(model, values)

        with self.session_factory() as db:
            objs = [model(**values) for values in rows]
            db.add_all(objs)
            db.commit()
            records = [self.to_record(obj) for obj in objs]

        for record in records:
            self._publish(table, ChangeType.INSERT, new=record)
        return records

    def update(self, table, record_id, values):
        model = self._model(table)
        self._check_columns(model, values)

        with self.session_factory() as db:
            obj = db.get(model, record_id)
            if obj is None:
                raise RecordNotFound(table, record_id)
            old = self.to_record(obj)
            for key, value in values.items():
                setattr(obj, key, value)
            if "updated_at" in model.__table__.columns:
                obj.updated_at = datetime.utcnow()
            db.commit()
            new = self.to_record(obj)

        self._publish(table, ChangeType.UPDATE, new=new, old=old)
        return new

    def update_where(self, table, filters, values):
        model = self._model(table)
        self._check_columns(model, values)

        changes = []
        with self.session_factory() as db:
            for obj in self._query(db, model, filters).all():
                old = self.to_record(obj)
                for key, value in values.items():
                    setattr(obj, key, value)
                obj.updated_at = datetime.utcnow()
                changes.append((obj, old))
            db.commit()
            changes = [(self.to_record(obj), old) for obj, old in changes]

        for new, old in changes:
            self._publish(table, ChangeType.UPDATE, new=new, old=old)
        return [new for new, _ in changes]

    def delete(self, table, record_id):
        model = self._model(table)
        with self.session_factory() as db:
            obj = db.get(model, record_id)
            if obj is None:
                raise RecordNotFound(table, record_id)
            old = self.to_record(obj)
            db.delete(obj)
            db.commit()

        self._publish(table, ChangeType.DELETE, old=old)

    def delete_where(self, table, filters):
        model = self._model(table)
        with self.session_factory() as db:
            objs = self._query(db, model, filters).all()
            removed = [self.to_record(obj) for obj in objs]
            for obj in objs:
                db.delete(obj)
            db.commit()

        for old in removed:
            self._publish(table, ChangeType.DELETE, old=old)
        return len(removed)

    def assign_exclusive(self, table, column, value, record_id):
        model = self._model(table)
        target_column = self._column(model, column)

        with self.session_factory() as db:
            target = db.query(model).filter(model.id == record_id).with_for_update().first()
            if target is None:
                raise RecordNotFound(table, record_id)

            changes = []
            holders = db.query(model).filter(target_column == value, model.id != record_id).with_for_update().all()
            for holder in holders:
                old = self.to_record(holder)
                setattr(holder, column, None)
                holder.updated_at = datetime.utcnow()
                changes.append((holder, old))

            old = self.to_record(target)
            setattr(target, column, value)
            target.updated_at = datetime.utcnow()
            changes.append((target, old))

            # Single commit: the clear and the assignment land together
            db.commit()
            changes = [(self.to_record(obj), old) for obj, old in changes]

        for new, old in changes:
            self._publish(table, ChangeType.UPDATE, new=new, old=old)
        return changes[-1][0]


# -------- Firestore store --------

class FirestoreTableStore(TableStore):
    """Table store over top-level Firestore collections; changes arrive via on_snapshot"""

    def __init__(self, client):
        self.client = client

    @staticmethod
    def _to_record(doc) -> Record:
        data = doc.to_dict() or {}
        data["id"] = doc.id
        return data

    @staticmethod
    def _encode(values: Record) -> Record:
        # Firestore stores timestamps only, not bare dates
        return {
            key: datetime.combine(value, datetime.min.time())
            if isinstance(value, date) and not isinstance(value, datetime) else value
            for key, value in values.items()
        }

    def select(self, table, filters=None, order_by=None, descending=False, limit=None):
        from firebase_admin import firestore

        query = self.client.collection(table)
        for name, value in (filters or {}).items():
            query = query.where(name, "==", value)
        if order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        if limit:
            query = query.limit(limit)
        return [self._to_record(doc) for doc in query.get()]

    def get(self, table, record_id):
        doc = self.client.collection(table).document(str(record_id)).get()
        return self._to_record(doc) if doc.exists else None

    def insert(self, table, values):
        now = datetime.utcnow()
        data = {"created_at": now, "updated_at": now, **self._encode(values)}
        record_id = str(data.pop("id", None) or generate_id())
        self.client.collection(table).document(record_id).set(data)
        return {**data, "id": record_id}

    def insert_many(self, table, rows):
        batch = self.client.batch()
        records = []
        now = datetime.utcnow()
        for values in rows:
            data = {"created_at": now, "updated_at": now, **self._encode(values)}
            record_id = str(data.pop("id", None) or generate_id())
            batch.set(self.client.collection(table).document(record_id), data)
            records.append({**data, "id": record_id})
        batch.commit()
        return records

    def update(self, table, record_id, values):
        ref = self.client.collection(table).document(str(record_id))
        if not ref.get().exists:
            raise RecordNotFound(table, record_id)
        ref.update({**self._encode(values), "updated_at": datetime.utcnow()})
        return self._to_record(ref.get())

    def delete(self, table, record_id):
        ref = self.client.collection(table).document(str(record_id))
        if not ref.get().exists:
            raise RecordNotFound(table, record_id)
        ref.delete()

    def assign_exclusive(self, table, column, value, record_id):
        from firebase_admin import firestore

        collection = self.client.collection(table)
        target_ref = collection.document(str(record_id))

        @firestore.transactional
        def assign(transaction):
            snapshot = target_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise RecordNotFound(table, record_id)
            holders = collection.where(column, "==", value).get(transaction=transaction)
            now = datetime.utcnow()
            for holder in holders:
                if holder.id != str(record_id):
                    transaction.update(holder.reference, {column: None, "updated_at": now})
            transaction.update(target_ref, {column: value, "updated_at": now})

        assign(self.client.transaction())
        return self._to_record(target_ref.get())


@lru_cache(maxsize=1)
def get_store() -> TableStore:
    """Process-wide table store for the configured backend"""
    if use_firestore():
        from wedding_planner.services.firebase_client import get_firestore_client
        logger.info("Using Firestore table store")
        return FirestoreTableStore(get_firestore_client())

    from wedding_planner.core.db import SessionLocal
    logger.info("Using SQL table store")
    return SqlTableStore(SessionLocal, local_feed)
