"""Document store: JSON documents in SQLite with per-collection subscriptions."""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
import uuid
from collections import defaultdict, namedtuple
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

logger = logging.getLogger(__name__)

VOLUNTEERS = "volunteers"
PROJECTS = "projects"

# Fields owned by the store, never persisted inside the JSON body.
_META_FIELDS = ("id", "createdAt", "updatedAt")


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

Write = namedtuple("Write", ["collection", "doc_id", "changes"])

Subscriber = Callable[[list], None]


class DocumentNotFound(LookupError):
    """Raised by ``update`` when the target document does not exist."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _dumps(data: dict) -> str:
    body = {k: v for k, v in data.items() if k not in _META_FIELDS}
    return json.dumps(body, sort_keys=True)


def _row_to_document(row: sqlite3.Row) -> dict:
    doc = json.loads(row["data"])
    doc["id"] = row["id"]
    doc["createdAt"] = row["created_at"]
    doc["updatedAt"] = row["updated_at"]
    return doc


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class DocumentStore:
    """create / get / set / update / list / subscribe over the documents table.

    Every write stamps ``updatedAt`` (and ``createdAt`` on insert). Writes made
    inside one ``transaction()`` block commit together; subscribers of each
    touched collection receive a fresh snapshot once the commit succeeds.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self._lock = threading.RLock()
        self._depth = 0
        self._dirty: set[str] = set()
        self._subscribers: dict[str, list[Subscriber]] = defaultdict(list)

    # -- transactions -------------------------------------------------------

    @contextmanager
    def transaction(self):
        with self._lock:
            outermost = self._depth == 0
            self._depth += 1
            try:
                yield self
                if outermost:
                    self.conn.commit()
            except Exception:
                if outermost:
                    self.conn.rollback()
                    self._dirty.clear()
                raise
            finally:
                self._depth -= 1
            if not outermost:
                return
            changed, self._dirty = self._dirty, set()
        for collection in sorted(changed):
            self._publish(collection)

    # -- reads --------------------------------------------------------------

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        """Read a single document once. Returns None if it does not exist."""
        with self._lock:
            row = self.conn.execute(
                "SELECT * FROM documents WHERE collection = ? AND id = ?",
                (collection, doc_id),
            ).fetchone()
        if row is None:
            return None
        return _row_to_document(row)

    def list(self, collection: str) -> list[dict]:
        """Return every document in a collection, oldest first."""
        with self._lock:
            rows = self.conn.execute(
                "SELECT * FROM documents WHERE collection = ? ORDER BY created_at, id",
                (collection,),
            ).fetchall()
        return [_row_to_document(r) for r in rows]

    # -- writes -------------------------------------------------------------

    def create(self, collection: str, data: dict, doc_id: Optional[str] = None) -> str:
        """Insert a new document and return its id (generated when not given)."""
        doc_id = doc_id or uuid.uuid4().hex
        now = _now()
        with self.transaction():
            self.conn.execute(
                "INSERT INTO documents (collection, id, data, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                (collection, doc_id, _dumps(data), now, now),
            )
            self._dirty.add(collection)
        return doc_id

    def set(self, collection: str, doc_id: str, data: dict, merge: bool = True) -> None:
        """Create or overwrite a document; with ``merge`` keep unspecified fields."""
        with self.transaction():
            existing = self.get(collection, doc_id)
            if existing is None:
                self.create(collection, data, doc_id=doc_id)
                return
            body = {**existing, **data} if merge else dict(data)
            self._replace(collection, doc_id, body)

    def update(self, collection: str, doc_id: str, changes: dict) -> None:
        """Merge ``changes`` into an existing document."""
        with self.transaction():
            existing = self.get(collection, doc_id)
            if existing is None:
                raise DocumentNotFound(f"{collection}/{doc_id}")
            self._replace(collection, doc_id, {**existing, **changes})

    def apply(self, writes: Iterable[Write]) -> int:
        """Apply planned writes atomically. Returns the number applied."""
        count = 0
        with self.transaction():
            for write in writes:
                self.update(write.collection, write.doc_id, write.changes)
                count += 1
        return count

    def _replace(self, collection: str, doc_id: str, body: dict) -> None:
        self.conn.execute(
            "UPDATE documents SET data = ?, updated_at = ? WHERE collection = ? AND id = ?",
            (_dumps(body), _now(), collection, doc_id),
        )
        self._dirty.add(collection)

    # -- subscriptions ------------------------------------------------------

    def subscribe(self, collection: str, callback: Subscriber) -> Callable[[], None]:
        """Push the collection snapshot to ``callback`` now and after every change.

        Returns a function that cancels the subscription.
        """
        with self._lock:
            self._subscribers[collection].append(callback)
        callback(self.list(collection))

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers[collection]:
                    self._subscribers[collection].remove(callback)

        return unsubscribe

    def _publish(self, collection: str) -> None:
        with self._lock:
            subscribers = list(self._subscribers[collection])
        if not subscribers:
            return
        snapshot = self.list(collection)
        for callback in subscribers:
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Subscriber for %s failed", collection)
