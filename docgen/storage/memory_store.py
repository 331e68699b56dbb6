"""
Process-local record store.

Every operation runs under one lock, which makes replace, upsert and
debit_credit atomic with respect to concurrent generations.
"""

import copy
import threading
from typing import Optional, Dict, Any, List, Sequence, Set

from .base import BaseStore, COLLECTIONS, PROFILES
from ..core.config import UNLIMITED_CREDITS
from ..core.errors import PersistenceFailed
from ..utils.id_generator import generate_uuid
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _matches(record: Dict[str, Any], filters: Dict[str, Any]) -> bool:
    return all(record.get(k) == v for k, v in filters.items())


class InMemoryStore(BaseStore):
    """
    Dict-backed store for tests and the command-line front end.

    Records are copied in and out, so callers never share mutable state
    with the store.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: Dict[str, List[Dict[str, Any]]] = {name: [] for name in COLLECTIONS}
        self._failing: Set[str] = set()

    def fail_writes(self, collection: str, failing: bool = True) -> None:
        """Make every write to ``collection`` raise PersistenceFailed."""
        with self._lock:
            if failing:
                self._failing.add(collection)
            else:
                self._failing.discard(collection)

    def _rows(self, collection: str) -> List[Dict[str, Any]]:
        return self._data.setdefault(collection, [])

    def _check_writable(self, collection: str) -> None:
        if collection in self._failing:
            raise PersistenceFailed(f"Write rejected by store: {collection}")

    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            for row in self._rows(collection):
                if row.get("id") == record_id:
                    return copy.deepcopy(row)
        return None

    def find_one(self, collection: str, **filters) -> Optional[Dict[str, Any]]:
        with self._lock:
            for row in self._rows(collection):
                if _matches(row, filters):
                    return copy.deepcopy(row)
        return None

    def list(
        self,
        collection: str,
        order_by: Optional[str] = None,
        **filters
    ) -> List[Dict[str, Any]]:
        with self._lock:
            rows = [copy.deepcopy(r) for r in self._rows(collection) if _matches(r, filters)]

        if order_by:
            reverse = order_by.startswith("-")
            key = order_by.lstrip("-")
            rows.sort(key=lambda r: (r.get(key) is None, r.get(key)), reverse=reverse)
        return rows

    def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        row = copy.deepcopy(record)
        row.setdefault("id", generate_uuid())
        with self._lock:
            self._check_writable(collection)
            self._rows(collection).append(row)
        return copy.deepcopy(row)

    def update(self, collection: str, record_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            self._check_writable(collection)
            for row in self._rows(collection):
                if row.get("id") == record_id:
                    row.update(copy.deepcopy(changes))
                    return copy.deepcopy(row)
        raise PersistenceFailed(f"No {collection} record with id {record_id}")

    def delete(self, collection: str, **filters) -> int:
        with self._lock:
            self._check_writable(collection)
            rows = self._rows(collection)
            kept = [r for r in rows if not _matches(r, filters)]
            self._data[collection] = kept
            return len(rows) - len(kept)

    def replace(
        self,
        collection: str,
        record: Dict[str, Any],
        key_fields: Sequence[str],
    ) -> Dict[str, Any]:
        row = copy.deepcopy(record)
        row.setdefault("id", generate_uuid())
        key = {k: row.get(k) for k in key_fields}

        with self._lock:
            self._check_writable(collection)
            rows = self._rows(collection)
            superseded = sum(1 for r in rows if _matches(r, key))
            self._data[collection] = [r for r in rows if not _matches(r, key)] + [row]

        if superseded:
            logger.debug(f"Replaced {superseded} {collection} record(s) for {key}")
        return copy.deepcopy(row)

    def upsert(
        self,
        collection: str,
        record: Dict[str, Any],
        key_fields: Sequence[str],
    ) -> Dict[str, Any]:
        key = {k: record.get(k) for k in key_fields}

        with self._lock:
            self._check_writable(collection)
            for row in self._rows(collection):
                if _matches(row, key):
                    row.update(copy.deepcopy(record))
                    return copy.deepcopy(row)

            row = copy.deepcopy(record)
            row.setdefault("id", generate_uuid())
            self._rows(collection).append(row)
            return copy.deepcopy(row)

    def _adjust_credits(self, profile_id: str, delta: int) -> Optional[int]:
        with self._lock:
            self._check_writable(PROFILES)
            for row in self._rows(PROFILES):
                if row.get("id") != profile_id:
                    continue
                balance = row.get("credits_remaining", 0)
                if balance == UNLIMITED_CREDITS:
                    return UNLIMITED_CREDITS
                if balance + delta < 0:
                    return None
                row["credits_remaining"] = balance + delta
                return balance + delta
        return None

    def debit_credit(self, profile_id: str) -> Optional[int]:
        return self._adjust_credits(profile_id, -1)

    def refund_credit(self, profile_id: str) -> Optional[int]:
        return self._adjust_credits(profile_id, 1)
