"""
Abstract base class for record stores.

Records are plain dicts grouped in named collections (profiles, projects,
transcriptions, documents, wireframes, wireframes_html, wireframes_preview).
Besides the usual CRUD calls, a store must provide three atomic operations
the generation pipeline relies on: replace, upsert and the credit
debit/refund pair.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List, Sequence


# Collection names
PROFILES = "profiles"
PROJECTS = "projects"
TRANSCRIPTIONS = "transcriptions"
DOCUMENTS = "documents"
WIREFRAMES = "wireframes"
WIREFRAMES_HTML = "wireframes_html"
WIREFRAMES_PREVIEW = "wireframes_preview"

COLLECTIONS = (
    PROFILES,
    PROJECTS,
    TRANSCRIPTIONS,
    DOCUMENTS,
    WIREFRAMES,
    WIREFRAMES_HTML,
    WIREFRAMES_PREVIEW,
)


class BaseStore(ABC):
    """
    Abstract record store.

    Implementations raise PersistenceFailed when a write is rejected.
    """

    @abstractmethod
    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Return the record with this id, or None."""
        pass

    @abstractmethod
    def find_one(self, collection: str, **filters) -> Optional[Dict[str, Any]]:
        """Return the first record matching every filter, or None."""
        pass

    @abstractmethod
    def list(
        self,
        collection: str,
        order_by: Optional[str] = None,
        **filters
    ) -> List[Dict[str, Any]]:
        """
        Return all records matching the filters.

        Args:
            collection: Collection name
            order_by: Field to sort on; prefix with "-" for descending
            **filters: Field equality filters
        """
        pass

    @abstractmethod
    def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a record (an id is assigned when missing) and return it."""
        pass

    @abstractmethod
    def update(self, collection: str, record_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Apply changes to one record and return it."""
        pass

    @abstractmethod
    def delete(self, collection: str, **filters) -> int:
        """Delete every record matching the filters; return how many."""
        pass

    @abstractmethod
    def replace(
        self,
        collection: str,
        record: Dict[str, Any],
        key_fields: Sequence[str],
    ) -> Dict[str, Any]:
        """
        Supersede every record sharing the key with ``record`` in one step.

        No reader may observe the key with zero records.
        """
        pass

    @abstractmethod
    def upsert(
        self,
        collection: str,
        record: Dict[str, Any],
        key_fields: Sequence[str],
    ) -> Dict[str, Any]:
        """Update the record sharing the composite key, or insert it."""
        pass

    @abstractmethod
    def debit_credit(self, profile_id: str) -> Optional[int]:
        """
        Atomically consume one credit.

        Returns:
            The new balance; -1 unchanged for unlimited profiles; None when
            the balance was already 0 or the profile does not exist
        """
        pass

    @abstractmethod
    def refund_credit(self, profile_id: str) -> Optional[int]:
        """
        Atomically give back one credit taken by debit_credit.

        Returns:
            The new balance; -1 unchanged for unlimited profiles; None when
            the profile does not exist
        """
        pass
