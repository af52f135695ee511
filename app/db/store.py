"""
app/db/store.py

Purpose: Ledger store interface and in-memory implementation

- Abstract interface so services never touch a concrete database
- Users, pending signups and owner-scoped ledger collections
- Volatile in-memory backend (default, also used by tests)

Documents are plain JSON-compatible dicts. Every ledger document carries
``id`` and ``user_id``; reads and writes are scoped by ``user_id``.
"""

import copy
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from app.core.exceptions import DuplicateUserError
from utils.constants import MSG_USER_EXISTS

VEHICLES = "vehicles"
INCOMES = "incomes"
EXPENSES = "expenses"
LEDGER_COLLECTIONS = (VEHICLES, INCOMES, EXPENSES)


class LedgerStore(ABC):
    """
    Storage operations the services need. No business logic lives here.

    Implementations must apply each single mutation atomically; no
    cross-record transactions are offered.
    """

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    @abstractmethod
    async def insert_user(self, user: Dict[str, Any]) -> Dict[str, Any]:
        """
        Stores a new user.

        Raises:
            DuplicateUserError: phone or email already taken
        """

    @abstractmethod
    async def find_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def find_user_by_phone(self, phone: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def find_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        pass

    # ------------------------------------------------------------------
    # Pending signups (keyed by phone)
    # ------------------------------------------------------------------

    @abstractmethod
    async def save_pending_signup(self, pending: Dict[str, Any]) -> None:
        """Creates or wholesale replaces the pending signup for ``pending["phone"]``."""

    @abstractmethod
    async def get_pending_signup(self, phone: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def delete_pending_signup(self, phone: str) -> bool:
        pass

    # ------------------------------------------------------------------
    # Owner-scoped ledger collections
    # ------------------------------------------------------------------

    @abstractmethod
    async def insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Stores a new record.

        Raises:
            ValidationError: the record clashes with a unique key (e.g. a
                second vehicle with the same registration number)
        """

    @abstractmethod
    async def find_by_id(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Looks a record up by identity regardless of owner (for ownership checks)."""

    @abstractmethod
    async def find_by_owner(
        self,
        collection: str,
        user_id: str,
        filters: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Returns the owner's records whose fields equal every ``filters`` entry."""

    @abstractmethod
    async def update(
        self,
        collection: str,
        record_id: str,
        user_id: str,
        changes: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Applies ``changes`` to the owner's record; None when no such record."""

    @abstractmethod
    async def delete(self, collection: str, record_id: str, user_id: str) -> bool:
        pass

    async def ping(self) -> bool:
        """Health check; in-process stores are always reachable."""
        return True


def _matches(document: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
    if not filters:
        return True
    return all(document.get(key) == value for key, value in filters.items())


class InMemoryLedgerStore(LedgerStore):
    """
    Process-lifetime store backed by dictionaries.

    A single lock serializes mutations; callers always receive copies so a
    reader never sees a half-applied write.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._users: Dict[str, Dict[str, Any]] = {}
        self._pending: Dict[str, Dict[str, Any]] = {}
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {
            name: {} for name in LEDGER_COLLECTIONS
        }

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        if name not in self._collections:
            raise KeyError(f"Unknown collection: {name}")
        return self._collections[name]

    async def insert_user(self, user: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            for existing in self._users.values():
                if existing.get("phone") == user.get("phone") or existing.get("email") == user.get("email"):
                    raise DuplicateUserError(MSG_USER_EXISTS)
            self._users[user["id"]] = copy.deepcopy(user)
            return copy.deepcopy(user)

    async def find_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            user = self._users.get(user_id)
            return copy.deepcopy(user) if user else None

    async def find_user_by_phone(self, phone: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            for user in self._users.values():
                if user.get("phone") == phone:
                    return copy.deepcopy(user)
            return None

    async def find_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            for user in self._users.values():
                if user.get("email") == email:
                    return copy.deepcopy(user)
            return None

    async def save_pending_signup(self, pending: Dict[str, Any]) -> None:
        with self._lock:
            self._pending[pending["phone"]] = copy.deepcopy(pending)

    async def get_pending_signup(self, phone: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            pending = self._pending.get(phone)
            return copy.deepcopy(pending) if pending else None

    async def delete_pending_signup(self, phone: str) -> bool:
        with self._lock:
            return self._pending.pop(phone, None) is not None

    async def insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            self._collection(collection)[document["id"]] = copy.deepcopy(document)
            return copy.deepcopy(document)

    async def find_by_id(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            document = self._collection(collection).get(record_id)
            return copy.deepcopy(document) if document else None

    async def find_by_owner(
        self,
        collection: str,
        user_id: str,
        filters: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                copy.deepcopy(document)
                for document in self._collection(collection).values()
                if document.get("user_id") == user_id and _matches(document, filters)
            ]

    async def update(
        self,
        collection: str,
        record_id: str,
        user_id: str,
        changes: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        with self._lock:
            documents = self._collection(collection)
            document = documents.get(record_id)
            if not document or document.get("user_id") != user_id:
                return None
            updated = {**document, **copy.deepcopy(changes)}
            documents[record_id] = updated
            return copy.deepcopy(updated)

    async def delete(self, collection: str, record_id: str, user_id: str) -> bool:
        with self._lock:
            documents = self._collection(collection)
            document = documents.get(record_id)
            if not document or document.get("user_id") != user_id:
                return False
            del documents[record_id]
            return True
