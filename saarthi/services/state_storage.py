"""
State Storage - persistence collaborator for the engine's collections.

The engine reads and writes whole collections (reports, votes, notices,
karma) under fixed keys. Storage failures never reach the caller: the first
failed read or write flips the storage into degraded mode and the rest of
the session is served from an in-process fallback copy.
"""

import copy
import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from saarthi.core.settings import settings
from saarthi.models.result import ErrorKind, Result

logger = logging.getLogger(__name__)

REPORTS_KEY = "saar_reports"
VOTES_KEY = "saar_votes"
NOTICES_KEY = "saar_notices"
KARMA_KEY = "saar_karma"


class StateBackend(ABC):
    """
    Raw key/value backend.

    Implementations may raise on any failure; StateStorage handles it.
    """

    name = "backend"

    @abstractmethod
    def read(self, key: str) -> Optional[Any]:
        """Return the stored value for `key`, or None if absent."""
        raise NotImplementedError

    @abstractmethod
    def write(self, key: str, value: Any) -> None:
        raise NotImplementedError


class MemoryStateBackend(StateBackend):
    """Plain dict backend (tests, and last resort when nothing else initializes)."""

    name = "memory"

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial or {})

    def read(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._data.get(key))

    def write(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class JsonFileStateBackend(StateBackend):
    """Single JSON file holding every key (USE_MOCK_DB mode)."""

    name = "json-file"

    def __init__(self, path: str):
        self.path = path

    def _load_all(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def read(self, key: str) -> Optional[Any]:
        return self._load_all().get(key)

    def write(self, key: str, value: Any) -> None:
        data = self._load_all()
        data[key] = value
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, self.path)


class FirestoreStateBackend(StateBackend):
    """
    One Firestore document per key inside a state collection.

    Reads and writes are blocking network calls, so the store must not be
    mutated directly from the event loop.
    """

    name = "firestore"

    def __init__(self, db, collection: str = "saarthi_state"):
        self.db = db
        self.collection = collection

    def read(self, key: str) -> Optional[Any]:
        doc = self.db.collection(self.collection).document(key).get()
        if not doc.exists:
            return None
        return (doc.to_dict() or {}).get("value")

    def write(self, key: str, value: Any) -> None:
        self.db.collection(self.collection).document(key).set({"value": value})


class StateStorage:
    """
    Result-returning wrapper around a StateBackend with in-memory fallback.
    """

    def __init__(self, backend: StateBackend):
        self.backend = backend
        self.degraded = False
        self._fallback: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def _degrade(self, operation: str, key: str, error: Exception) -> None:
        if not self.degraded:
            logger.warning(
                f"⚠️ Persistence unavailable ({self.backend.name} {operation} '{key}' failed: {error}). "
                f"Continuing with in-memory copy for the rest of the session."
            )
        self.degraded = True

    def load(self, key: str) -> Result[Any]:
        """
        Read a collection.

        Returns:
            Result with the stored value (None when absent), or a
            PERSISTENCE_UNAVAILABLE failure carrying the fallback copy
        """
        with self._lock:
            if self.degraded:
                return Result.success(copy.deepcopy(self._fallback.get(key)))
            try:
                value = self.backend.read(key)
            except Exception as e:
                self._degrade("read", key, e)
                return Result(
                    value=copy.deepcopy(self._fallback.get(key)),
                    error=ErrorKind.PERSISTENCE_UNAVAILABLE,
                    message=str(e),
                )
            return Result.success(value)

    def save(self, key: str, value: Any) -> Result[None]:
        """
        Write a whole collection.

        The fallback copy is always refreshed, so a later degradation still
        serves the latest data.
        """
        with self._lock:
            self._fallback[key] = copy.deepcopy(value)
            if self.degraded:
                return Result.failure(ErrorKind.PERSISTENCE_UNAVAILABLE, "storage degraded")
            try:
                self.backend.write(key, value)
            except Exception as e:
                self._degrade("write", key, e)
                return Result.failure(ErrorKind.PERSISTENCE_UNAVAILABLE, str(e))
            return Result.success()

    def status(self) -> Dict[str, Any]:
        return {"backend": self.backend.name, "degraded": self.degraded}


def create_state_storage() -> StateStorage:
    """
    Build the storage configured in settings.

    Rules:
    - USE_MOCK_DB: JSON file at MOCK_DB_PATH.
    - Otherwise Firestore; if it cannot be initialized, fall back to memory.
    - Never raises.
    """
    if settings.USE_MOCK_DB:
        logger.info(f"Using mock state file: {settings.MOCK_DB_PATH}")
        return StateStorage(JsonFileStateBackend(settings.MOCK_DB_PATH))

    try:
        from saarthi.config.firebase import get_db
        backend: StateBackend = FirestoreStateBackend(get_db(), settings.STATE_COLLECTION)
        logger.info("Using Firestore state storage")
    except Exception as e:
        logger.warning(f"⚠️ Firestore unavailable, using in-memory storage: {e}")
        backend = MemoryStateBackend()
    return StateStorage(backend)
