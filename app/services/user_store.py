"""File-backed user store: in-memory collection persisted as one JSON array."""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any

from app.models.user import UserRecord

logger = logging.getLogger(__name__)


class StoreNotInitializedError(Exception):
    """Raised when the store is used before init() has loaded the data file."""

    def __init__(self, message: str = "UserStore.init() must be called before use") -> None:
        self.message = message
        super().__init__(message)


class DuplicateIdentifierError(Exception):
    """Raised when a save would give two records the same unique field (username)."""

    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        self.message = f"User already exists with {field}: {value}"
        super().__init__(self.message)


class UserStore:
    """
    Process-local CRUD over UserRecord with a monotonic id counter.

    Records live in an insertion-ordered dict keyed by id. A single re-entrant lock
    covers the id counter, reads, mutations and the file rewrite that follows each
    mutation, so the file always reflects the last applied in-memory state.

    Persistence failures are logged and never raised; the in-memory state stays
    authoritative for the rest of the process lifetime. Two stores must not share
    a data file.
    """

    def __init__(self, data_file: str | os.PathLike[str]) -> None:
        self._path = Path(data_file)
        self._lock = threading.RLock()
        self._users: dict[int, UserRecord] = {}
        self._next_id = 1
        self._ready = False
        self._load_failed = False

    @property
    def data_file(self) -> Path:
        return self._path

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def load_failed(self) -> bool:
        """True if init() found a data file it could not parse and started empty."""
        return self._load_failed

    @property
    def next_id(self) -> int:
        """Id the next absent-id save will receive."""
        with self._lock:
            return self._next_id

    def init(self) -> None:
        """Load records from the data file and position the id counter after the max id."""
        with self._lock:
            self._load_failed = False
            self._users = self._load()
            self._next_id = max(self._users, default=0) + 1
            self._ready = True
            logger.info(
                "User store ready: file=%s, users=%s, next_id=%s",
                self._path,
                len(self._users),
                self._next_id,
            )

    def find_all(self) -> list[UserRecord]:
        """Snapshot of all records in insertion order; safe to mutate."""
        with self._lock:
            self._ensure_ready()
            return [u.model_copy(deep=True) for u in self._users.values()]

    def find_by_id(self, user_id: int) -> UserRecord | None:
        with self._lock:
            self._ensure_ready()
            user = self._users.get(user_id)
            return user.model_copy(deep=True) if user is not None else None

    def find_by_username(self, username: str) -> UserRecord | None:
        """Case-sensitive exact match; first in insertion order."""
        with self._lock:
            self._ensure_ready()
            user = self._first_with_username(username)
            return user.model_copy(deep=True) if user is not None else None

    def exists_by_username(self, username: str) -> bool:
        with self._lock:
            self._ensure_ready()
            return self._first_with_username(username) is not None

    def count(self) -> int:
        with self._lock:
            self._ensure_ready()
            return len(self._users)

    def save(self, record: UserRecord) -> UserRecord:
        """
        Create or replace a record, then rewrite the data file.

        - id absent: assign the next id and append.
        - id known: replace in place (position preserved).
        - id unknown: append with the caller's id; the counter moves past it.

        Raises DuplicateIdentifierError if another record already has the username.
        """
        with self._lock:
            self._ensure_ready()
            self._check_username_available(record)
            stored = record.model_copy(deep=True)
            if stored.id is None:
                stored.id = self._next_id
                self._next_id += 1
            elif stored.id not in self._users:
                self._next_id = max(self._next_id, stored.id + 1)
            self._users[stored.id] = stored
            self._persist()
            return stored.model_copy(deep=True)

    def update(self, user_id: int, changes: dict[str, Any]) -> UserRecord | None:
        """
        Merge changes into an existing record and rewrite the data file.

        Lookup, merge and write happen under one lock hold, so a concurrent delete
        cannot be undone and concurrent updates cannot drop each other's fields.
        Returns None if no record has user_id; the id is never created here.
        Raises DuplicateIdentifierError if the new username belongs to another record.
        """
        with self._lock:
            self._ensure_ready()
            current = self._users.get(user_id)
            if current is None:
                return None
            updated = UserRecord.model_validate({**current.model_dump(), **changes, "id": user_id})
            self._check_username_available(updated)
            self._users[user_id] = updated
            self._persist()
            return updated.model_copy(deep=True)

    def delete_by_id(self, user_id: int) -> bool:
        """Remove the record and rewrite the data file; False if no such id."""
        with self._lock:
            self._ensure_ready()
            if self._users.pop(user_id, None) is None:
                return False
            self._persist()
            return True

    def is_data_file_accessible(self) -> bool:
        """True if the data file is absent (created on first write) or readable."""
        return not self._path.exists() or (self._path.is_file() and os.access(self._path, os.R_OK))

    def _ensure_ready(self) -> None:
        if not self._ready:
            raise StoreNotInitializedError()

    def _first_with_username(self, username: str) -> UserRecord | None:
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    def _check_username_available(self, record: UserRecord) -> None:
        if record.username is None:
            return
        # Records loaded with a shared username stay writable as long as they keep it.
        current = self._users.get(record.id) if record.id is not None else None
        if current is not None and current.username == record.username:
            return
        for user in self._users.values():
            if user.username == record.username and user.id != record.id:
                raise DuplicateIdentifierError("username", record.username)

    def _load(self) -> dict[int, UserRecord]:
        if not self._path.exists():
            logger.info("User data file %s not found; starting with an empty store", self._path)
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise ValueError("expected a JSON array of user objects")
            users: dict[int, UserRecord] = {}
            for item in raw:
                user = UserRecord.model_validate(item)
                if user.id is None:
                    raise ValueError("user record without id")
                if user.id in users:
                    raise ValueError(f"duplicate user id {user.id}")
                users[user.id] = user
            return users
        except (OSError, ValueError) as e:
            logger.error("Error loading users from %s: %s; starting with an empty store", self._path, e)
            self._load_failed = True
            return {}

    def _persist(self) -> None:
        payload = [u.model_dump(mode="json") for u in self._users.values()]
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError:
            logger.exception("Error saving users to %s; in-memory state kept", self._path)
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                logger.warning("Could not remove temporary file %s", tmp_path)
