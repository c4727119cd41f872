# footy/store.py
from __future__ import annotations
import copy
import json
import os
import stat
import tempfile
from typing import Any, Dict, Optional

from jsonschema import validate

from footy import config
from footy.errors import InvalidCategory, PersistenceError
from footy.logging_config import get_logger
from footy.models import Subscriptions

logger = get_logger(__name__)

SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schemas", "subscriptions.schema.json")
NEW_FILE_MODE = 0o644

def _load_schema() -> Dict[str, Any]:
    with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
        return json.load(f)

def resolve_bucket(category: str) -> str:
    """Map a category name (any case) onto its bucket, e.g. 'Team' -> 'teams'."""
    key = category.strip().lower() if isinstance(category, str) else ""
    bucket = config.CATEGORY_BUCKETS.get(key)
    if bucket is None:
        raise InvalidCategory(category)
    return bucket

# ------------------ storage backends -----------------------------------------

class JsonFileStorage:
    """Subscriptions as one indented JSON document on disk."""

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path or config.SUBSCRIPTIONS_PATH

    def load(self) -> Optional[Dict[str, Any]]:
        """Parsed document, or None when the file does not exist yet."""
        if not os.path.exists(self.path):
            return None
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _mode(self) -> int:
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            return NEW_FILE_MODE

    def save(self, data: Dict[str, Any]) -> None:
        # write-then-rename so a reader never sees a half-written file
        directory = os.path.dirname(os.path.abspath(self.path))
        mode = self._mode()
        fd, tmp = tempfile.mkstemp(prefix=".subscriptions-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            # mkstemp creates 0600; keep the mode the document already had
            os.chmod(tmp, mode)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

class MemoryStorage:
    """In-process stand-in for JsonFileStorage."""

    def __init__(self, data: Optional[Dict[str, Any]] = None) -> None:
        self.data = copy.deepcopy(data) if data is not None else None
        self.saves = 0

    def load(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self.data) if self.data is not None else None

    def save(self, data: Dict[str, Any]) -> None:
        self.data = copy.deepcopy(data)
        self.saves += 1

# ------------------ store ----------------------------------------------------

class SubscriptionStore:
    """
    CRUD over the subscription document.

    Every mutation reads the whole document, changes one bucket and writes the
    whole document back. There is no locking: two concurrent writers race and
    the last write wins.
    """

    def __init__(self, storage=None) -> None:
        self.storage = storage if storage is not None else JsonFileStorage()
        self._schema = _load_schema()

    def _read(self) -> Subscriptions:
        """Strict read: creates a missing document, raises on anything unreadable."""
        data = self.storage.load()
        if data is None:
            subs = Subscriptions()
            self.storage.save(subs.model_dump())
            logger.info("initialized empty subscriptions document")
            return subs
        validate(instance=data, schema=self._schema)
        return Subscriptions(**{k: data.get(k, []) for k in config.BUCKET_ORDER})

    def load(self) -> Subscriptions:
        """
        Current subscriptions; never raises.

        A missing document is created with four empty buckets. Any read,
        parse or validation failure is logged and an empty set is returned
        so the UI stays usable.
        """
        try:
            return self._read()
        except Exception as e:
            logger.error(
                "Error loading subscriptions: %s", e,
                extra={"event": "subscriptions.load_failed", "error": str(e), "file": getattr(self.storage, "path", None)},
            )
            return Subscriptions()

    def _read_for_update(self) -> Subscriptions:
        # a document that cannot be read is never overwritten
        try:
            return self._read()
        except Exception as e:
            logger.error(
                "Refusing to update unreadable subscriptions: %s", e,
                extra={"event": "subscriptions.update_refused", "error": str(e), "file": getattr(self.storage, "path", None)},
            )
            raise PersistenceError(f"Subscriptions could not be read, not overwriting: {e}") from e

    def _save(self, subs: Subscriptions) -> None:
        try:
            self.storage.save(subs.model_dump())
        except Exception as e:
            logger.error(
                "Error saving subscriptions: %s", e,
                extra={"event": "subscriptions.save_failed", "error": str(e), "file": getattr(self.storage, "path", None)},
            )
            raise PersistenceError(f"Failed to save subscriptions: {e}") from e

    def add(self, term: str, category: str) -> bool:
        """Append term to the category bucket. False (and no write) if already there."""
        bucket = resolve_bucket(category)
        subs = self._read_for_update()
        terms = getattr(subs, bucket)
        if term in terms:
            return False
        terms.append(term)
        self._save(subs)
        logger.info("subscribed %r (%s)", term, bucket)
        return True

    def remove(self, term: str, category: str) -> None:
        """Drop every occurrence of term from the bucket; always writes."""
        bucket = resolve_bucket(category)
        subs = self._read_for_update()
        setattr(subs, bucket, [t for t in getattr(subs, bucket) if t != term])
        self._save(subs)
        logger.info("unsubscribed %r (%s)", term, bucket)
