"""JSON file-backed document store with named record collections."""

import contextlib
import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Optional

from .results import ErrorKind, LoadResult, PersistResult

logger = logging.getLogger(__name__)

Record = Any
Predicate = Callable[[Record], bool]

DEFAULT_COLLECTION = "default"
DEFAULT_RECORD = {"key": "This is a default key.", "value": "This is a default value."}
PRETTY_INDENT = 2


def load_document(path: str | Path) -> LoadResult:
    """Read and parse the JSON document at ``path``.

    Never raises for I/O or parse problems; the returned result carries an
    empty document and the error kind instead.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("Could not load %s: file does not exist", path)
        return LoadResult(path, error_kind=ErrorKind.MISSING, error="file does not exist")
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not load %s: %s", path, e)
        return LoadResult(path, error_kind=ErrorKind.READ, error=str(e))
    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.warning("Could not parse %s: %s", path, e)
        return LoadResult(path, error_kind=ErrorKind.PARSE, error=str(e))
    if not isinstance(document, dict):
        message = f"top level is {type(document).__name__}, expected object"
        logger.warning("Could not load %s: %s", path, message)
        return LoadResult(path, error_kind=ErrorKind.SHAPE, error=message)
    return LoadResult(path, document=document)


def write_document(path: str | Path, document: dict[str, Any],
                   prettify: bool = False, atomic: bool = True) -> PersistResult:
    """Serialize ``document`` and overwrite the file at ``path`` with it."""
    path = Path(path)
    try:
        if prettify:
            text = json.dumps(document, indent=PRETTY_INDENT, ensure_ascii=False)
        else:
            text = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError, RecursionError) as e:
        logger.error("Could not serialize document for %s: %s", path, e)
        return PersistResult(path, error_kind=ErrorKind.SERIALIZE, error=str(e))

    tmp_path = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if atomic:
            tmp_path = path.with_suffix(path.suffix + ".tmp")
            tmp_path.write_text(text, encoding="utf-8")
            os.replace(tmp_path, path)
        else:
            path.write_text(text, encoding="utf-8")
    except (OSError, ValueError) as e:
        logger.error("Could not save %s: %s", path, e)
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
        return PersistResult(path, error_kind=ErrorKind.WRITE, error=str(e))
    logger.debug("Saved %s (%d bytes)", path, len(text))
    return PersistResult(path)


def _matches(record: Record, field: str, key: Any) -> bool:
    return isinstance(record, Mapping) and field in record and str(record[field]) == str(key)


class DocumentStore:
    """Named collections of records kept in one JSON file.

    The whole file is loaded on construction and rewritten after every
    mutation. Load and save problems are logged and reported through
    ``LoadResult`` / ``PersistResult`` rather than raised.

    Usage:
        store = DocumentStore("data/app.json", prettify=True)
        store.insert("users", {"key": "u1", "name": "Alice"})
        store.query("users", "key", "u1")  # -> {"key": "u1", "name": "Alice"}
        store.delete("users", "key", "u1")
        store.delete_collection("users")
    """

    def __init__(self, path: str | Path, prettify: bool = False,
                 seed_default: bool = True, atomic: bool = True):
        self._path = Path(path)
        self._prettify = prettify
        self._atomic = atomic
        if seed_default and not self._path.exists():
            self._seed()
        self.last_load: LoadResult = load_document(self._path)
        self._data: dict[str, Any] = self.last_load.document

    @property
    def path(self) -> Path:
        return self._path

    @property
    def prettify(self) -> bool:
        return self._prettify

    def get_collection(self, name: str) -> list:
        """Return the live list for ``name``, creating an empty one if missing.

        The new empty collection is not written until the next save.
        """
        current = self._data.get(name)
        if not isinstance(current, list):
            if current is not None:
                logger.warning("Collection %r in %s is not a list, resetting it", name, self._path)
            current = []
            self._data[name] = current
        return current

    def insert(self, collection: str, item: Record) -> PersistResult:
        """Upsert ``item`` by its ``key`` field, keeping the original position."""
        records = self.get_collection(collection)
        if isinstance(item, Mapping) and "key" in item:
            for i, existing in enumerate(records):
                if isinstance(existing, Mapping) and "key" in existing and existing["key"] == item["key"]:
                    records[i] = item
                    break
            else:
                records.append(item)
        else:
            records.append(item)
        return self.save()

    def delete(self, collection: str, field: str, key: Any) -> Optional[PersistResult]:
        """Remove the first record whose ``field`` equals ``key``.

        Returns None, without touching the file, when nothing matched.
        """
        records = self.get_collection(collection)
        for i, record in enumerate(records):
            if _matches(record, field, key):
                del records[i]
                return self.save()
        return None

    def delete_where(self, collection: str, predicate: Predicate) -> PersistResult:
        """Remove every record for which ``predicate`` is true."""
        records = self.get_collection(collection)
        records[:] = [r for r in records if not predicate(r)]
        return self.save()

    def keep_where(self, collection: str, predicate: Predicate) -> PersistResult:
        """Keep only the records for which ``predicate`` is true."""
        records = self.get_collection(collection)
        records[:] = [r for r in records if predicate(r)]
        return self.save()

    def query(self, collection: str, field: str, key: Any) -> Optional[Record]:
        """Return the first record whose ``field`` equals ``key``, or None.

        Both sides are compared as strings, so a null field matches "None"
        and a boolean true matches "True".
        """
        records = self._data.get(collection)
        if not isinstance(records, list):
            return None
        for record in records:
            if _matches(record, field, key):
                return record
        return None

    def find(self, collection: str, predicate: Predicate) -> list:
        records = self._data.get(collection)
        if not isinstance(records, list):
            return []
        return [r for r in records if predicate(r)]

    def delete_collection(self, collection: str) -> PersistResult:
        self._data.pop(collection, None)
        return self.save()

    def collections(self) -> list[str]:
        return list(self._data)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def save(self) -> PersistResult:
        """Write the full in-memory document to disk."""
        return write_document(self._path, self._data, prettify=self._prettify, atomic=self._atomic)

    def reload(self) -> LoadResult:
        """Discard in-memory state and read the backing file again."""
        self.last_load = load_document(self._path)
        self._data = self.last_load.document
        return self.last_load

    def _seed(self) -> None:
        seed = {DEFAULT_COLLECTION: [dict(DEFAULT_RECORD)]}
        result = write_document(self._path, seed, prettify=self._prettify, atomic=self._atomic)
        if result.ok:
            logger.info("Created %s with a %r collection", self._path, DEFAULT_COLLECTION)
