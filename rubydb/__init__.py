"""Flat-file JSON document store with named record collections."""

from .results import ErrorKind, LoadResult, PersistResult, StoreError
from .store import DocumentStore, load_document, write_document

__all__ = [
    "DocumentStore",
    "ErrorKind",
    "LoadResult",
    "PersistResult",
    "StoreError",
    "load_document",
    "write_document",
]
