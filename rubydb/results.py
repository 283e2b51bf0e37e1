"""Outcome objects for document loads and saves."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Why a load or save did not succeed."""
    MISSING = "missing"
    READ = "read"
    PARSE = "parse"
    SHAPE = "shape"
    WRITE = "write"
    SERIALIZE = "serialize"


class StoreError(Exception):
    """Raised by ``raise_for_error()`` when a caller opts into exceptions."""

    def __init__(self, kind: ErrorKind, path: Path, message: str):
        super().__init__(f"{kind.value} error for {path}: {message}")
        self.kind = kind
        self.path = path


@dataclass
class LoadResult:
    """Document read from disk, or the reason it could not be read.

    ``document`` is always usable: on failure it is an empty mapping.
    """
    path: Path
    document: dict[str, Any] = field(default_factory=dict)
    error_kind: Optional[ErrorKind] = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    def raise_for_error(self) -> None:
        if self.error_kind is not None:
            raise StoreError(self.error_kind, self.path, self.error)


@dataclass
class PersistResult:
    """Outcome of writing the in-memory document to its backing file."""
    path: Path
    error_kind: Optional[ErrorKind] = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    def raise_for_error(self) -> None:
        if self.error_kind is not None:
            raise StoreError(self.error_kind, self.path, self.error)
