"""Persistence layer - load and save documents through a document store.

The synchronization core never performs I/O. This module is the
boundary to the store: failures are logged and reported in result dicts,
never raised to the editing session, and never roll back in-memory text.

Public API
----------
- ``DocumentStore``             - protocol: ``load(user_id)`` / ``save(user_id, text)``
- ``FileDocumentStore``         - one UTF-8 file per user under a directory
- ``InMemoryDocumentStore``     - dict-backed store for tests and scratch sessions
- ``load_document``             - best-effort load, empty text on failure
- ``save_document``             - best-effort save
- ``check_for_external_changes``- detect edits made on disk after loading
"""

from __future__ import annotations

import logging
import os
import re
import time
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from linegraph.exceptions import StoreError

logger = logging.getLogger(__name__)

_USER_ID_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


@runtime_checkable
class DocumentStore(Protocol):
    """Remote or local storage for one document per user."""

    def load(self, user_id: str) -> str:
        """Return the user's document ("" when there is none).

        Raises:
            StoreError: If the document exists but cannot be read.
        """
        ...

    def save(self, user_id: str, text: str) -> None:
        """Replace the user's document.

        Raises:
            StoreError: If the document cannot be written.
        """
        ...


def _check_user_id(user_id: str) -> str:
    if not user_id or user_id in (".", "..") or not _USER_ID_RE.match(user_id):
        raise StoreError(f"Invalid user id: {user_id!r}")
    return user_id


class FileDocumentStore:
    """Store each user's document as ``<directory>/<user_id>.txt``."""

    suffix = ".txt"

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, user_id: str) -> Path:
        return self.directory / f"{_check_user_id(user_id)}{self.suffix}"

    def load(self, user_id: str) -> str:
        path = self.path_for(user_id)
        if not path.exists():
            return ""
        try:
            # newline="" keeps \r\n endings intact
            with path.open(encoding="utf-8", newline="") as fh:
                return fh.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StoreError(f"Cannot read {path}: {e}") from e

    def save(self, user_id: str, text: str) -> None:
        path = self.path_for(user_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8", newline="") as fh:
                fh.write(text)
        except OSError as e:
            raise StoreError(f"Cannot write {path}: {e}") from e

    def modified_time(self, user_id: str) -> float | None:
        path = self.path_for(user_id)
        try:
            return os.path.getmtime(path)
        except OSError:
            return None


class InMemoryDocumentStore:
    """Keep documents in a dict; nothing survives the process."""

    def __init__(self, documents: dict[str, str] | None = None) -> None:
        self.documents: dict[str, str] = dict(documents or {})

    def load(self, user_id: str) -> str:
        return self.documents.get(_check_user_id(user_id), "")

    def save(self, user_id: str, text: str) -> None:
        self.documents[_check_user_id(user_id)] = text


def load_document(store: DocumentStore, user_id: str) -> dict[str, Any]:
    """Load a user's document, treating failure as an empty document.

    Returns:
        Dict with:
        - success: bool
        - text: the document ("" on failure)
        - loaded_at: Unix timestamp of the load
        - error: error message (only on failure)
    """
    loaded_at = time.time()
    try:
        text = store.load(user_id)
    except StoreError as e:
        logger.warning("load failed for %s: %s", user_id, e)
        return {"success": False, "text": "", "loaded_at": loaded_at, "error": str(e)}
    logger.debug("loaded %d characters for %s", len(text), user_id)
    return {"success": True, "text": text, "loaded_at": loaded_at}


def save_document(store: DocumentStore, user_id: str, text: str) -> dict[str, Any]:
    """Save a user's document once, without retrying.

    Returns:
        Dict with:
        - success: bool
        - saved_at: Unix timestamp (only on success)
        - error: error message (only on failure)
    """
    try:
        store.save(user_id, text)
    except StoreError as e:
        logger.warning("save failed for %s: %s", user_id, e)
        return {"success": False, "error": str(e)}
    logger.debug("saved %d characters for %s", len(text), user_id)
    return {"success": True, "saved_at": time.time()}


def check_for_external_changes(store: DocumentStore, user_id: str, loaded_at: float) -> bool:
    """Return True if a file-backed document changed on disk after ``loaded_at``.

    Stores without modification times never report changes.
    """
    modified_time = getattr(store, "modified_time", None)
    if modified_time is None:
        return False
    try:
        mtime = modified_time(user_id)
    except StoreError:
        return False
    return mtime is not None and mtime > loaded_at
