"""Document store and its process-wide instance.

All state lives in one JSON file. Every operation takes the store lock,
so reads and read-modify-write cycles observe a linear history in
arrival order. Writes go to a temporary file in the same directory and
are renamed over the target, so the file on disk is always a complete
document.

The store is created lazily on first use, like a database engine, and
can be swapped out through the ``get_store`` dependency.
"""

import asyncio
import json
import os
import tempfile
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from neuracare.config import settings
from neuracare.exceptions import StorageError
from neuracare.logging_config import get_logger
from neuracare.models.document import Document

logger = get_logger(__name__)

Mutator = Callable[[Document], Document | None | Awaitable[Document | None]]


class AtomicDocumentStore:
    """Single-file JSON document with exclusive, FIFO-ordered access."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        # asyncio.Lock wakes waiters in the order they arrived.
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def read(self) -> Document:
        """Return the current document, creating an empty one if missing.

        Raises:
            StorageError: If the file cannot be read or is not a valid
                document.
        """
        async with self._lock:
            return await asyncio.to_thread(self._load)

    async def write(self, doc: Document) -> Document:
        """Overwrite the document unconditionally.

        Raises:
            StorageError: If the document is invalid or cannot be persisted.
        """
        async with self._lock:
            await asyncio.to_thread(self._ensure_file)
            return await asyncio.to_thread(self._persist, doc)

    async def update(self, mutator: Mutator) -> Document:
        """Apply ``mutator`` to the current document and persist the result.

        The mutator gets a private copy. It may change it in place and
        return None, or return a replacement (sync or async). If it
        raises, nothing is written and the exception propagates.

        Returns:
            The document as persisted.

        Raises:
            StorageError: If the document cannot be read or persisted, or
                the mutator returns something other than a Document.
        """
        async with self._lock:
            current = await asyncio.to_thread(self._load)
            draft = current.model_copy(deep=True)

            result = mutator(draft)
            if isinstance(result, Awaitable):
                result = await result
            next_doc = draft if result is None else result
            if not isinstance(next_doc, Document):
                raise StorageError(
                    f"Mutator returned {type(result).__name__}, expected Document or None"
                )

            return await asyncio.to_thread(self._persist, next_doc)

    async def check_health(self) -> bool:
        """True if the document can be read."""
        try:
            await self.read()
            return True
        except StorageError:
            return False

    # ── Blocking helpers, run in a worker thread ──

    def _ensure_file(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            if not self._path.exists():
                logger.info("Initializing document store", path=str(self._path))
                self._replace_contents(Document().to_json_dict())
        except OSError as e:
            raise StorageError(f"Unable to initialize store at {self._path}: {e}") from e

    def _load(self) -> Document:
        self._ensure_file()
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Failed to read document store", path=str(self._path), error=str(e))
            raise StorageError(f"Unable to read store at {self._path}") from e

        if not raw.strip():
            return Document()

        try:
            return Document.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error("Document store is corrupt", path=str(self._path), error=str(e))
            raise StorageError(f"Store at {self._path} is not a valid document") from e

    def _persist(self, doc: Document) -> Document:
        data = doc.to_json_dict()
        try:
            # Round-trip so invariants are checked on what is written.
            validated = Document.model_validate(data)
        except ValidationError as e:
            raise StorageError(f"Refusing to persist invalid document: {e}") from e

        try:
            self._replace_contents(data)
        except OSError as e:
            logger.error("Failed to write document store", path=str(self._path), error=str(e))
            raise StorageError(f"Unable to write store at {self._path}") from e
        return validated

    def _replace_contents(self, data: dict) -> None:
        """Write ``data`` to a temp file beside the target, then rename over it."""
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


# Store instance - lazily initialized
_store: Optional[AtomicDocumentStore] = None


def get_store() -> AtomicDocumentStore:
    """Get or create the process-wide document store.

    Also used as a FastAPI dependency.
    """
    global _store
    if _store is None:
        _store = AtomicDocumentStore(settings.db_path)
    return _store


def reset_store() -> None:
    """Drop the process-wide store so the next call re-reads settings."""
    global _store
    _store = None
