"""
Local JSON File Storage Implementation

DESIGN DECISION: A single local JSON file is the default backend because:
1. No database setup required
2. The user can open and back up the file directly
3. One ledger per user fits comfortably in one file

The file holds a JSON object mapping slot names to string values.
Writes go to a temporary file in the same directory which then replaces the
original with os.replace, so a crash mid-write leaves the previous file intact.

TRADEOFFS:
- Every write rewrites the whole file (fine for a personal ledger)
- No cross-process locking (single user, single session)
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_ledger.exceptions import CorruptStateError, PersistenceError
from finance_ledger.services.storage.interface import KeyValueStoreInterface


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value slots kept in one JSON document on disk.

    OS-level failures are retried with exponential backoff before being
    raised as PersistenceError.
    """

    def __init__(
        self,
        path: Union[str, Path],
        retry_attempts: int = 3,
        retry_wait_seconds: float = 0.5,
    ):
        self._path = Path(path)
        self._retry_attempts = retry_attempts
        self._retry_wait_seconds = retry_wait_seconds

    @property
    def path(self) -> Path:
        return self._path

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(
                multiplier=self._retry_wait_seconds,
                max=self._retry_wait_seconds * 8,
            ),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )

    def _read_document(self) -> dict[str, str]:
        """Read the whole file. A missing file is an empty document."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}

        if not raw.strip():
            return {}

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptStateError(f"Storage file {self._path} is not valid JSON: {e}")

        if not isinstance(document, dict) or not all(
            isinstance(value, str) for value in document.values()
        ):
            raise CorruptStateError(
                f"Storage file {self._path} does not hold a map of string slots"
            )
        return document

    def _write_document(self, document: dict[str, str]) -> None:
        """Atomically replace the file with ``document``."""
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=directory,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    def _run(self, operation, *args):
        try:
            return self._retrying()(operation, *args)
        except OSError as e:
            raise PersistenceError(f"Storage file {self._path} failed: {e}") from e
        except RetryError as e:
            raise PersistenceError(f"Storage file {self._path} failed: {e}") from e

    def _get_sync(self, key: str) -> Optional[str]:
        return self._run(self._read_document).get(key)

    def _set_sync(self, key: str, value: str) -> None:
        document = self._run(self._read_document)
        document[key] = value
        self._run(self._write_document, document)

    def _delete_sync(self, key: str) -> bool:
        document = self._run(self._read_document)
        if key not in document:
            return False
        del document[key]
        self._run(self._write_document, document)
        return True

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get_sync, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set_sync, key, value)

    async def delete(self, key: str) -> bool:
        return await asyncio.to_thread(self._delete_sync, key)
