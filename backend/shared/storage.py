"""Local key-value storage for small client-side records.

Holds a handful of string values (today only the signed-in user record)
in one JSON object on disk. Match, room and user data never go here; they
live in memory only. The file is written with owner-only permissions
(0o600) via temp-file-then-rename, so readers never see a partial file.
"""

import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

_FILE_MODE = 0o600


class KeyValueStorage(Protocol):
    """Protocol for a persistent string key-value slot store."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class LocalKeyValueStorage:
    """JSON-file-backed key-value storage.

    Loads the whole file on every read so that several instances pointing at
    the same path agree. Raises OSError when an existing file cannot be read
    or parsed, rather than overwriting data it did not understand.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def _load(self) -> dict[str, str]:
        if not self._file_path.exists():
            return {}
        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, ValueError, OSError) as exc:
            msg = f"Failed to read storage file {self._file_path}"
            raise OSError(msg) from exc
        if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
            msg = f"Expected a JSON object of strings in {self._file_path}"
            raise OSError(msg)
        return data

    def _save(self, data: dict[str, str]) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")

        fd, tmp_path = tempfile.mkstemp(dir=self._file_path.parent, prefix=".storage_", suffix=".tmp")
        fd_owned = True
        try:
            with os.fdopen(fd, "wb") as f:
                fd_owned = False
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
                os.fchmod(f.fileno(), _FILE_MODE)
            Path(tmp_path).replace(self._file_path)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)
        logger.debug("storage item saved", key=key)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is None:
            return
        self._save(data)
        logger.debug("storage item removed", key=key)
