"""
JSON Directory Storage Implementation

DESIGN DECISION: The ledger lives in a plain directory with one JSON file
per key because:
1. It mirrors the key-per-collection layout of the web app's local storage
2. Users can open and back up their data with any text editor
3. No database setup required

TRADEOFFS:
- The four collections are separate files, so a crash mid-save can leave
  them from different generations (each single file is replaced atomically)
- Every save rewrites every collection (fine at a contractor's volume)
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.services.storage.interface import CorruptSnapshotError, StorageError
from src.services.storage.key_value import KeyValueStorage, corrupt_key


class JsonFileStorage(KeyValueStorage):
    """
    Ledger and session storage in a directory of `<key>.json` files.

    Writes go to a temporary file in the same directory which then
    replaces the target, so a reader never sees a half-written file.
    """

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    def _read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptSnapshotError(key, f"not valid UTF-8 at byte {e.start}") from e

    def _write(self, key: str, document: str) -> None:
        try:
            self._replace_file(self.path_for(key), document)
        except OSError as e:
            raise StorageError(f"Failed to write {key}: {e}") from e

    def _remove(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove {key}: {e}") from e

    def _preserve(self, key: str) -> None:
        target = self.path_for(corrupt_key(key))
        try:
            shutil.copyfile(self.path_for(key), target)
        except OSError as e:
            raise StorageError(f"Failed to copy {key} to {target}: {e}") from e

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _replace_file(self, path: Path, document: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(document)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
