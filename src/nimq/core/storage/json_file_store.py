import json
import logging
import os
import tempfile
from typing import Dict, Optional

from nimq.core.abstract.storage.base_key_value_store import BaseKeyValueStore

logger = logging.getLogger("NIMQ-Storage")


class JsonFileKeyValueStore(BaseKeyValueStore):
    """
    Key-value store backed by a single JSON object on disk.

    Writes rewrite the whole file through a temporary sibling and ``os.replace``,
    so readers only ever see a complete snapshot.
    """

    def __init__(self, file_path: str):
        self.file_path = file_path

    def _read_all(self) -> Dict[str, str]:
        if not os.path.isfile(self.file_path):
            return {}

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable storage file {self.file_path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring storage file {self.file_path}: top level is not an object")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.file_path))
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(prefix=".nimq-", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.file_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(file_path='{self.file_path}')"
