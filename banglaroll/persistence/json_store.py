"""
JSON file-based voter storage.

All voters live in one flat JSON array (``data/voters.json`` by default).
The file is loaded lazily, kept in memory, and rewritten atomically
after every change so a crash never leaves a half-written store.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Iterable, List, Optional

from .repository import VoterRepository
from ..config import get_config
from ..exceptions import DataPersistenceError
from ..logger import get_logger
from ..models import VoterRecord

logger = get_logger(__name__)


class VoterStore(VoterRepository):
    """
    Flat JSON file voter store.

    Safe to share between threads in one process; concurrent processes
    writing the same file are not coordinated.
    """

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize JSON store.

        Args:
            path: Store file (default: configured store path)
        """
        self.path = Path(path) if path else get_config().store_path
        self._lock = threading.RLock()
        self._records: Optional[List[VoterRecord]] = None

    def _load(self) -> List[VoterRecord]:
        if self._records is not None:
            return self._records

        if not self.path.exists():
            self._records = []
            return self._records

        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except (OSError, json.JSONDecodeError) as e:
            raise DataPersistenceError(f"Cannot read voter store: {e}", str(self.path), "load") from e

        if not isinstance(data, list):
            raise DataPersistenceError("Voter store must contain a JSON array", str(self.path), "load")

        try:
            self._records = [VoterRecord.from_dict(item) for item in data]
        except (TypeError, ValueError) as e:
            raise DataPersistenceError(f"Invalid voter entry: {e}", str(self.path), "load") from e

        logger.debug(f"Loaded {len(self._records)} voters from {self.path}")
        return self._records

    def _save(self, records: List[VoterRecord]) -> None:
        payload = json.dumps([r.to_dict() for r in records], ensure_ascii=False, indent=2)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise DataPersistenceError(f"Cannot write voter store: {e}", str(self.path), "save") from e

        self._records = records
        logger.debug(f"Saved {len(records)} voters to {self.path}")

    def append(self, records: Iterable[VoterRecord]) -> int:
        records = list(records)
        with self._lock:
            if records:
                self._save(self._load() + records)
        return len(records)

    def all(self) -> List[VoterRecord]:
        with self._lock:
            return list(self._load())

    def clear(self) -> None:
        with self._lock:
            self._save([])
        logger.info(f"Cleared voter store {self.path}")

    def replace_all(self, records: Iterable[VoterRecord]) -> int:
        records = list(records)
        with self._lock:
            self._save(records)
        return len(records)
