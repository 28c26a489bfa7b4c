import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import ValidationError

from clipmod.config import default_data_dir, HISTORY_FILE_NAME
from clipmod.exceptions import HistoryFileError
from clipmod.models.entry import ClipboardEntry, ENTRY_LIST_ADAPTER
from clipmod.utils.file_manager import FileManager

logger = logging.getLogger(__name__)


class HistoryFile:
    """JSON file holding the full clipboard history.

    The file is an array of ``{"content", "date", "hash"}`` objects in
    chronological order. Every save rewrites the whole array through a
    temp file and a rename.
    """

    def __init__(self, path: Optional[Path] = None):
        if path is None:
            path = default_data_dir() / HISTORY_FILE_NAME
        self.path = Path(path)
        self.file_manager = FileManager(self.path.parent)

    def save(self, entries: Sequence[ClipboardEntry]) -> None:
        payload = json.dumps(
            [entry.to_dict() for entry in entries],
            ensure_ascii=False,
            indent=2,
        ).encode("utf-8")

        try:
            self.file_manager.write_atomic(self.path.name, payload)
        except OSError as e:
            raise HistoryFileError(f"Could not write {self.path}", e) from e

    def load(self) -> List[ClipboardEntry]:
        try:
            data = self.file_manager.read_bytes(self.path.name)
        except OSError as e:
            raise HistoryFileError(f"Could not read {self.path}", e) from e

        if data is None:
            return []

        try:
            return ENTRY_LIST_ADAPTER.validate_json(data)
        except ValidationError as e:
            raise HistoryFileError(f"Invalid history file {self.path}", e) from e
