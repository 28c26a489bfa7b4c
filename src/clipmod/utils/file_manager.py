import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from clipmod.config import default_data_dir

logger = logging.getLogger(__name__)


class FileManager:

    def __init__(self, base_dir: Optional[Path] = None):
        if base_dir is None:
            base_dir = default_data_dir()
        self.base_dir = Path(base_dir)

    def ensure_dir(self) -> Path:
        if not self.base_dir.exists():
            self.base_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory {self.base_dir}")
        return self.base_dir

    def path_for(self, file_name: str) -> Path:
        return self.base_dir / file_name

    def read_bytes(self, file_name: str) -> Optional[bytes]:
        file_path = self.path_for(file_name)
        try:
            return file_path.read_bytes()
        except FileNotFoundError:
            return None

    def write_atomic(self, file_name: str, payload: bytes) -> Path:
        """Replace ``file_name`` with ``payload`` so readers see the old or the new file, never a partial one."""
        self.ensure_dir()
        file_path = self.path_for(file_name)

        fd, temp_name = tempfile.mkstemp(
            prefix=f".{file_path.name}.", suffix=".tmp", dir=self.base_dir)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_name, file_path)
        except BaseException:
            try:
                os.unlink(temp_name)
            except OSError:
                pass
            raise

        logger.debug(f"Wrote {len(payload)} bytes to {file_path}")
        return file_path

    def cleanup_temp_files(self) -> int:
        """Remove temp files left behind by an interrupted write."""
        removed = 0
        if not self.base_dir.exists():
            return removed
        for file_path in self.base_dir.glob(".*.tmp"):
            try:
                file_path.unlink()
                removed += 1
                logger.info(f"Cleaned up stale temp file: {file_path}")
            except OSError as e:
                logger.warning(f"Could not remove {file_path}: {e}")
        return removed
