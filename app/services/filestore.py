# app/services/filestore.py
import logging
import os
from pathlib import Path

from app.errors import NotFound, StorageIOError
from app.services.paths import PathResolver, ResolvedLocation

logger = logging.getLogger(__name__)

# Errors meaning "nothing readable/removable at that location"
_MISSING = (FileNotFoundError, NotADirectoryError, IsADirectoryError)


class FileStore:
    """
    Create/read/delete text files under the storage root.

    Create has overwrite semantics: there is no separate update, and no
    existence check before writing. Nothing here is atomic; a failed write
    may leave a truncated file behind.
    """

    def __init__(self, resolver: PathResolver, dir_mode: int = 0o755,
                 file_mode: int = 0o644):
        self.resolver = resolver
        self.dir_mode = dir_mode
        self.file_mode = file_mode
        self._ensure_root()

    @property
    def root(self) -> Path:
        return self.resolver.root

    def _ensure_root(self):
        if not self.root.exists():
            self.root.mkdir(parents=True, mode=self.dir_mode)
            logger.info("Storage root %s did not exist - it has been created", self.root)

    def create(self, location: ResolvedLocation, data: str) -> None:
        try:
            location.directory.mkdir(parents=True, exist_ok=True, mode=self.dir_mode)
        except OSError as e:
            raise StorageIOError(f"Cannot create directory {location.directory}: {e}") from e

        try:
            fd = os.open(location.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, self.file_mode)
            with os.fdopen(fd, "wb") as f:
                f.write(data.encode("utf-8"))
        except OSError as e:
            raise StorageIOError(f"Cannot write {location.path}: {e}") from e

        logger.debug("wrote %s", location.path)

    def read(self, location: ResolvedLocation) -> str:
        try:
            raw = location.path.read_bytes()
        except _MISSING as e:
            raise NotFound(f"File not found: {location.path}") from e
        except OSError as e:
            raise StorageIOError(f"Cannot read {location.path}: {e}") from e

        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise StorageIOError(f"File is not valid UTF-8 text: {location.path}") from e

    def delete(self, location: ResolvedLocation) -> None:
        try:
            location.path.unlink()
        except _MISSING as e:
            raise NotFound(f"File not found: {location.path}") from e
        except OSError as e:
            raise StorageIOError(f"Cannot delete {location.path}: {e}") from e

        logger.debug("deleted %s", location.path)
