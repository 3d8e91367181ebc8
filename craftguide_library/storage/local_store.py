"""JSON-file key/value store.

Mirrors the browser ``localStorage`` contract: string keys, string values,
synchronous reads and writes. Each key lives in its own file under the
store directory and is replaced atomically (tmp + rename), so the last
writer wins.
"""

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class LocalStore:
    """String key/value persistence rooted at a directory."""

    def __init__(self, storage_dir: Path) -> None:
        """Initialize with storage directory.

        Args:
            storage_dir: Parent directory - a local_storage/ subdirectory is created in it
        """
        self.storage_dir = Path(storage_dir) / "local_storage"
        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            # Reads come back empty and writes fail (logged by callers)
            logger.error(f"Cannot create storage directory {self.storage_dir}; continuing without persistence: {e}")

    def _path_for(self, key: str) -> Path:
        if not key:
            raise ValueError("Storage key must not be empty")
        return self.storage_dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.value"

    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one atomically."""
        path = self._path_for(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)
        logger.debug(f"Stored {len(value)} chars under {key}")

    def remove_item(self, key: str) -> None:
        """Delete a key. Missing keys are ignored."""
        self._path_for(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        """List stored (sanitised) key names."""
        return sorted(path.stem for path in self.storage_dir.glob("*.value"))
