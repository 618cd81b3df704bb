"""Session directories that hold type definitions and instance data."""

from __future__ import annotations

import atexit
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any

from typed_records.errors import StorageIOError

logger = logging.getLogger(__name__)


class Session:
    """A base directory for one run of a program.

    Without a path, a fresh temporary directory is allocated and removed on
    close (and at interpreter exit) unless ``keep`` is set. A supplied path
    is created if needed and never removed.
    """

    def __init__(
        self, path: Path | str | None = None, keep: bool = False, prefix: str = "typed_records_"
    ) -> None:
        self.keep = keep
        self.owned = path is None
        try:
            if path is None:
                self.path = Path(tempfile.mkdtemp(prefix=prefix))
            else:
                self.path = Path(path)
                self.path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"Failed to create session directory: {e}", str(path)) from e
        self._closed = False

        if self.owned and not self.keep:
            atexit.register(self.close)
        logger.debug("Session directory %s (owned=%s, keep=%s)", self.path, self.owned, keep)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the session, removing an owned temporary directory."""
        if self._closed:
            return
        self._closed = True
        if self.owned and not self.keep:
            atexit.unregister(self.close)
            shutil.rmtree(self.path, ignore_errors=True)
            logger.debug("Removed session directory %s", self.path)

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Session({str(self.path)!r})"
