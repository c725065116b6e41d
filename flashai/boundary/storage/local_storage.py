"""
Local upload storage.

Writes uploaded PDFs under the configured upload directory with a random
name so concurrent uploads of identically named files never collide.

Dependencies: pathlib, asyncio (stdlib)
System role: Boundary adapter for document file storage
"""

import asyncio
import logging
import uuid
from pathlib import Path

from flashai.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class LocalDocumentStorage:
    """Store uploaded documents on the local filesystem."""

    def __init__(self, upload_dir: str | Path) -> None:
        """
        Initialize storage.

        Args:
            upload_dir: Target directory (created on first save)
        """
        self._upload_dir = Path(upload_dir)

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    async def save(self, original_name: str, content: bytes) -> Path:
        """
        Persist file content.

        Args:
            original_name: Uploaded file name; only its extension is kept
            content: Raw file bytes

        Returns:
            Path: Location of the stored copy

        Raises:
            PersistenceError: Directory creation or write failed
        """
        suffix = Path(original_name).suffix.lower()
        target = self._upload_dir / f"{uuid.uuid4()}{suffix}"

        try:
            await asyncio.to_thread(self._write, target, content)
        except OSError as e:
            raise PersistenceError(f"store file: {e}", operation="save") from e

        logger.debug(
            f"{__name__}:save - Stored upload",
            extra={"original_name": original_name, "stored_path": str(target)},
        )
        return target

    def _write(self, target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
