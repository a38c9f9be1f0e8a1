"""Concrete implementation of the FileSystem interface for the local disk.

Uses `pathlib` for path handling and `aiofiles` for async I/O.
"""

import logging
from pathlib import Path

import aiofiles

from gazelle_api.domain.interfaces.filesystem import FileSystem, PathLike

logger = logging.getLogger(__name__)


class LocalFileSystem(FileSystem):
    """Implementation of FileSystem for the local disk."""

    async def read_bytes(self, file_path: PathLike) -> bytes:
        path = Path(file_path)
        logger.debug(f"Reading file: {path}")
        async with aiofiles.open(path, mode='rb') as f:
            content = await f.read()
        logger.debug(f"Read {len(content)} bytes from {path}")
        return content

    async def write_bytes(self, file_path: PathLike, content: bytes) -> None:
        """Writes the file, creating missing parent directories."""
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(path, mode='wb') as f:
            await f.write(content)
        logger.debug(f"Wrote {len(content)} bytes to {path}")

    async def read_text(self, file_path: PathLike) -> str:
        async with aiofiles.open(Path(file_path), mode='r', encoding='utf-8') as f:
            return await f.read()
