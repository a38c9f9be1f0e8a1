"""Interface for interacting with the file system.

Defines the contract for the few file operations the client needs: reading
a .torrent before upload and writing one after download.
"""

import abc
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


class FileSystem(abc.ABC):
    """Abstract Base Class for file system operations."""

    @abc.abstractmethod
    async def read_bytes(self, file_path: PathLike) -> bytes:
        """Reads the entire content of a file asynchronously.

        Args:
            file_path: The path to the file to read.

        Returns:
            The raw content of the file.

        Raises:
            OSError: If the file is missing or cannot be read.
        """
        pass

    @abc.abstractmethod
    async def write_bytes(self, file_path: PathLike, content: bytes) -> None:
        """Writes content to a file asynchronously, overwriting if it exists.

        Raises:
            OSError: If the file cannot be written.
        """
        pass

    @abc.abstractmethod
    async def read_text(self, file_path: PathLike) -> str:
        """Reads a UTF-8 text file asynchronously.

        Raises:
            OSError: If the file is missing or cannot be read.
        """
        pass
