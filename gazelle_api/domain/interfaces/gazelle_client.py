"""Interface for Gazelle API clients.

Defines the contract shared by the HTTP client and the mock client, so
consumers can swap one for the other in their tests.
"""

import abc
from typing import Optional

from ..models.common import GroupId, TorrentId, UserId
from ..models.torrent import GroupResponse, TorrentResponse
from ..models.upload import NewSourceUploadForm, UploadForm, UploadResponse
from ..models.user import User


class GazelleClientInterface(abc.ABC):
    """Abstract Base Class for the operations a Gazelle tracker exposes.

    Every operation either returns its typed result or raises exactly one
    ``GazelleError``.
    """

    @abc.abstractmethod
    async def get_torrent(self, torrent_id: TorrentId) -> TorrentResponse:
        """Gets a torrent and its group by torrent id."""
        pass

    @abc.abstractmethod
    async def get_torrent_group(self, group_id: GroupId) -> GroupResponse:
        """Gets a torrent group with all of its torrents."""
        pass

    @abc.abstractmethod
    async def get_user(self, user_id: UserId) -> User:
        pass

    @abc.abstractmethod
    async def download_torrent(self, torrent_id: TorrentId) -> bytes:
        """Downloads the .torrent file content.

        Returns:
            The raw bytes of the .torrent file.
        """
        pass

    @abc.abstractmethod
    async def upload_torrent(self, form: UploadForm) -> UploadResponse:
        """Uploads a new format to an existing group."""
        pass

    @abc.abstractmethod
    async def upload_new_source(self, form: NewSourceUploadForm) -> UploadResponse:
        """Uploads a new source, creating a new group."""
        pass

    async def peek_wait(self) -> Optional[float]:
        """Seconds the next request would wait for capacity, or None."""
        return None

    async def close(self) -> None:
        """Releases network resources held by the client."""
        return None
