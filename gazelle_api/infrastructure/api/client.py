"""HTTP implementation of the Gazelle client interface.

Each operation builds its wire call and delegates to the RequestExecutor,
which owns rate limiting, classification and error mapping.
"""

import logging
from pathlib import Path
from typing import Any, Optional

from gazelle_api.domain.errors import GazelleError
from gazelle_api.domain.interfaces.filesystem import FileSystem
from gazelle_api.domain.interfaces.gazelle_client import GazelleClientInterface
from gazelle_api.domain.models.common import (
    AJAX_PATH,
    TORRENT_CONTENT_TYPE,
    GroupId,
    TorrentId,
    UserId,
)
from gazelle_api.domain.models.torrent import GroupResponse, TorrentResponse
from gazelle_api.domain.models.upload import (
    NewSourceUploadForm,
    TextFields,
    UploadForm,
    UploadResponse,
    group_text_fields,
)
from gazelle_api.domain.models.user import User
from gazelle_api.infrastructure.api.executor import RequestExecutor
from gazelle_api.infrastructure.filesystem.local_fs import LocalFileSystem

logger = logging.getLogger(__name__)


class GazelleClient(GazelleClientInterface):
    """Client for a single Gazelle indexer.

    Safe to share across concurrent tasks; all calls go through one rate
    limiter. Use as an async context manager, or call ``close()``, to release
    the underlying HTTP connection pool.
    """

    def __init__(self, executor: RequestExecutor, file_system: Optional[FileSystem] = None):
        self.executor = executor
        self.file_system = file_system or LocalFileSystem()

    async def __aenter__(self) -> "GazelleClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.executor.http_client.aclose()

    async def get_torrent(self, torrent_id: TorrentId) -> TorrentResponse:
        return await self.executor.execute(
            "GET", AJAX_PATH,
            params={"action": "torrent", "id": torrent_id},
            parse=TorrentResponse.from_dict,
        )

    async def get_torrent_group(self, group_id: GroupId) -> GroupResponse:
        return await self.executor.execute(
            "GET", AJAX_PATH,
            params={"action": "torrentgroup", "id": group_id},
            parse=GroupResponse.from_dict,
        )

    async def get_user(self, user_id: UserId) -> User:
        return await self.executor.execute(
            "GET", AJAX_PATH,
            params={"action": "user", "id": user_id},
            parse=User.from_dict,
        )

    async def download_torrent(self, torrent_id: TorrentId) -> bytes:
        return await self.executor.download(
            AJAX_PATH, params={"action": "download", "id": torrent_id},
        )

    async def upload_torrent(self, form: UploadForm) -> UploadResponse:
        return await self._upload(form.path, form.to_text_fields())

    async def upload_new_source(self, form: NewSourceUploadForm) -> UploadResponse:
        return await self._upload(form.path, form.to_text_fields())

    async def peek_wait(self) -> Optional[float]:
        return await self.executor.rate_limiter.peek_wait()

    async def _upload(self, path: Path, fields: TextFields) -> UploadResponse:
        # The file is read before the rate limiter is touched
        try:
            content = await self.file_system.read_bytes(path)
        except OSError as e:
            logger.error(f"Could not read torrent file {path}: {e}")
            raise GazelleError.upload(e) from e
        files = {"file_input": (Path(path).name, content, TORRENT_CONTENT_TYPE)}
        return await self.executor.execute(
            "POST", AJAX_PATH,
            params={"action": "upload"},
            data=group_text_fields(fields),
            files=files,
            parse=UploadResponse.from_dict,
        )
