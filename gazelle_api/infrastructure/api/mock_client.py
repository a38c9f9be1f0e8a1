"""In-memory GazelleClientInterface for consumers' tests.

Configure each operation with either a result or a GazelleError. Calling an
operation that was not configured raises RuntimeError.
"""

from typing import Any, Dict, List, Optional, Tuple, Union

from gazelle_api.domain.errors import GazelleError
from gazelle_api.domain.interfaces.gazelle_client import GazelleClientInterface
from gazelle_api.domain.models.common import GroupId, TorrentId, UserId
from gazelle_api.domain.models.torrent import GroupResponse, TorrentResponse
from gazelle_api.domain.models.upload import NewSourceUploadForm, UploadForm, UploadResponse
from gazelle_api.domain.models.user import User

Outcome = Union[Any, GazelleError]


class MockGazelleClient(GazelleClientInterface):
    """Returns canned outcomes and records every call as ``(operation, argument)``."""

    def __init__(self):
        self._returns: Dict[str, Outcome] = {}
        self.calls: List[Tuple[str, Any]] = []
        self.wait: Optional[float] = None

    def _configure(self, operation: str, outcome: Outcome) -> "MockGazelleClient":
        self._returns[operation] = outcome
        return self

    def with_get_torrent(self, outcome: Union[TorrentResponse, GazelleError]) -> "MockGazelleClient":
        return self._configure("get_torrent", outcome)

    def with_get_torrent_group(self, outcome: Union[GroupResponse, GazelleError]) -> "MockGazelleClient":
        return self._configure("get_torrent_group", outcome)

    def with_get_user(self, outcome: Union[User, GazelleError]) -> "MockGazelleClient":
        return self._configure("get_user", outcome)

    def with_download_torrent(self, outcome: Union[bytes, GazelleError]) -> "MockGazelleClient":
        return self._configure("download_torrent", outcome)

    def with_upload_torrent(self, outcome: Union[UploadResponse, GazelleError]) -> "MockGazelleClient":
        return self._configure("upload_torrent", outcome)

    def with_upload_new_source(self, outcome: Union[UploadResponse, GazelleError]) -> "MockGazelleClient":
        return self._configure("upload_new_source", outcome)

    def _respond(self, operation: str, argument: Any) -> Any:
        self.calls.append((operation, argument))
        if operation not in self._returns:
            raise RuntimeError(f"MockGazelleClient.{operation} has no configured result")
        outcome = self._returns[operation]
        if isinstance(outcome, GazelleError):
            raise outcome
        return outcome

    async def get_torrent(self, torrent_id: TorrentId) -> TorrentResponse:
        return self._respond("get_torrent", torrent_id)

    async def get_torrent_group(self, group_id: GroupId) -> GroupResponse:
        return self._respond("get_torrent_group", group_id)

    async def get_user(self, user_id: UserId) -> User:
        return self._respond("get_user", user_id)

    async def download_torrent(self, torrent_id: TorrentId) -> bytes:
        return self._respond("download_torrent", torrent_id)

    async def upload_torrent(self, form: UploadForm) -> UploadResponse:
        return self._respond("upload_torrent", form)

    async def upload_new_source(self, form: NewSourceUploadForm) -> UploadResponse:
        return self._respond("upload_new_source", form)

    async def peek_wait(self) -> Optional[float]:
        return self.wait

    async def close(self) -> None:
        pass
