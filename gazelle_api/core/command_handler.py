"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), calls the Gazelle
client and hands results or errors to the user interface. Every handler
returns True on success so the caller can choose the exit code.
"""

import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional, Type, TypeVar, Union

import yaml

from gazelle_api.domain.errors import GazelleError
from gazelle_api.domain.interfaces.filesystem import FileSystem
from gazelle_api.domain.interfaces.gazelle_client import GazelleClientInterface
from gazelle_api.domain.interfaces.user_interface import UserInterface
from gazelle_api.domain.models.common import GroupId, TorrentId, UserId
from gazelle_api.domain.models.upload import NewSourceUploadForm, UploadForm

logger = logging.getLogger(__name__)

FormType = TypeVar("FormType", UploadForm, NewSourceUploadForm)


class CommandHandler:
    """Handles incoming commands and delegates to the Gazelle client."""

    def __init__(
        self,
        client: GazelleClientInterface,
        ui: UserInterface,
        file_system: FileSystem,
        indexer: str = "",
    ):
        self.client = client
        self.ui = ui
        self.file_system = file_system
        self.indexer = indexer

    async def _run(self, description: str, operation: Callable[[], Awaitable[Any]]) -> Optional[Any]:
        """Awaits the operation, reporting a GazelleError through the UI.

        Returns:
            The operation's result, or None if it failed.
        """
        try:
            return await operation()
        except GazelleError as e:
            logger.info(f"{description} failed on '{self.indexer}': {e!r}")
            self.ui.display_error(str(e), error=e)
            return None

    async def handle_torrent(self, torrent_id: TorrentId) -> bool:
        result = await self._run(f"Torrent {torrent_id}", lambda: self.client.get_torrent(torrent_id))
        if result is None:
            return False
        self.ui.display_output(result)
        return True

    async def handle_group(self, group_id: GroupId) -> bool:
        result = await self._run(f"Group {group_id}", lambda: self.client.get_torrent_group(group_id))
        if result is None:
            return False
        self.ui.display_output(result)
        return True

    async def handle_user(self, user_id: UserId) -> bool:
        result = await self._run(f"User {user_id}", lambda: self.client.get_user(user_id))
        if result is None:
            return False
        self.ui.display_output(result)
        return True

    async def handle_download(self, torrent_id: TorrentId, output: Optional[Path] = None) -> bool:
        """Downloads a .torrent file to ``output`` (default ``<id>.torrent``)."""
        content = await self._run(f"Download {torrent_id}", lambda: self.client.download_torrent(torrent_id))
        if content is None:
            return False
        path = output or Path(f"{torrent_id}.torrent")
        try:
            await self.file_system.write_bytes(path, content)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            self.ui.display_error(f"Failed to write {path}: {e}")
            return False
        self.ui.display_output(
            {"torrent_id": torrent_id, "path": str(path), "size": len(content)},
            title="Download",
        )
        return True

    async def handle_upload(self, form_path: Path) -> bool:
        """Uploads a new format to an existing group, described by a YAML form."""
        form = await self._load_form(form_path, UploadForm)
        if form is None:
            return False
        result = await self._run(f"Upload {form.path}", lambda: self.client.upload_torrent(form))
        if result is None:
            return False
        self.ui.display_output(result)
        return True

    async def handle_upload_new_source(self, form_path: Path) -> bool:
        """Uploads a new source, described by a YAML form."""
        form = await self._load_form(form_path, NewSourceUploadForm)
        if form is None:
            return False
        result = await self._run(f"Upload {form.path}", lambda: self.client.upload_new_source(form))
        if result is None:
            return False
        self.ui.display_output(result)
        return True

    async def handle_limits(self) -> bool:
        """Shows how long the next request to the indexer would wait."""
        wait = await self.client.peek_wait()
        summary: Dict[str, Union[str, float]] = {
            "indexer": self.indexer,
            "wait_seconds": round(wait, 3) if wait is not None else 0.0,
        }
        self.ui.display_output(summary, title="Rate limit")
        return True

    async def _load_form(self, form_path: Path, form_type: Type[FormType]) -> Optional[FormType]:
        try:
            text = await self.file_system.read_text(form_path)
            data = yaml.safe_load(text)
            if not isinstance(data, dict):
                raise ValueError("expected a mapping at the top level")
            form = form_type.from_dict(data)
        except OSError as e:
            self.ui.display_error(f"Could not read form {form_path}: {e}")
            return None
        except yaml.YAMLError as e:
            self.ui.display_error(f"Could not parse form {form_path}: {e}")
            return None
        except KeyError as e:
            self.ui.display_error(f"Invalid form {form_path}: missing field {e}")
            return None
        except (TypeError, ValueError) as e:
            self.ui.display_error(f"Invalid form {form_path}: {e}")
            return None
        # Relative torrent paths are resolved against the form's directory
        if not form.path.is_absolute():
            form.path = Path(form_path).parent / form.path
        return form
