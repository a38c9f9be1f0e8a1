import dataclasses
import json
import logging
from typing import Any, Dict, List, Optional

from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gazelle_api.domain.errors import GazelleError
from gazelle_api.domain.interfaces.user_interface import UserInterface
from gazelle_api.domain.models.torrent import Group, GroupResponse, Torrent, TorrentResponse
from gazelle_api.domain.models.upload import UploadResponse
from gazelle_api.domain.models.user import User

logger = logging.getLogger(__name__)


def format_size(size: int) -> str:
    """Human readable binary size, e.g. ``1.5 GiB``."""
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB", "TiB"):
        if value < 1024 or unit == "TiB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def to_jsonable(output: Any) -> Any:
    """Converts domain dataclasses into plain JSON-compatible data."""
    if dataclasses.is_dataclass(output) and not isinstance(output, type):
        return dataclasses.asdict(output)
    return output


def _edition(torrent: Torrent) -> str:
    parts = [str(torrent.remaster_year) if torrent.remaster_year else "",
             torrent.remaster_title, torrent.remaster_record_label,
             torrent.remaster_catalogue_number]
    return " / ".join(part for part in parts if part) or "Original Release"


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output.

    Results go to stdout; errors, warnings and info go to stderr. With
    ``json_output`` results are printed as JSON and errors as their tagged
    mapping.
    """

    def __init__(
        self,
        json_output: bool = False,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ):
        self.json_output = json_output
        self._console = console or Console()
        self._error_console = error_console or Console(stderr=True)

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    def display_output(self, output: Any, **kwargs: Any) -> None:
        """Renders a domain result as tables, or as JSON in JSON mode.

        Args:
            output: TorrentResponse, GroupResponse, User, UploadResponse or
                any JSON-compatible value.
            **kwargs: ``title`` for plain values.
        """
        if self.json_output:
            self.console.print_json(json.dumps(to_jsonable(output)))
            return

        if isinstance(output, TorrentResponse):
            self._print_group(output.group)
            self._print_torrents([output.torrent])
        elif isinstance(output, GroupResponse):
            self._print_group(output.group)
            self._print_torrents(output.torrents)
        elif isinstance(output, User):
            self._print_user(output)
        elif isinstance(output, UploadResponse):
            self._print_upload(output)
        else:
            self._print_mapping(kwargs.get("title", "Result"), to_jsonable(output))

    def _print_group(self, group: Group) -> None:
        table = Table(show_header=False, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Field", style="bold cyan")
        table.add_column("Value", style="white")
        artists = ", ".join(credit.name for credit in group.music_info.artists) if group.music_info else ""
        table.add_row("Group", f"{escape(group.name)} [dim]#{group.id}[/dim]")
        if artists:
            table.add_row("Artists", escape(artists))
        table.add_row("Year", str(group.year))
        table.add_row("Label", escape(" / ".join(part for part in (group.record_label, group.catalogue_number) if part)))
        table.add_row("Category", escape(group.category_name))
        if group.tags:
            table.add_row("Tags", escape(", ".join(group.tags)))
        self.console.print(table)

    def _print_torrents(self, torrents: List[Torrent]) -> None:
        table = Table(show_header=True, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("ID", style="cyan", justify="right")
        table.add_column("Edition", style="white")
        table.add_column("Format", style="bold")
        table.add_column("Media")
        table.add_column("Size", justify="right")
        table.add_column("Seeders", justify="right", style="green")
        table.add_column("Snatched", justify="right", style="dim")
        for torrent in torrents:
            table.add_row(
                str(torrent.id),
                escape(_edition(torrent)),
                f"{torrent.format} {torrent.encoding}".strip(),
                torrent.media,
                format_size(torrent.size),
                str(torrent.seeders),
                str(torrent.snatched),
            )
        self.console.print(table)

    def _print_user(self, user: User) -> None:
        table = Table(show_header=False, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Field", style="bold cyan")
        table.add_column("Value", style="white")
        table.add_row("Username", escape(user.username))
        table.add_row("Class", escape(user.personal.user_class))
        table.add_row("Joined", escape(user.stats.joined_date))
        table.add_row("Uploaded", format_size(user.stats.uploaded))
        table.add_row("Downloaded", format_size(user.stats.downloaded))
        table.add_row("Ratio", f"{user.stats.ratio:.2f} (required {user.stats.required_ratio:.2f})")
        table.add_row("Uploads", str(user.community.uploaded))
        table.add_row("Seeding", str(user.community.seeding))
        self.console.print(table)

    def _print_upload(self, upload: UploadResponse) -> None:
        message = f"Uploaded torrent {upload.torrent_id} to group {upload.group_id}"
        if upload.request_id is not None:
            message += f", filling request {upload.request_id}"
        self.console.print(Panel(
            Text(message, style="white"),
            title="[bold green]Upload[/bold green]",
            border_style="green",
            box=SIMPLE,
            padding=(0, 1),
        ))

    def _print_mapping(self, title: str, data: Any) -> None:
        if not isinstance(data, dict):
            self.console.print(Text(str(data)))
            return
        table = Table(title=title, show_header=False, box=SIMPLE, padding=(0, 1))
        table.add_column("Key", style="bold cyan")
        table.add_column("Value")
        for key, value in data.items():
            table.add_row(escape(str(key)), escape(str(value)))
        self.console.print(table)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
            **kwargs: ``error``, the GazelleError being reported, used for
                JSON output.
        """
        error = kwargs.get("error")
        if self.json_output:
            payload: Dict[str, Any] = (
                error.to_dict() if isinstance(error, GazelleError) else {"type": "error", "message": error_message}
            )
            self._error_console.print_json(json.dumps({"error": payload}))
            return
        self._error_console.print(Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1),
        ))

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        self._error_console.print(Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1),
        ))

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        logger.warning(f"Display warning: {warning_message}")
        self._error_console.print(Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1),
        ))
