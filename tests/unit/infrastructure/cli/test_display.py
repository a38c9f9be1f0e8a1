import io
import json

import pytest
from rich.console import Console

from gazelle_api.domain.errors import ErrorKind, GazelleError
from gazelle_api.domain.models.torrent import GroupResponse, TorrentResponse
from gazelle_api.domain.models.upload import UploadResponse
from gazelle_api.domain.models.user import User
from gazelle_api.infrastructure.cli.display import ConsoleDisplay, format_size


def make_console() -> Console:
    return Console(file=io.StringIO(), width=160, color_system=None)


@pytest.fixture
def consoles():
    return make_console(), make_console()


def output_of(console: Console) -> str:
    return console.file.getvalue()


def make_display(consoles, json_output=False) -> ConsoleDisplay:
    console, error_console = consoles
    return ConsoleDisplay(json_output=json_output, console=console, error_console=error_console)


@pytest.mark.parametrize("size, expected", [
    (0, "0 B"),
    (1023, "1023 B"),
    (1536, "1.5 KiB"),
    (314572800, "300.0 MiB"),
    (10737418240, "10.0 GiB"),
])
def test_format_size(size, expected):
    assert format_size(size) == expected


def test_display_torrent_tables(consoles, torrent_payload):
    make_display(consoles).display_output(TorrentResponse.from_dict(torrent_payload))

    text = output_of(consoles[0])
    assert "Sample Album" in text
    assert "Sample Artist" in text
    assert "12345" in text
    assert "FLAC Lossless" in text
    assert "300.0 MiB" in text
    assert output_of(consoles[1]) == ""


def test_display_group_lists_every_torrent(consoles, group_payload, torrent_item):
    second = dict(torrent_item, id=12346, format="MP3", encoding="V0")
    response = GroupResponse.from_dict({"group": group_payload, "torrents": [torrent_item, second]})

    make_display(consoles).display_output(response)

    text = output_of(consoles[0])
    assert "12345" in text and "12346" in text
    assert "MP3 V0" in text


def test_markup_in_names_is_printed_literally(consoles, torrent_payload):
    torrent_payload["group"]["name"] = "[bold]Album[/bold]"

    make_display(consoles).display_output(TorrentResponse.from_dict(torrent_payload))

    assert "[bold]Album[/bold]" in output_of(consoles[0])


def test_display_user(consoles, user_payload):
    make_display(consoles).display_output(User.from_dict(user_payload))

    text = output_of(consoles[0])
    assert "listener" in text
    assert "Power User" in text
    assert "2.00 (required 0.60)" in text
    assert "secret-passkey" not in text


def test_user_fields_are_printed_literally(consoles, user_payload):
    user_payload["personal"]["class"] = "[red]Elite[/red]"
    user_payload["stats"]["joinedDate"] = "[2015]"

    make_display(consoles).display_output(User.from_dict(user_payload))

    text = output_of(consoles[0])
    assert "[red]Elite[/red]" in text
    assert "[2015]" in text


def test_display_upload(consoles):
    make_display(consoles).display_output(UploadResponse(private=True, source=True, torrent_id=555, group_id=72189))

    assert "Uploaded torrent 555 to group 72189" in output_of(consoles[0])


def test_display_mapping(consoles):
    make_display(consoles).display_output({"indexer": "ops", "wait_seconds": 1.5}, title="Rate limit")

    text = output_of(consoles[0])
    assert "Rate limit" in text
    assert "wait_seconds" in text and "1.5" in text


def test_json_output(consoles):
    make_display(consoles, json_output=True).display_output(
        UploadResponse(private=True, source=False, torrent_id=1, group_id=2)
    )

    data = json.loads(output_of(consoles[0]))
    assert data == {"private": True, "source": False, "request_id": None, "torrent_id": 1, "group_id": 2}


def test_display_error_goes_to_error_console(consoles):
    error = GazelleError(ErrorKind.NOT_FOUND, "could not find torrent")

    make_display(consoles).display_error(str(error), error=error)

    assert output_of(consoles[0]) == ""
    assert "Error" in output_of(consoles[1])
    assert "could not find torrent" in output_of(consoles[1])


def test_display_error_as_json(consoles):
    error = GazelleError.other(500, "database down")

    make_display(consoles, json_output=True).display_error(str(error), error=error)

    assert json.loads(output_of(consoles[1])) == {
        "error": {"type": "other", "status": 500, "message": "database down"}
    }


def test_display_plain_error_as_json(consoles):
    make_display(consoles, json_output=True).display_error("No url configured")

    assert json.loads(output_of(consoles[1])) == {"error": {"type": "error", "message": "No url configured"}}


def test_display_warning_and_info(consoles):
    display = make_display(consoles)

    display.display_warning("Slow down")
    display.display_info("Waiting for capacity")

    text = output_of(consoles[1])
    assert "Warning" in text and "Slow down" in text
    assert "Info" in text and "Waiting for capacity" in text
