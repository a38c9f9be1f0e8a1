"""Defines common Value Objects used across the client.

These objects represent simple values like ids and wire constants,
keeping signatures self-describing while staying plain ints/strings at runtime.
"""

from typing import Any, Dict, NewType

# === Identifiers ===
TorrentId = NewType("TorrentId", int)      # A specific encoding of a release
GroupId = NewType("GroupId", int)          # A release (album, EP, single...)
UserId = NewType("UserId", int)
RequestId = NewType("RequestId", int)      # A user request an upload can fill

# === Wire ===
JsonObject = Dict[str, Any]

# Endpoint serving every JSON action and the upload form
AJAX_PATH = "/ajax.php"

# Content type of a successful torrent download
TORRENT_CONTENT_TYPE = "application/x-bittorrent"
