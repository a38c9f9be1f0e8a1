"""Upload forms and the upload response.

Forms only describe the text fields of the multipart body. Reading the
.torrent file is left to the client so that a missing file fails before
any rate limit capacity is used.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .common import GroupId, JsonObject, RequestId, TorrentId

TextFields = List[Tuple[str, str]]


def _flag(value: bool) -> str:
    return "1" if value else "0"


@dataclass
class UploadForm:
    """Adds a new format to an existing torrent group."""
    path: Path
    category_id: int
    remaster_year: int
    remaster_title: str
    remaster_record_label: str
    remaster_catalogue_number: str
    format: str
    bitrate: str
    media: str
    release_desc: str
    group_id: GroupId

    def to_text_fields(self) -> TextFields:
        return [
            ("type", str(self.category_id)),
            ("remaster", "1"),  # required by ops, ignored by red
            ("remaster_title", self.remaster_title),
            ("remaster_record_label", self.remaster_record_label),
            ("remaster_catalogue_number", self.remaster_catalogue_number),
            ("remaster_year", str(self.remaster_year)),
            ("format", self.format),
            ("bitrate", self.bitrate),
            ("media", self.media),
            ("release_desc", self.release_desc),
            ("groupid", str(self.group_id)),
        ]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UploadForm":
        """Builds a form from a snake_case mapping, e.g. a YAML document."""
        return cls(
            path=Path(data["path"]),
            category_id=int(data.get("category_id", 0)),
            remaster_year=int(data.get("remaster_year", 0)),
            remaster_title=str(data.get("remaster_title", "")),
            remaster_record_label=str(data.get("remaster_record_label", "")),
            remaster_catalogue_number=str(data.get("remaster_catalogue_number", "")),
            format=str(data["format"]),
            bitrate=str(data["bitrate"]),
            media=str(data["media"]),
            release_desc=str(data.get("release_desc", "")),
            group_id=GroupId(int(data["group_id"])),
        )


@dataclass
class NewSourceUploadArtist:
    """Artist credit; ``role`` is the upload form's importance index."""
    name: str
    role: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewSourceUploadArtist":
        return cls(name=str(data["name"]), role=int(data["role"]))


@dataclass
class NewSourceUploadEdition:
    """Edition metadata. The remaster fields are only sent for a known release."""
    format: str
    bitrate: str
    unknown_release: bool = False
    remaster: Optional[bool] = None
    year: int = 0
    title: str = ""
    record_label: str = ""
    catalogue_number: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewSourceUploadEdition":
        remaster = data.get("remaster")
        return cls(
            format=str(data["format"]),
            bitrate=str(data["bitrate"]),
            unknown_release=bool(data.get("unknown_release", False)),
            remaster=None if remaster is None else bool(remaster),
            year=int(data.get("year", 0)),
            title=str(data.get("title", "")),
            record_label=str(data.get("record_label", "")),
            catalogue_number=str(data.get("catalogue_number", "")),
        )


@dataclass
class NewSourceUploadForm:
    """Uploads a new source, creating a new torrent group."""
    path: Path
    category_id: int
    title: str
    year: int
    release_type: int
    media: str
    edition: NewSourceUploadEdition
    tags: List[str] = field(default_factory=list)
    album_desc: str = ""
    release_desc: str = ""
    request_id: Optional[RequestId] = None
    image: Optional[str] = None
    artists: List[NewSourceUploadArtist] = field(default_factory=list)

    def to_text_fields(self) -> TextFields:
        """Multipart text fields in submission order.

        Repeated keys (``artists[]``, ``importance[]``) appear once per artist.
        """
        fields: TextFields = [
            ("type", str(self.category_id)),
            ("title", self.title),
            ("year", str(self.year)),
            ("releasetype", str(self.release_type)),
            ("format", self.edition.format),
            ("bitrate", self.edition.bitrate),
            ("media", self.media),
            ("tags", ",".join(self.tags)),
            ("album_desc", self.album_desc),
            ("release_desc", self.release_desc),
            ("unknown", _flag(self.edition.unknown_release)),
        ]
        if self.request_id is not None:
            fields.append(("requestid", str(self.request_id)))
        if self.image is not None:
            fields.append(("image", self.image))
        if self.edition.remaster is not None:
            fields.append(("remaster", _flag(self.edition.remaster)))
        if not self.edition.unknown_release:
            fields.extend([
                ("remaster_year", str(self.edition.year)),
                ("remaster_title", self.edition.title),
                ("remaster_record_label", self.edition.record_label),
                ("remaster_catalogue_number", self.edition.catalogue_number),
            ])
        for artist in self.artists:
            fields.append(("artists[]", artist.name))
            fields.append(("importance[]", str(artist.role)))
        return fields

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewSourceUploadForm":
        request_id = data.get("request_id")
        return cls(
            path=Path(data["path"]),
            category_id=int(data.get("category_id", 0)),
            title=str(data["title"]),
            year=int(data["year"]),
            release_type=int(data["release_type"]),
            media=str(data["media"]),
            edition=NewSourceUploadEdition.from_dict(data["edition"]),
            tags=[str(tag) for tag in data.get("tags") or []],
            album_desc=str(data.get("album_desc", "")),
            release_desc=str(data.get("release_desc", "")),
            request_id=None if request_id is None else RequestId(int(request_id)),
            image=data.get("image"),
            artists=[NewSourceUploadArtist.from_dict(item) for item in data.get("artists") or []],
        )


def group_text_fields(fields: TextFields) -> Dict[str, List[str]]:
    """Folds ordered field pairs into the mapping shape httpx accepts for ``data``."""
    grouped: Dict[str, List[str]] = {}
    for key, value in fields:
        grouped.setdefault(key, []).append(value)
    return grouped


@dataclass
class UploadResponse:
    """Result of a successful upload.

    Deployments disagree on the casing of the id keys (`torrentid` vs
    `torrentId`); both are accepted.
    """
    private: bool
    source: bool
    request_id: Optional[RequestId] = None
    torrent_id: TorrentId = TorrentId(0)
    group_id: GroupId = GroupId(0)

    @classmethod
    def from_dict(cls, data: JsonObject) -> "UploadResponse":
        request_id = data.get("requestid")
        torrent_id = data.get("torrentid") or data.get("torrentId")
        group_id = data.get("groupid") or data.get("groupId")
        return cls(
            private=bool(data.get("private", False)),
            source=bool(data.get("source", False)),
            request_id=None if request_id is None else RequestId(int(request_id)),
            torrent_id=TorrentId(int(torrent_id or 0)),
            group_id=GroupId(int(group_id or 0)),
        )
