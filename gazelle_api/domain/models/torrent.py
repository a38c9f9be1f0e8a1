"""Domain models for torrents and torrent groups.

A group is a release (album, EP, single, etc.); a torrent is one specific
encoding of it. Field names follow Python conventions; ``from_dict`` maps
the API's camelCase keys.
"""

import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional

from .common import GroupId, JsonObject, TorrentId, UserId

# `fileList` entries look like `name.flac{{{1234}}}` joined by `|||`
_FLAC_PATTERN = re.compile(r"([^|]+\.flac)\{\{\{\d+\}\}\}(?:\|\|\|)?")


@dataclass
class Credit:
    """A credited artist."""
    id: int
    name: str

    @classmethod
    def from_dict(cls, data: JsonObject) -> "Credit":
        return cls(id=int(data["id"]), name=str(data["name"]))


def _credits(data: JsonObject, key: str) -> List[Credit]:
    return [Credit.from_dict(item) for item in data.get(key) or []]


@dataclass
class Credits:
    """Release credits: artists, composers, etc."""
    artists: List[Credit] = field(default_factory=list)
    composers: List[Credit] = field(default_factory=list)
    conductor: List[Credit] = field(default_factory=list)
    dj: List[Credit] = field(default_factory=list)
    producer: List[Credit] = field(default_factory=list)
    remixed_by: List[Credit] = field(default_factory=list)
    with_: List[Credit] = field(default_factory=list)  # Featured artists
    arranger: Optional[List[Credit]] = None  # ops only

    @classmethod
    def from_dict(cls, data: JsonObject) -> "Credits":
        return cls(
            artists=_credits(data, "artists"),
            composers=_credits(data, "composers"),
            conductor=_credits(data, "conductor"),
            dj=_credits(data, "dj"),
            producer=_credits(data, "producer"),
            remixed_by=_credits(data, "remixedBy"),
            with_=_credits(data, "with"),
            arranger=_credits(data, "arranger") if "arranger" in data else None,
        )


@dataclass
class Group:
    """A release, typically an album, EP or single with one or more editions.

    ``release_type`` indexes: 1 Album, 3 Soundtrack, 5 EP, 6 Anthology,
    7 Compilation, 9 Single, 11 Live album, 13 Remix, 14 Bootleg,
    15 Interview, 16 Mixtape, 17 Demo, 18 Concert Recording, 19 DJ Mix,
    21 Unknown.

    ``category_id`` is zero based (0 Music) and differs from the one
    used by the upload form.
    """
    id: GroupId
    name: str
    year: int = 0
    record_label: str = ""
    catalogue_number: str = ""
    release_type: int = 0
    category_id: int = 0
    category_name: str = ""
    time: str = ""
    vanity_house: bool = False
    is_bookmarked: bool = False
    tags: List[str] = field(default_factory=list)
    wiki_body: str = ""
    bb_body: Optional[str] = None
    wiki_image: str = ""
    music_info: Optional[Credits] = None

    @classmethod
    def from_dict(cls, data: JsonObject) -> "Group":
        music_info = data.get("musicInfo")
        return cls(
            id=GroupId(int(data["id"])),
            name=str(data["name"]),
            year=int(data.get("year") or 0),
            record_label=data.get("recordLabel") or "",
            catalogue_number=data.get("catalogueNumber") or "",
            release_type=int(data.get("releaseType") or 0),
            category_id=int(data.get("categoryId") or 0),
            category_name=data.get("categoryName") or "",
            time=data.get("time") or "",
            vanity_house=bool(data.get("vanityHouse", False)),
            is_bookmarked=bool(data.get("isBookmarked", False)),
            tags=list(data.get("tags") or []),
            wiki_body=data.get("wikiBody") or "",
            bb_body=data.get("bbBody"),
            wiki_image=data.get("wikiImage") or "",
            music_info=Credits.from_dict(music_info) if isinstance(music_info, dict) else None,
        )


@dataclass
class Torrent:
    """A single encoding of a release."""
    id: TorrentId
    media: str = ""
    format: str = ""
    encoding: str = ""
    remastered: bool = False
    remaster_year: Optional[int] = None
    remaster_title: str = ""
    remaster_record_label: str = ""
    remaster_catalogue_number: str = ""
    scene: bool = False
    has_log: bool = False
    has_cue: bool = False
    log_score: int = 0
    file_count: int = 0
    size: int = 0
    seeders: int = 0
    leechers: int = 0
    snatched: int = 0
    reported: bool = False
    time: str = ""
    description: str = ""
    file_list: str = ""
    file_path: str = ""
    user_id: UserId = UserId(0)
    username: str = ""
    # Not every deployment sends these
    has_snatched: Optional[bool] = None
    trumpable: Optional[bool] = None
    lossy_web_approved: Optional[bool] = None
    lossy_master_approved: Optional[bool] = None
    is_neutralleech: Optional[bool] = None
    is_freeload: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: JsonObject) -> "Torrent":
        remaster_year = data.get("remasterYear")
        return cls(
            id=TorrentId(int(data["id"])),
            media=data.get("media") or "",
            format=data.get("format") or "",
            encoding=data.get("encoding") or "",
            remastered=bool(data.get("remastered", False)),
            # 0 means "not set" on both deployments
            remaster_year=int(remaster_year) if remaster_year else None,
            remaster_title=data.get("remasterTitle") or "",
            remaster_record_label=data.get("remasterRecordLabel") or "",
            remaster_catalogue_number=data.get("remasterCatalogueNumber") or "",
            scene=bool(data.get("scene", False)),
            has_log=bool(data.get("hasLog", False)),
            has_cue=bool(data.get("hasCue", False)),
            log_score=int(data.get("logScore") or 0),
            file_count=int(data.get("fileCount") or 0),
            size=int(data.get("size") or 0),
            seeders=int(data.get("seeders") or 0),
            leechers=int(data.get("leechers") or 0),
            snatched=int(data.get("snatched") or 0),
            reported=bool(data.get("reported", False)),
            time=data.get("time") or "",
            description=data.get("description") or "",
            file_list=data.get("fileList") or "",
            file_path=data.get("filePath") or "",
            user_id=UserId(int(data.get("userId") or 0)),
            username=data.get("username") or "",
            has_snatched=_optional_bool(data, "has_snatched"),
            trumpable=_optional_bool(data, "trumpable"),
            lossy_web_approved=_optional_bool(data, "lossyWebApproved"),
            lossy_master_approved=_optional_bool(data, "lossyMasterApproved"),
            is_neutralleech=_optional_bool(data, "isNeutralleech"),
            is_freeload=_optional_bool(data, "isFreeload"),
        )

    def get_flacs(self) -> List[PurePosixPath]:
        """Paths of the FLAC files listed in ``file_list``."""
        return [PurePosixPath(match.group(1)) for match in _FLAC_PATTERN.finditer(self.file_list)]


def _optional_bool(data: Dict[str, Any], key: str) -> Optional[bool]:
    value = data.get(key)
    return None if value is None else bool(value)


@dataclass
class TorrentResponse:
    """Response of `action=torrent`."""
    group: Group
    torrent: Torrent

    @classmethod
    def from_dict(cls, data: JsonObject) -> "TorrentResponse":
        return cls(group=Group.from_dict(data["group"]), torrent=Torrent.from_dict(data["torrent"]))


@dataclass
class GroupResponse:
    """Response of `action=torrentgroup`."""
    group: Group
    torrents: List[Torrent] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: JsonObject) -> "GroupResponse":
        return cls(
            group=Group.from_dict(data["group"]),
            torrents=[Torrent.from_dict(item) for item in data.get("torrents") or []],
        )
