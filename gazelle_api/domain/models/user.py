"""Domain model for the `action=user` response."""

from dataclasses import dataclass
from typing import Optional

from .common import JsonObject


@dataclass
class Stats:
    joined_date: str
    last_access: str
    uploaded: int
    downloaded: int
    ratio: float
    required_ratio: float

    @classmethod
    def from_dict(cls, data: JsonObject) -> "Stats":
        return cls(
            joined_date=data.get("joinedDate") or "",
            last_access=data.get("lastAccess") or "",
            uploaded=int(data.get("uploaded") or 0),
            downloaded=int(data.get("downloaded") or 0),
            ratio=float(data.get("ratio") or 0),
            required_ratio=float(data.get("requiredRatio") or 0),
        )


@dataclass
class Ranks:
    """Percentile ranks."""
    uploaded: float = 0.0
    downloaded: float = 0.0
    uploads: float = 0.0
    requests: float = 0.0
    bounty: float = 0.0
    posts: float = 0.0
    artists: float = 0.0
    overall: float = 0.0

    @classmethod
    def from_dict(cls, data: JsonObject) -> "Ranks":
        return cls(**{name: float(data.get(name) or 0) for name in cls.__dataclass_fields__})


@dataclass
class Personal:
    user_class: str
    paranoia: int
    paranoia_text: str
    donor: bool
    warned: bool
    enabled: bool
    passkey: str

    @classmethod
    def from_dict(cls, data: JsonObject) -> "Personal":
        return cls(
            user_class=data.get("class") or "",
            paranoia=int(data.get("paranoia") or 0),
            paranoia_text=data.get("paranoiaText") or "",
            donor=bool(data.get("donor", False)),
            warned=bool(data.get("warned", False)),
            enabled=bool(data.get("enabled", False)),
            passkey=data.get("passkey") or "",
        )


@dataclass
class Community:
    posts: int = 0
    torrent_comments: int = 0
    collages_started: int = 0
    collages_contrib: int = 0
    requests_filled: int = 0
    requests_voted: int = 0
    perfect_flacs: int = 0
    uploaded: int = 0
    groups: int = 0
    seeding: int = 0
    leeching: int = 0
    snatched: int = 0
    invited: int = 0

    @classmethod
    def from_dict(cls, data: JsonObject) -> "Community":
        def count(key: str) -> int:
            # Hidden by paranoia settings as null
            return int(data.get(key) or 0)

        return cls(
            posts=count("posts"),
            torrent_comments=count("torrentComments"),
            collages_started=count("collagesStarted"),
            collages_contrib=count("collagesContrib"),
            requests_filled=count("requestsFilled"),
            requests_voted=count("requestsVoted"),
            perfect_flacs=count("perfectFlacs"),
            uploaded=count("uploaded"),
            groups=count("groups"),
            seeding=count("seeding"),
            leeching=count("leeching"),
            snatched=count("snatched"),
            invited=count("invited"),
        )


@dataclass
class User:
    """A tracker user profile."""
    username: str
    avatar: str
    is_friend: bool
    profile_text: str
    stats: Stats
    ranks: Ranks
    personal: Personal
    community: Community
    bb_profile_text: Optional[str] = None

    @classmethod
    def from_dict(cls, data: JsonObject) -> "User":
        return cls(
            username=str(data["username"]),
            avatar=data.get("avatar") or "",
            is_friend=bool(data.get("isFriend", False)),
            profile_text=data.get("profileText") or "",
            bb_profile_text=data.get("bbProfileText"),
            stats=Stats.from_dict(data["stats"]),
            ranks=Ranks.from_dict(data["ranks"]),
            personal=Personal.from_dict(data["personal"]),
            community=Community.from_dict(data["community"]),
        )
