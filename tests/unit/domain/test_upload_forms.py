from pathlib import Path

import pytest

from gazelle_api.domain.models.upload import (
    NewSourceUploadArtist,
    NewSourceUploadEdition,
    NewSourceUploadForm,
    UploadForm,
    UploadResponse,
    group_text_fields,
)


@pytest.fixture
def upload_form() -> UploadForm:
    return UploadForm(
        path=Path("album.torrent"),
        category_id=0,
        remaster_year=2012,
        remaster_title="Deluxe",
        remaster_record_label="Sample Records",
        remaster_catalogue_number="SR-001D",
        format="FLAC",
        bitrate="24bit Lossless",
        media="WEB",
        release_desc="Notes",
        group_id=72189,
    )


def new_source_form(**edition) -> NewSourceUploadForm:
    return NewSourceUploadForm(
        path=Path("new.torrent"),
        category_id=0,
        title="Sample Album",
        year=2024,
        release_type=1,
        media="CD",
        edition=NewSourceUploadEdition(format="FLAC", bitrate="Lossless", **edition),
        tags=["electronic", "ambient"],
        artists=[NewSourceUploadArtist("First Artist", 1), NewSourceUploadArtist("Remixer", 3)],
    )


def test_upload_form_fields(upload_form):
    fields = upload_form.to_text_fields()

    assert [key for key, _ in fields] == [
        "type", "remaster", "remaster_title", "remaster_record_label", "remaster_catalogue_number",
        "remaster_year", "format", "bitrate", "media", "release_desc", "groupid",
    ]
    assert dict(fields)["remaster"] == "1"
    assert dict(fields)["groupid"] == "72189"


def test_upload_form_from_dict():
    form = UploadForm.from_dict({
        "path": "album.torrent",
        "format": "FLAC",
        "bitrate": "Lossless",
        "media": "CD",
        "group_id": "10",
    })

    assert form.path == Path("album.torrent")
    assert form.group_id == 10
    assert form.remaster_year == 0
    assert form.release_desc == ""


def test_upload_form_from_dict_requires_group_id():
    with pytest.raises(KeyError):
        UploadForm.from_dict({"path": "a.torrent", "format": "FLAC", "bitrate": "Lossless", "media": "CD"})


def test_new_source_known_release_sends_remaster_fields():
    fields = new_source_form(year=2024, title="Original", record_label="Label", catalogue_number="CAT1").to_text_fields()
    keys = [key for key, _ in fields]

    assert dict(fields)["unknown"] == "0"
    assert dict(fields)["tags"] == "electronic,ambient"
    assert dict(fields)["remaster_catalogue_number"] == "CAT1"
    assert "requestid" not in keys
    assert "image" not in keys
    assert "remaster" not in keys


def test_new_source_unknown_release_omits_remaster_fields():
    keys = [key for key, _ in new_source_form(unknown_release=True, remaster=True).to_text_fields()]

    assert "remaster" in keys
    assert not [key for key in keys if key.startswith("remaster_")]


def test_new_source_artists_repeat_in_order():
    fields = new_source_form().to_text_fields()

    assert fields[-4:] == [
        ("artists[]", "First Artist"),
        ("importance[]", "1"),
        ("artists[]", "Remixer"),
        ("importance[]", "3"),
    ]


def test_new_source_optional_fields():
    form = new_source_form()
    form.request_id = 55
    form.image = "https://img.test/cover.jpg"

    fields = dict(form.to_text_fields())

    assert fields["requestid"] == "55"
    assert fields["image"] == "https://img.test/cover.jpg"


def test_new_source_from_dict():
    form = NewSourceUploadForm.from_dict({
        "path": "new.torrent",
        "title": "Sample Album",
        "year": 2024,
        "release_type": 1,
        "media": "WEB",
        "edition": {"format": "FLAC", "bitrate": "Lossless", "unknown_release": True},
        "artists": [{"name": "First Artist", "role": 1}],
        "request_id": 9,
    })

    assert form.edition.unknown_release is True
    assert form.edition.remaster is None
    assert form.artists == [NewSourceUploadArtist("First Artist", 1)]
    assert form.request_id == 9
    assert form.tags == []


def test_group_text_fields_keeps_repeats_in_order():
    grouped = group_text_fields([("a", "1"), ("b", "2"), ("a", "3")])

    assert grouped == {"a": ["1", "3"], "b": ["2"]}


@pytest.mark.parametrize("payload", [
    {"private": True, "source": True, "torrentid": 5, "groupid": 6},
    {"private": True, "source": True, "torrentId": 5, "groupId": 6},
])
def test_upload_response_accepts_both_key_casings(payload):
    response = UploadResponse.from_dict(payload)

    assert (response.torrent_id, response.group_id) == (5, 6)
    assert response.request_id is None


def test_upload_response_with_request():
    response = UploadResponse.from_dict({"private": False, "source": False, "requestid": 12, "torrentid": 1, "groupid": 2})

    assert response.request_id == 12
