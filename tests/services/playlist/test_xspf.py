import os
import re
import sys
import xml.etree.ElementTree as ET

import pytest

from reelorder.domain.entities.scored_entry import ScoredEntry
from reelorder.domain.entities.video_metadata import VideoMetadata
from reelorder.services.playlist.xspf import (
    VLC_APP,
    VLC_NS,
    XSPF_NS,
    encode_location,
    normalize_path,
    serialize,
)

NS = {"x": XSPF_NS, "vlc": VLC_NS}


def _e(path: str, dur: int) -> ScoredEntry:
    return ScoredEntry(path=path, metadata=VideoMetadata(duration_ms=dur), size_bytes=0, score=0)


@pytest.mark.parametrize("path", ["/media/videos/clip_01.mp4", "/a-b/c.d/e~f:g.mkv"])
def test_encode_safe_path_is_unchanged(path):
    assert encode_location(path) == "file:///" + path


def test_encode_escapes_everything_else_uppercase():
    assert encode_location("/v/my movie (2020)&x.mp4") == "file:////v/my%20movie%20%282020%29%26x.mp4"
    assert encode_location("/v/é#%.mp4") == "file:////v/%C3%A9%23%25.mp4"


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX filesystem encoding")
def test_encode_undecodable_name_uses_raw_bytes():
    # os.walk hands back non-UTF-8 names as surrogate escapes
    name = os.fsdecode(b"/v/clip_\xff.mp4")
    assert encode_location(name) == "file:////v/clip_%FF.mp4"


def test_drive_letter_normalized():
    assert normalize_path("c:\\Users\\me\\Videos\\a b.mp4") == "C:/Users/me/Videos/a b.mp4"
    assert encode_location("d:/clips/x.mp4") == "file:///D:/clips/x.mp4"
    assert normalize_path("/home/me/c:/x.mp4") == "/home/me/c:/x.mp4"


def test_document_structure_and_lockstep_ids():
    text = serialize([_e("/v/b.mp4", 120000), _e("/v/a b.mp4", 60000), _e("/v/c.mp4", 30000)])
    assert text.startswith('<?xml version="1.0" encoding="UTF-8"?>\n')

    root = ET.fromstring(text.encode("utf-8"))
    assert root.tag == f"{{{XSPF_NS}}}playlist"
    assert root.get("version") == "1"
    assert root.find("x:title", NS).text == "Playlist"

    tracks = root.findall("x:trackList/x:track", NS)
    assert [t.find("x:location", NS).text for t in tracks] == [
        "file:////v/b.mp4",
        "file:////v/a%20b.mp4",
        "file:////v/c.mp4",
    ]
    assert [t.find("x:duration", NS).text for t in tracks] == ["120000", "60000", "30000"]

    track_ids = [t.find("x:extension/vlc:id", NS).text for t in tracks]
    ext = root.find("x:extension", NS)
    assert ext.get("application") == VLC_APP
    tids = [item.get("tid") for item in ext.findall("vlc:item", NS)]
    assert track_ids == tids == ["0", "1", "2"]


def test_empty_playlist_still_well_formed():
    text = serialize([])
    root = ET.fromstring(text.encode("utf-8"))
    assert root.findall(f"{{{XSPF_NS}}}trackList/{{{XSPF_NS}}}track") == []
    assert not re.search(r"<vlc:item", text)


def test_title_is_escaped():
    text = serialize([_e("/v/a.mp4", 1)], title="Tom & Jerry <best>")
    assert "<title>Tom &amp; Jerry &lt;best&gt;</title>" in text
    ET.fromstring(text.encode("utf-8"))
