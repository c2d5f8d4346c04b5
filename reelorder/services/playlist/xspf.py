# reelorder/services/playlist/xspf.py
from __future__ import annotations

import os
import re
from typing import Iterable, List
from urllib.parse import quote
from xml.sax.saxutils import escape as xml_escape, quoteattr

from reelorder.domain.entities.playlist import PlaylistDocument
from reelorder.domain.entities.scored_entry import ScoredEntry

XSPF_NS = "http://xspf.org/ns/0/"
VLC_NS = "http://www.videolan.org/vlc/playlist/ns/0/"
VLC_APP = "http://www.videolan.org/vlc/playlist/0"
FILE_PREFIX = "file:///"

# Unreserved characters plus "/" and ":" stay as-is; quote() always keeps
# letters, digits and "_.-~".
_SAFE = "/:"
_DRIVE_RE = re.compile(r"^([A-Za-z]):[\\/]")


def normalize_path(path: str) -> str:
    """Drive-letter paths become "C:/dir/file"; anything else is returned unchanged."""
    m = _DRIVE_RE.match(path)
    if not m:
        return path
    return m.group(1).upper() + ":" + path[2:].replace("\\", "/")


def encode_location(path: str) -> str:
    """
    Absolute path -> "file:///" + percent-encoded path bytes (uppercase hex).

    Encodes the filesystem bytes, so names that are not valid UTF-8 (surrogate
    escaped by os.walk) come out as their raw byte values.
    """
    return FILE_PREFIX + quote(os.fsencode(normalize_path(str(path))), safe=_SAFE)


def render(doc: PlaylistDocument) -> str:
    """XSPF text with VLC's extension blocks; ids come from the same track tuple."""
    lines: List[str] = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<playlist xmlns="{XSPF_NS}" xmlns:vlc="{VLC_NS}" version="1">',
        f"\t<title>{xml_escape(doc.title)}</title>",
        "\t<trackList>",
    ]
    for t in doc.tracks:
        lines += [
            "\t\t<track>",
            f"\t\t\t<location>{xml_escape(t.location)}</location>",
            f"\t\t\t<duration>{int(t.duration_ms)}</duration>",
            f'\t\t\t<extension application="{VLC_APP}">',
            f"\t\t\t\t<vlc:id>{t.track_id}</vlc:id>",
            "\t\t\t</extension>",
            "\t\t</track>",
        ]
    lines += [
        "\t</trackList>",
        f'\t<extension application="{VLC_APP}">',
    ]
    lines += [f"\t\t<vlc:item tid={quoteattr(str(tid))}/>" for tid in doc.track_ids]
    lines += [
        "\t</extension>",
        "</playlist>",
    ]
    return "\n".join(lines) + "\n"


def serialize(entries: Iterable[ScoredEntry], *, title: str = "Playlist") -> str:
    """Ordered entries -> XSPF document text."""
    return render(PlaylistDocument.from_entries(entries, encode=encode_location, title=title))
