from __future__ import annotations

import os
import re
import sys
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from reelorder.domain.entities.source import PlaylistSource
from reelorder.domain.entities.video_metadata import VideoMetadata
from reelorder.domain.enums import ScoringPolicy, SortStrategy
from reelorder.domain.errors import EmptyInputError, NoFilesFoundError, NotFoundError, WriteError
from reelorder.domain.policies.quality_scorer import get_scorer
from reelorder.services.playlist.log_sinks import MemoryLogSink
from reelorder.services.playlist.service import PlaylistService
from reelorder.services.playlist.xspf import XSPF_NS
from reelorder.services.probe.memory_probe import InMemoryProbe

NS = {"x": XSPF_NS}

FULL_HD = VideoMetadata(
    video_codec="h264",
    width=1920,
    height=1080,
    video_bitrate_kbps=12000.0,
    audio_codec="aac",
    audio_bitrate_kbps=256,
    frame_rate=29.97,
    duration_ms=90_000,
)


def _durations(text: str) -> list[int]:
    root = ET.fromstring(text.encode("utf-8"))
    return [int(d.text) for d in root.findall("x:trackList/x:track/x:duration", NS)]


def _service(probe: InMemoryProbe, **kwargs) -> PlaylistService:
    kwargs.setdefault("max_workers", 4)
    return PlaylistService(probe=probe, **kwargs)


def test_directory_run_sorted_by_duration(tmp_path, touch):
    root = tmp_path / "videos"
    a = touch(root / "a.mp4")
    b = touch(root / "nested" / "b.mkv")
    c = touch(root / "c.avi")
    probe = InMemoryProbe({
        a: VideoMetadata(duration_ms=60_000),
        b: VideoMetadata(duration_ms=120_000),
        c: VideoMetadata(duration_ms=30_000),
    })
    out = tmp_path / "out.xspf"

    rpt = _service(probe).run(PlaylistSource.from_directory(root), SortStrategy.duration, out)

    assert rpt.ok, rpt.error_message
    assert rpt.written
    assert _durations(rpt.document) == [120_000, 60_000, 30_000]
    assert rpt.paths == [str(b), str(a), str(c)]
    assert out.read_text(encoding="utf-8") == rpt.document
    assert sorted(probe.calls) == sorted([str(a), str(b), str(c)])
    assert rpt.planned == 3 and rpt.probed_ok == 3 and rpt.degraded == 0


def test_failed_probe_ranks_below_full_metadata(tmp_path, touch):
    good = touch(tmp_path / "good.mp4")
    bad = touch(tmp_path / "aaa_bad.mp4")
    probe = InMemoryProbe({good: FULL_HD})  # bad.mp4 is unknown -> zero metadata

    rpt = _service(probe, scorer=get_scorer(ScoringPolicy.additive)).run(
        PlaylistSource.from_directory(tmp_path), SortStrategy.quality, tmp_path / "q.xspf"
    )

    assert rpt.ok
    assert rpt.paths == [str(good), str(bad)]
    bad_entry = rpt.entries[1]
    assert bad_entry.metadata == VideoMetadata()
    assert bad_entry.score == 15  # baseline: tiny file, every "else" branch
    assert rpt.degraded == 1
    assert rpt.error_details == [(str(bad), "probe returned no metadata")]


def test_no_matching_files_is_fatal_and_writes_nothing(tmp_path, touch):
    touch(tmp_path / "notes.txt")
    out = tmp_path / "never.xspf"
    sink = MemoryLogSink()

    rpt = _service(InMemoryProbe(), log_sink=sink).run(
        PlaylistSource.from_directory(tmp_path), SortStrategy.quality, out
    )

    assert not rpt.ok
    assert isinstance(rpt.error, NoFilesFoundError)
    assert "No video files found" in rpt.error_message
    assert rpt.document is None
    assert not out.exists()
    assert any("Error: No video files found" in line for line in sink.lines)
    with pytest.raises(NoFilesFoundError):
        rpt.raise_for_error()


def test_missing_root_is_fatal(tmp_path):
    probe = InMemoryProbe()
    rpt = _service(probe).run(PlaylistSource.from_directory(tmp_path / "missing"), None, tmp_path / "x.xspf")
    assert isinstance(rpt.error, NotFoundError)
    assert probe.calls == []
    assert not (tmp_path / "x.xspf").exists()


def test_manual_empty_list_is_fatal(tmp_path):
    rpt = _service(InMemoryProbe()).run(PlaylistSource.from_paths([]), None, tmp_path / "x.xspf")
    assert isinstance(rpt.error, EmptyInputError)
    assert rpt.document is None


def test_manual_list_default_order_is_path(tmp_path, touch):
    z = touch(tmp_path / "z.mov")
    a = touch(tmp_path / "a.txt")  # manual mode does not filter by extension
    rpt = _service(InMemoryProbe()).run(PlaylistSource.from_paths([z, a]), None, tmp_path / "m.xspf")
    assert rpt.ok
    assert rpt.paths == [str(a), str(z)]


def test_write_failure_keeps_document(tmp_path, touch):
    v = touch(tmp_path / "v" / "a.mp4")
    target = tmp_path / "is_a_dir"
    target.mkdir()

    rpt = _service(InMemoryProbe({v: FULL_HD})).run(PlaylistSource.from_paths([v]), SortStrategy.name, target)

    assert isinstance(rpt.error, WriteError)
    assert rpt.error.path == target
    assert not rpt.written
    assert rpt.document is not None and "a.mp4" in rpt.document
    assert [e.path for e in rpt.entries] == [str(v)]


def test_missing_file_in_manual_list_gets_zero_size(tmp_path):
    ghost = tmp_path / "ghost.mp4"
    rpt = _service(InMemoryProbe()).run(PlaylistSource.from_paths([ghost]), SortStrategy.size, tmp_path / "g.xspf")
    assert rpt.ok
    assert rpt.entries[0].size_bytes == 0


def test_probe_that_raises_is_contained(tmp_path, touch):
    v = touch(tmp_path / "a.mp4")

    class ExplodingProbe:
        def probe(self, path: Path) -> VideoMetadata:
            raise RuntimeError("kaboom")

    rpt = PlaylistService(probe=ExplodingProbe(), max_workers=1).run(
        PlaylistSource.from_paths([v]), None, tmp_path / "e.xspf"
    )
    assert rpt.ok
    assert rpt.entries[0].metadata.is_empty


def test_log_sink_failure_does_not_abort(tmp_path, touch):
    v = touch(tmp_path / "a.mp4")

    class BrokenSink:
        def write(self, line: str) -> None:
            raise OSError("disk full")

        def close(self) -> None:
            pass

    rpt = _service(InMemoryProbe(), log_sink=BrokenSink()).run(
        PlaylistSource.from_paths([v]), None, tmp_path / "s.xspf"
    )
    assert rpt.ok and rpt.written
    assert rpt.log_lines  # the report still carries every line


def test_log_lines_timestamped_and_verbose_adds_detail(tmp_path, touch):
    v = touch(tmp_path / "a.mp4")
    probe = InMemoryProbe({v: FULL_HD})

    quiet = _service(probe).run(PlaylistSource.from_paths([v]), None, tmp_path / "1.xspf")
    loud = _service(probe, verbose=True).run(PlaylistSource.from_paths([v]), None, tmp_path / "2.xspf")

    ts = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} - ")
    assert all(ts.match(line) for line in quiet.log_lines)
    assert any("File processed: " + str(v) in line for line in quiet.log_lines)
    assert quiet.log_lines[-1].endswith("Process completed")
    assert len(loud.log_lines) == len(quiet.log_lines) + 1
    assert any("codec=h264 resolution=1920x1080" in line for line in loud.log_lines)
    assert quiet.document == loud.document


def test_extension_set_is_a_parameter(tmp_path, touch):
    touch(tmp_path / "a.mp4")
    touch(tmp_path / "b.mkv")
    rpt = _service(InMemoryProbe(), video_exts=["mp4"]).run(
        PlaylistSource.from_directory(tmp_path), None, tmp_path / "p.xspf"
    )
    assert [Path(p).name for p in rpt.paths] == ["a.mp4"]


def test_multiplicative_policy_orders_by_pixel_rate(tmp_path, touch):
    hd = touch(tmp_path / "hd.mp4")
    sd = touch(tmp_path / "sd.mp4", size=5 * 1024 * 1024)
    probe = InMemoryProbe({
        hd: FULL_HD,
        sd: VideoMetadata(video_codec="mpeg4", width=640, height=480, video_bitrate_kbps=1500.0, frame_rate=25.0),
    })
    svc = PlaylistService.with_policy(ScoringPolicy.multiplicative, probe=probe, max_workers=2)
    rpt = svc.run(PlaylistSource.from_directory(tmp_path), SortStrategy.quality, tmp_path / "mult.xspf")
    assert rpt.paths == [str(hd), str(sd)]
    assert isinstance(rpt.entries[0].score, float)


def test_default_output_path_comes_from_settings(tmp_path, touch, monkeypatch):
    v = touch(tmp_path / "a.mp4")
    monkeypatch.chdir(tmp_path)
    rpt = _service(InMemoryProbe()).run(PlaylistSource.from_paths([v]))
    assert rpt.ok
    assert rpt.output_path == Path("vlc_playlist.xspf")
    assert (tmp_path / "vlc_playlist.xspf").exists()


@pytest.mark.skipif(sys.platform != "linux", reason="needs a filesystem that stores arbitrary name bytes")
def test_non_utf8_file_name_is_percent_encoded(tmp_path):
    root = tmp_path / "raw"
    root.mkdir()
    raw = os.path.join(os.fsencode(root), b"clip_\xff.mp4")
    try:
        with open(raw, "wb") as fh:
            fh.write(b"x")
    except OSError:
        pytest.skip("filesystem rejects non-UTF-8 names")
    out = tmp_path / "raw.xspf"

    rpt = _service(InMemoryProbe()).run(PlaylistSource.from_directory(root), None, out)

    assert rpt.ok, rpt.error_message
    assert rpt.written
    root_el = ET.fromstring(out.read_bytes())
    locations = [el.text for el in root_el.findall("x:trackList/x:track/x:location", NS)]
    assert len(locations) == 1
    assert locations[0].endswith("/clip_%FF.mp4")
