"""
Integration tests against real ffmpeg/ffprobe binaries.
"""
import pytest
import shutil
import subprocess
from pathlib import Path
from compress_vids.config.models import EncoderConfig, RunConfig, RunMode
from compress_vids.infrastructure.event_bus import EventBus
from compress_vids.infrastructure.ffmpeg import FFmpegAdapter
from compress_vids.infrastructure.ffprobe import FFprobeAdapter
from compress_vids.infrastructure.file_scanner import FileScanner
from compress_vids.pipeline.controller import RunController
from compress_vids.pipeline.processor import SourceProcessor
from compress_vids.pipeline.replacement import FileReplacer


def _has_encoders(*names):
    if not shutil.which("ffmpeg") or not shutil.which("ffprobe"):
        return False
    result = subprocess.run(["ffmpeg", "-hide_banner", "-encoders"], capture_output=True, text=True)
    return all(name in result.stdout for name in names)


pytestmark = [
    pytest.mark.slow,
    pytest.mark.integration,
    pytest.mark.skipif(not _has_encoders("libx264", "libx265"), reason="ffmpeg with libx264/libx265 not available"),
]


def _make_clip(path: Path, codec: str):
    subprocess.run(
        ["ffmpeg", "-hide_banner", "-v", "error", "-y",
         "-f", "lavfi", "-i", "testsrc=duration=2:size=320x240:rate=25",
         "-c:v", codec, "-pix_fmt", "yuv420p", str(path)],
        check=True,
    )


def _video_codec(path: Path) -> str:
    result = subprocess.run(
        ["ffprobe", "-v", "error", "-select_streams", "v:0",
         "-show_entries", "stream=codec_name", "-of", "csv=p=0", str(path)],
        capture_output=True, text=True,
    )
    return result.stdout.strip()


def _controller(mode=RunMode.COMPRESS):
    encoder = EncoderConfig()
    bus = EventBus()
    processor = SourceProcessor(
        mode=mode,
        event_bus=bus,
        file_scanner=FileScanner(temp_prefix=encoder.temp_prefix),
        ffprobe_adapter=FFprobeAdapter(encoder.ffprobe_bin),
        replacer=FileReplacer(FFmpegAdapter(encoder), bus, temp_prefix=encoder.temp_prefix),
    )
    return RunController(processor, bus)


def test_real_h264_clip_is_replaced_with_hevc(tmp_path):
    clip = tmp_path / "clip.mp4"
    _make_clip(clip, "libx264")
    original_size = clip.stat().st_size

    summary = _controller().run(RunConfig(mode=RunMode.COMPRESS, patterns=[str(tmp_path)]))

    assert _video_codec(clip) == "hevc"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["clip.mp4"]
    report = summary.reports[0]
    assert report.succeeded == 1
    assert report.stats.original_size_bytes == original_size
    assert report.stats.compressed_size_bytes == clip.stat().st_size
    assert report.stats.clip_duration_seconds == pytest.approx(2.0, abs=0.1)


def test_real_hevc_clip_is_skipped(tmp_path):
    clip = tmp_path / "already.mp4"
    _make_clip(clip, "libx265")
    before = clip.read_bytes()

    summary = _controller().run(RunConfig(mode=RunMode.COMPRESS, patterns=[str(clip)]))

    assert clip.read_bytes() == before
    assert summary.reports[0].skipped == 1
    assert summary.total.original_size_bytes == 0


def test_real_non_video_file_fails_without_stopping(tmp_path):
    (tmp_path / "broken.mp4").write_bytes(b"not a video")
    clip = tmp_path / "clip.mp4"
    _make_clip(clip, "libx264")

    summary = _controller().run(RunConfig(mode=RunMode.COMPRESS, patterns=[str(tmp_path)]))

    report = summary.reports[0]
    assert report.failed == 1
    assert report.succeeded == 1
    assert (tmp_path / "broken.mp4").read_bytes() == b"not a video"
    assert _video_codec(clip) == "hevc"
