import json
import pytest
from pathlib import Path
from unittest.mock import MagicMock
from compress_vids.config.models import RunMode
from compress_vids.domain.models import MediaProbe, StreamSummary, StreamType
from compress_vids.infrastructure.event_bus import EventBus
from compress_vids.infrastructure.file_scanner import FileScanner
from compress_vids.pipeline.processor import SourceProcessor
from compress_vids.pipeline.replacement import FileReplacer

# ============================================================================
# ffprobe Output Helpers
# ============================================================================

def ffprobe_json(codec_name="h264", duration="10.000000", size="10000000", bit_rate="8000000", streams=None):
    """Builds an ffprobe -show_format -show_streams JSON document."""
    if streams is None:
        streams = [
            {"index": 0, "codec_type": "video", "codec_name": codec_name},
            {"index": 1, "codec_type": "audio", "codec_name": "aac"},
        ]
    return json.dumps({
        "streams": streams,
        "format": {
            "filename": "clip.mp4",
            "duration": duration,
            "size": size,
            "bit_rate": bit_rate,
        },
    })


def make_probe(path, codec_name="h264", duration=10.0, size=10_000_000, bit_rate="8000000", with_video=True):
    streams = [StreamSummary(stream_type=StreamType.AUDIO, codec_name="aac")]
    if with_video:
        streams.insert(0, StreamSummary(stream_type=StreamType.VIDEO, codec_name=codec_name))
    return MediaProbe(
        path=Path(path),
        duration_seconds=duration,
        size_bytes=size,
        bit_rate=bit_rate,
        streams=streams,
    )


class FakeFFprobe:
    """Returns queued MediaProbe values (or raises queued exceptions) per path."""

    def __init__(self):
        self.responses = {}
        self.calls = []

    def queue(self, path, *responses):
        self.responses.setdefault(Path(path), []).extend(responses)

    def probe(self, path):
        self.calls.append(Path(path))
        response = self.responses[Path(path)].pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


class FakeFFmpeg:
    """Writes `output_sizes[input]` bytes to the output path, or raises a queued error."""

    def __init__(self):
        self.output_sizes = {}
        self.errors = {}
        self.calls = []

    def encode(self, input_path, output_path):
        self.calls.append((Path(input_path), Path(output_path)))
        error = self.errors.get(Path(input_path))
        if error is not None:
            output_path.write_bytes(b"partial")
            raise error
        output_path.write_bytes(b"x" * self.output_sizes.get(Path(input_path), 16))

# ============================================================================
# Pipeline Fixtures
# ============================================================================

@pytest.fixture
def event_bus():
    """Returns a fresh EventBus instance."""
    return EventBus()


@pytest.fixture
def recorded_events(event_bus):
    """Records every published event, in order."""
    events = []
    original_publish = event_bus.publish

    def publish(event):
        events.append(event)
        original_publish(event)

    event_bus.publish = publish
    return events


@pytest.fixture
def fake_ffprobe():
    return FakeFFprobe()


@pytest.fixture
def fake_ffmpeg():
    return FakeFFmpeg()


@pytest.fixture
def make_processor(event_bus, fake_ffprobe, fake_ffmpeg):
    def _make(mode=RunMode.COMPRESS, scanner=None):
        return SourceProcessor(
            mode=mode,
            event_bus=event_bus,
            file_scanner=scanner or FileScanner(),
            ffprobe_adapter=fake_ffprobe,
            replacer=FileReplacer(fake_ffmpeg, event_bus),
        )
    return _make

# ============================================================================
# File System Fixtures
# ============================================================================

@pytest.fixture
def footage_dir(tmp_path):
    """Creates a directory with dummy source clips."""
    footage = tmp_path / "footage"
    footage.mkdir()
    for name in ("a.mp4", "b.mov"):
        (footage / name).write_bytes(b"original footage " * 100)
    return footage


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (integration tests with real ffmpeg)"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
