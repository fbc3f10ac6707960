import json
import logging
from pathlib import Path
from typing import List, Optional, Union
from pydantic import BaseModel, ValidationError

from compress_vids.domain.errors import ProbeError
from compress_vids.domain.models import MediaProbe, StreamSummary, StreamType
from compress_vids.infrastructure.process import ExternalToolError, run_captured


class FFprobeFormat(BaseModel):
    """The subset of ffprobe's `format` object we rely on."""
    duration: float
    size: int
    bit_rate: Union[int, str]


class FFprobeStream(BaseModel):
    codec_type: str
    # Data/timecode streams in camera containers may omit it; enforced on the video stream only.
    codec_name: Optional[str] = None


class FFprobeOutput(BaseModel):
    format: FFprobeFormat
    streams: List[FFprobeStream]


class FFprobeAdapter:
    """Wrapper around ffprobe producing typed MediaProbe results."""

    def __init__(self, ffprobe_bin: str = "ffprobe"):
        self.ffprobe_bin = ffprobe_bin
        self.logger = logging.getLogger(__name__)

    def _build_command(self, file_path: Path) -> List[str]:
        return [
            self.ffprobe_bin,
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(file_path),
        ]

    def probe(self, file_path: Path) -> MediaProbe:
        """Executes ffprobe and parses its JSON output.

        Raises ProbeError when ffprobe fails, prints invalid JSON, or the
        output is missing `format` or any required field.
        """
        try:
            stdout = run_captured(self._build_command(file_path))
        except ExternalToolError as exc:
            raise ProbeError(f"ffprobe failed for {file_path}: {exc}") from exc

        return self.parse(file_path, stdout)

    def parse(self, file_path: Path, stdout: str) -> MediaProbe:
        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as exc:
            raise ProbeError(f"ffprobe returned invalid JSON for {file_path}: {exc}") from exc

        if not isinstance(data, dict) or "format" not in data:
            raise ProbeError(f"ffprobe output for {file_path} has no format section")

        try:
            raw = FFprobeOutput.model_validate(data)
        except ValidationError as exc:
            raise ProbeError(f"Unexpected ffprobe output for {file_path}: {exc}") from exc

        streams: List[StreamSummary] = []
        for stream in raw.streams:
            stream_type = StreamType.from_codec_type(stream.codec_type)
            if stream.codec_name is None:
                if stream_type == StreamType.VIDEO:
                    raise ProbeError(f"Video stream in {file_path} has no codec_name")
                self.logger.debug(f"Stream without codec_name in {file_path.name} (type={stream.codec_type})")
            streams.append(StreamSummary(stream_type=stream_type, codec_name=stream.codec_name or "unknown"))

        try:
            return MediaProbe(
                path=file_path,
                duration_seconds=raw.format.duration,
                size_bytes=raw.format.size,
                bit_rate=str(raw.format.bit_rate),
                streams=streams,
            )
        except ValidationError as exc:
            raise ProbeError(f"Invalid ffprobe values for {file_path}: {exc}") from exc
