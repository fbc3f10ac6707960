from enum import Enum
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from compress_vids.domain.errors import MissingVideoStreamError


class StreamType(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    OTHER = "other"

    @classmethod
    def from_codec_type(cls, codec_type: str) -> "StreamType":
        if codec_type == "video":
            return cls.VIDEO
        if codec_type == "audio":
            return cls.AUDIO
        return cls.OTHER


class OutcomeStatus(str, Enum):
    SKIPPED = "SKIPPED"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class FailureStage(str, Enum):
    ACCESS = "access"
    PROBE = "probe"
    VIDEO_STREAM = "video_stream"
    ENCODE = "encode"
    REPLACE = "replace"
    REPROBE = "reprobe"


class StreamSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    stream_type: StreamType
    codec_name: str


class MediaProbe(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: Path
    duration_seconds: float = Field(ge=0)
    size_bytes: int = Field(ge=0)
    bit_rate: str
    streams: List[StreamSummary] = Field(default_factory=list)

    @property
    def video_stream(self) -> Optional[StreamSummary]:
        return next((s for s in self.streams if s.stream_type == StreamType.VIDEO), None)

    def require_video_stream(self) -> StreamSummary:
        stream = self.video_stream
        if stream is None:
            raise MissingVideoStreamError(f"No video stream found in {self.path}")
        return stream


class FileDelta(BaseModel):
    """Contribution of one successfully transcoded file to the totals."""

    model_config = ConfigDict(frozen=True)

    clip_duration_seconds: float = Field(default=0.0, ge=0)
    original_size_bytes: int = Field(default=0, ge=0)
    compressed_size_bytes: int = Field(default=0, ge=0)
    processing_time_seconds: float = Field(default=0.0, ge=0)


class AggregateStats(FileDelta):
    """Running totals for one pattern or for the whole run.

    Folding is plain field-wise addition, so the order files are
    processed in does not change the result.
    """

    def add(self, delta: FileDelta) -> "AggregateStats":
        return AggregateStats(
            clip_duration_seconds=self.clip_duration_seconds + delta.clip_duration_seconds,
            original_size_bytes=self.original_size_bytes + delta.original_size_bytes,
            compressed_size_bytes=self.compressed_size_bytes + delta.compressed_size_bytes,
            processing_time_seconds=self.processing_time_seconds + delta.processing_time_seconds,
        )

    def merge(self, other: "AggregateStats") -> "AggregateStats":
        return self.add(other)

    @property
    def saved_percent(self) -> float:
        if self.original_size_bytes <= 0:
            return 0.0
        return (1 - self.compressed_size_bytes / self.original_size_bytes) * 100.0


class TranscodeOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: Path
    status: OutcomeStatus
    delta: Optional[FileDelta] = None
    stage: Optional[FailureStage] = None
    error_message: Optional[str] = None

    @model_validator(mode="after")
    def validate_status_fields(self):
        if (self.delta is not None) != (self.status == OutcomeStatus.SUCCEEDED):
            raise ValueError("delta must be present exactly when status is SUCCEEDED")
        if (self.stage is not None) != (self.status == OutcomeStatus.FAILED):
            raise ValueError("stage must be present exactly when status is FAILED")
        return self

    @classmethod
    def skipped(cls, path: Path) -> "TranscodeOutcome":
        return cls(path=path, status=OutcomeStatus.SKIPPED)

    @classmethod
    def succeeded(cls, path: Path, delta: FileDelta) -> "TranscodeOutcome":
        return cls(path=path, status=OutcomeStatus.SUCCEEDED, delta=delta)

    @classmethod
    def failed(cls, path: Path, stage: FailureStage, error_message: str) -> "TranscodeOutcome":
        return cls(path=path, status=OutcomeStatus.FAILED, stage=stage, error_message=error_message)


class PatternReport(BaseModel):
    pattern: str
    stats: AggregateStats = Field(default_factory=AggregateStats)
    succeeded: int = 0
    skipped: int = 0
    failed: int = 0

    def record(self, outcome: TranscodeOutcome) -> None:
        if outcome.status == OutcomeStatus.SUCCEEDED:
            self.succeeded += 1
            self.stats = self.stats.add(outcome.delta)
        elif outcome.status == OutcomeStatus.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1


class RunSummary(BaseModel):
    mode: str
    reports: List[PatternReport] = Field(default_factory=list)
    failed_patterns: List[str] = Field(default_factory=list)
    total: AggregateStats = Field(default_factory=AggregateStats)
    elapsed_seconds: float = 0.0
