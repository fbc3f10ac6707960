"""Domain events for the batch transcode pipeline.

The pipeline publishes these on the EventBus; the console reporter turns
them into output. See `infrastructure/event_bus.py` for the pub/sub mechanism.
"""

from datetime import datetime
from pathlib import Path
from typing import List
from pydantic import BaseModel, Field

from .models import AggregateStats, FailureStage, FileDelta, MediaProbe, PatternReport


class Event(BaseModel):
    """Base class for all domain events."""

    pass


class RunStarted(Event):
    mode: str
    patterns: List[str]
    working_dir: Path


class PatternStarted(Event):
    pattern: str


class FilesResolved(Event):
    """Emitted after a pattern was expanded.

    `excluded` holds reserved temp files that matched the pattern but were
    dropped (leftovers of an interrupted or failed run).
    """

    pattern: str
    files: List[Path]
    excluded: List[Path] = Field(default_factory=list)
    inspect_only: bool = False


class FileStarted(Event):
    """Emitted once the original file has been probed."""

    path: Path
    probe: MediaProbe
    started_at: datetime


class FileSkipped(Event):
    path: Path
    codec_name: str


class FileReplaced(Event):
    """Emitted right before the encoded temp file is moved over the original."""

    path: Path
    temp_path: Path


class FileCompressed(Event):
    path: Path
    original: MediaProbe
    compressed: MediaProbe
    delta: FileDelta


class FileFailed(Event):
    path: Path
    stage: FailureStage
    error_message: str


class PatternFinished(Event):
    report: PatternReport
    inspect_only: bool = False


class PatternFailed(Event):
    pattern: str
    error_message: str


class RunFinished(Event):
    mode: str
    total: AggregateStats
    elapsed_seconds: float
    patterns_processed: int
    failed_patterns: List[str] = Field(default_factory=list)
