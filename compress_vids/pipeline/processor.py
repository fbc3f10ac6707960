"""Per-pattern processing: expand, filter, then transcode files one at a time.

Each file runs access check → probe → policy → encode/replace → re-probe.
A failure at any stage is logged, published as FileFailed and absorbed, so
one bad file never stops the rest of the pattern.
"""

import logging
import os
import time
from datetime import datetime
from pathlib import Path

from compress_vids.config.models import RunMode
from compress_vids.domain.errors import CompressVidsError, FileAccessError, ReplaceError
from compress_vids.domain.events import (
    FileCompressed,
    FileFailed,
    FileSkipped,
    FileStarted,
    FilesResolved,
    PatternFinished,
    PatternStarted,
)
from compress_vids.domain.models import (
    AggregateStats,
    FailureStage,
    FileDelta,
    PatternReport,
    TranscodeOutcome,
)
from compress_vids.domain.policy import should_transcode
from compress_vids.infrastructure.event_bus import EventBus
from compress_vids.infrastructure.ffprobe import FFprobeAdapter
from compress_vids.infrastructure.file_scanner import FileScanner
from compress_vids.pipeline.replacement import FileReplacer


class SourceProcessor:
    """Processes every file matched by one pattern, sequentially."""

    def __init__(
        self,
        mode: RunMode,
        event_bus: EventBus,
        file_scanner: FileScanner,
        ffprobe_adapter: FFprobeAdapter,
        replacer: FileReplacer,
    ):
        self.mode = mode
        self.event_bus = event_bus
        self.file_scanner = file_scanner
        self.ffprobe_adapter = ffprobe_adapter
        self.replacer = replacer
        self.logger = logging.getLogger(__name__)

    @property
    def inspect_only(self) -> bool:
        return self.mode == RunMode.CHECK

    def process(self, pattern: str) -> AggregateStats:
        """Expands `pattern` and, in compress mode, transcodes every match.

        PatternExpansionError propagates to the caller; per-file errors do not.
        """
        return self.process_pattern(pattern).stats

    def process_pattern(self, pattern: str) -> PatternReport:
        """Like `process`, but returns the per-status file counts along with the totals."""
        self.event_bus.publish(PatternStarted(pattern=pattern))
        scan = self.file_scanner.scan(pattern)
        if scan.excluded:
            self.logger.warning(
                f"Ignoring {len(scan.excluded)} leftover temp file(s) for {pattern}: "
                f"{', '.join(str(p) for p in scan.excluded)}"
            )
        self.logger.info(f"Resolved {len(scan.files)} file(s) for {pattern}")
        self.event_bus.publish(
            FilesResolved(pattern=pattern, files=scan.files, excluded=scan.excluded, inspect_only=self.inspect_only)
        )

        report = PatternReport(pattern=pattern)
        if not self.inspect_only:
            for file_path in scan.files:
                report.record(self.compress_file(file_path))

        self.logger.info(
            f"Pattern finished: {pattern} succeeded={report.succeeded} "
            f"skipped={report.skipped} failed={report.failed}"
        )
        self.event_bus.publish(PatternFinished(report=report, inspect_only=self.inspect_only))
        return report

    def _fail(self, path: Path, stage: FailureStage, message: str) -> TranscodeOutcome:
        self.logger.error(f"FAILED [{stage.value}] {path}: {message}")
        self.event_bus.publish(FileFailed(path=path, stage=stage, error_message=message))
        return TranscodeOutcome.failed(path, stage, message)

    def _check_access(self, path: Path) -> None:
        if not path.is_file():
            raise FileAccessError(f"File no longer exists: {path}")
        if not os.access(path, os.R_OK | os.W_OK):
            raise FileAccessError(f"File is not readable and writable: {path}")

    def compress_file(self, path: Path) -> TranscodeOutcome:
        """Runs the full pipeline for a single file and returns its outcome.

        Any exception other than KeyboardInterrupt becomes a FAILED outcome
        at the stage that was running.
        """
        start_time = time.monotonic()
        stage = FailureStage.ACCESS

        try:
            self._check_access(path)

            stage = FailureStage.PROBE
            original = self.ffprobe_adapter.probe(path)
            self.event_bus.publish(FileStarted(path=path, probe=original, started_at=datetime.now()))

            stage = FailureStage.VIDEO_STREAM
            video_stream = original.require_video_stream()
            if not should_transcode(video_stream.codec_name):
                self.logger.info(f"SKIPPED: {path} (codec={video_stream.codec_name})")
                self.event_bus.publish(FileSkipped(path=path, codec_name=video_stream.codec_name))
                return TranscodeOutcome.skipped(path)

            stage = FailureStage.ENCODE
            self.replacer.replace(path)

            stage = FailureStage.REPROBE
            compressed = self.ffprobe_adapter.probe(path)

            delta = FileDelta(
                clip_duration_seconds=original.duration_seconds,
                original_size_bytes=original.size_bytes,
                compressed_size_bytes=compressed.size_bytes,
                processing_time_seconds=time.monotonic() - start_time,
            )
            if delta.compressed_size_bytes > delta.original_size_bytes:
                self.logger.warning(
                    f"Compressed file is larger than the original: {path} "
                    f"({delta.original_size_bytes} -> {delta.compressed_size_bytes} bytes)"
                )
            self.logger.info(
                f"COMPRESSED: {path} {delta.original_size_bytes} -> {delta.compressed_size_bytes} bytes "
                f"in {delta.processing_time_seconds:.2f}s"
            )
            self.event_bus.publish(FileCompressed(path=path, original=original, compressed=compressed, delta=delta))
            return TranscodeOutcome.succeeded(path, delta)
        except ReplaceError as e:
            return self._fail(path, FailureStage.REPLACE, str(e))
        except CompressVidsError as e:
            return self._fail(path, stage, str(e))
        except Exception as e:
            self.logger.exception(f"Unexpected error processing {path}")
            return self._fail(path, stage, f"{type(e).__name__}: {e}")
