import logging
import time
from pathlib import Path

from compress_vids.config.models import RunConfig
from compress_vids.domain.errors import PatternExpansionError
from compress_vids.domain.events import PatternFailed, RunFinished, RunStarted
from compress_vids.domain.models import RunSummary
from compress_vids.infrastructure.event_bus import EventBus
from compress_vids.pipeline.processor import SourceProcessor


class RunController:
    """Runs every pattern in order and folds their totals into one summary.

    An error escaping one pattern is logged and published as PatternFailed;
    the remaining patterns still run.
    """

    def __init__(self, processor: SourceProcessor, event_bus: EventBus):
        self.processor = processor
        self.event_bus = event_bus
        self.logger = logging.getLogger(__name__)

    def run(self, config: RunConfig) -> RunSummary:
        mode = config.mode.value
        self.logger.info(f"Run started: mode={mode}, patterns={config.patterns}")
        self.event_bus.publish(RunStarted(mode=mode, patterns=config.patterns, working_dir=Path.cwd()))

        start_time = time.monotonic()
        summary = RunSummary(mode=mode)

        for pattern in config.patterns:
            try:
                report = self.processor.process_pattern(pattern)
            except PatternExpansionError as e:
                self._pattern_failed(summary, pattern, str(e))
                continue
            except Exception as e:
                self.logger.exception(f"Unexpected error while processing {pattern}")
                self._pattern_failed(summary, pattern, f"{type(e).__name__}: {e}")
                continue
            summary.reports.append(report)
            summary.total = summary.total.merge(report.stats)

        summary.elapsed_seconds = time.monotonic() - start_time
        self.logger.info(
            f"Run finished: patterns={len(summary.reports)} failed_patterns={len(summary.failed_patterns)} "
            f"elapsed={summary.elapsed_seconds:.2f}s"
        )
        self.event_bus.publish(
            RunFinished(
                mode=mode,
                total=summary.total,
                elapsed_seconds=summary.elapsed_seconds,
                patterns_processed=len(summary.reports),
                failed_patterns=summary.failed_patterns,
            )
        )
        return summary

    def _pattern_failed(self, summary: RunSummary, pattern: str, message: str) -> None:
        self.logger.error(f"Failed to process {pattern}: {message}")
        summary.failed_patterns.append(pattern)
        self.event_bus.publish(PatternFailed(pattern=pattern, error_message=message))
