from rich.console import Console
from rich.markup import escape
from rich.table import Table

from compress_vids.domain.events import (
    FileCompressed,
    FileFailed,
    FileReplaced,
    FileSkipped,
    FileStarted,
    FilesResolved,
    PatternFailed,
    PatternFinished,
    RunFinished,
    RunStarted,
)
from compress_vids.domain.models import AggregateStats
from compress_vids.infrastructure.event_bus import EventBus
from compress_vids.ui.format import format_duration, format_percent, format_ratio, format_size


class ConsoleReporter:
    """Subscribes to EventBus and prints progress, per-file stats and summaries.

    ffmpeg writes its own progress line to the same terminal between
    FileStarted and FileReplaced.
    """

    def __init__(self, bus: EventBus, console: Console):
        self.bus = bus
        self.console = console
        self._setup_subscriptions()

    def _setup_subscriptions(self):
        self.bus.subscribe(RunStarted, self.on_run_started)
        self.bus.subscribe(FilesResolved, self.on_files_resolved)
        self.bus.subscribe(FileStarted, self.on_file_started)
        self.bus.subscribe(FileSkipped, self.on_file_skipped)
        self.bus.subscribe(FileReplaced, self.on_file_replaced)
        self.bus.subscribe(FileCompressed, self.on_file_compressed)
        self.bus.subscribe(FileFailed, self.on_file_failed)
        self.bus.subscribe(PatternFinished, self.on_pattern_finished)
        self.bus.subscribe(PatternFailed, self.on_pattern_failed)
        self.bus.subscribe(RunFinished, self.on_run_finished)

    def on_run_started(self, event: RunStarted):
        self.console.print(f"cwd {escape(str(event.working_dir))}")
        self.console.print(f"Starting in mode [bold]{event.mode}[/bold]")

    def on_files_resolved(self, event: FilesResolved):
        for path in event.excluded:
            self.console.print(f"[yellow]⚠ Ignoring leftover temp file {escape(str(path))}[/yellow]")
        if not event.inspect_only:
            self.console.print(f"[cyan]{len(event.files)} file(s) for {escape(event.pattern)}[/cyan]")
            return
        self.console.print("======")
        for path in event.files:
            self.console.print(escape(str(path)), highlight=False)
        self.console.print(f"==> {len(event.files)} for {escape(event.pattern)}")

    def on_file_started(self, event: FileStarted):
        probe = event.probe
        codec = probe.video_stream.codec_name if probe.video_stream else "none"
        self.console.print(
            f"\n[bold]File:[/bold] {escape(str(event.path))}\n"
            f"Start-Time: {event.started_at.strftime('%Y-%m-%d %H:%M:%S')}\n"
            f"Duration: {format_duration(probe.duration_seconds)}\n"
            f"Orig. size: {format_size(probe.size_bytes)}\n"
            f"Orig. bitrate: {escape(probe.bit_rate)}\n"
            f"Orig. codec: {escape(codec)}",
            highlight=False,
        )

    def on_file_skipped(self, event: FileSkipped):
        self.console.print(f"[dim]skipping h265 video ({escape(event.codec_name)})[/dim]")

    def on_file_replaced(self, event: FileReplaced):
        self.console.print(f"Moving result to {escape(str(event.path))}", highlight=False)

    def on_file_compressed(self, event: FileCompressed):
        compressed = event.compressed
        codec = compressed.video_stream.codec_name if compressed.video_stream else "none"
        ratio = format_ratio(event.delta.compressed_size_bytes, event.delta.original_size_bytes)
        self.console.print(
            f"[bold]File:[/bold] {escape(str(event.path))}\n"
            f"new size: {format_size(compressed.size_bytes)} ({ratio})\n"
            f"new bitrate: {escape(compressed.bit_rate)}\n"
            f"new codec: {escape(codec)}\n"
            f"time: {format_duration(event.delta.processing_time_seconds)}",
            highlight=False,
        )
        if event.delta.compressed_size_bytes > event.delta.original_size_bytes:
            self.console.print("[yellow]⚠ Compressed file is larger than the original[/yellow]")

    def on_file_failed(self, event: FileFailed):
        self.console.print(
            f"[red]✗ {escape(str(event.path))} failed at {event.stage.value}: {escape(event.error_message)}[/red]",
            highlight=False,
        )

    def on_pattern_failed(self, event: PatternFailed):
        self.console.print(
            f"[red]Failed to process {escape(event.pattern)}: {escape(event.error_message)}[/red]",
            highlight=False,
        )

    def _stats_lines(self, stats: AggregateStats) -> str:
        return (
            f"Clip duration: {format_duration(stats.clip_duration_seconds)}\n"
            f"Original size: {format_size(stats.original_size_bytes)}\n"
            f"Compressed size: {format_size(stats.compressed_size_bytes)}\n"
            f"Saved: {format_percent(stats.saved_percent)}"
        )

    def on_pattern_finished(self, event: PatternFinished):
        if event.inspect_only:
            return
        report = event.report
        self.console.print(
            f"\n[bold]Summary for {escape(report.pattern)}[/bold] "
            f"(compressed {report.succeeded}, skipped {report.skipped}, failed {report.failed})\n"
            f"{self._stats_lines(report.stats)}",
            highlight=False,
        )

    def on_run_finished(self, event: RunFinished):
        if event.mode == "compress":
            table = Table(title="Total")
            table.add_column("Clip duration", justify="right")
            table.add_column("Original size", justify="right")
            table.add_column("Compressed size", justify="right")
            table.add_column("Saved", justify="right")
            table.add_row(
                format_duration(event.total.clip_duration_seconds),
                format_size(event.total.original_size_bytes),
                format_size(event.total.compressed_size_bytes),
                format_percent(event.total.saved_percent),
            )
            self.console.print(table)
        if event.failed_patterns:
            self.console.print(
                f"[red]{len(event.failed_patterns)} pattern(s) failed: "
                f"{escape(', '.join(event.failed_patterns))}[/red]"
            )
        self.console.print(f"Finished in {format_duration(event.elapsed_seconds)}")
