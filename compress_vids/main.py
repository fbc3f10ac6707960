import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from compress_vids.config.models import build_run_config
from compress_vids.domain.errors import StartupArgumentError
from compress_vids.infrastructure.event_bus import EventBus
from compress_vids.infrastructure.ffmpeg import FFmpegAdapter
from compress_vids.infrastructure.ffprobe import FFprobeAdapter
from compress_vids.infrastructure.file_scanner import FileScanner
from compress_vids.infrastructure.logging import setup_logging
from compress_vids.pipeline.controller import RunController
from compress_vids.pipeline.processor import SourceProcessor
from compress_vids.pipeline.replacement import FileReplacer
from compress_vids.ui.reporter import ConsoleReporter

app = typer.Typer(help="compress-vids - batch transcode videos to HEVC in place")


@app.command()
def main(
    mode: Optional[str] = typer.Argument(None, help="check (list matched files) or compress (transcode in place)"),
    patterns: Optional[List[str]] = typer.Argument(None, help="Files, directories or glob patterns"),
    log_path: Optional[Path] = typer.Option(None, "--log-path", help="Write a log file to this path"),
    debug: bool = typer.Option(False, "--debug/--no-debug", help="Enable verbose debug logging"),
):
    """Transcode matched videos to HEVC and report the space saved."""
    try:
        config = build_run_config(mode, patterns, debug=debug, log_path=log_path)
    except StartupArgumentError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    logger = setup_logging(config.log_path, debug=config.debug)
    logger.info(
        f"Config: mode={config.mode.value}, codec={config.encoder.video_codec}, "
        f"crf={config.encoder.crf}, patterns={len(config.patterns)}"
    )

    try:
        bus = EventBus()
        ConsoleReporter(bus, Console())

        scanner = FileScanner(temp_prefix=config.encoder.temp_prefix)
        ffprobe = FFprobeAdapter(ffprobe_bin=config.encoder.ffprobe_bin)
        ffmpeg = FFmpegAdapter(config.encoder)
        replacer = FileReplacer(ffmpeg, bus, temp_prefix=config.encoder.temp_prefix)
        processor = SourceProcessor(
            mode=config.mode,
            event_bus=bus,
            file_scanner=scanner,
            ffprobe_adapter=ffprobe,
            replacer=replacer,
        )
        RunController(processor, bus).run(config)

    except KeyboardInterrupt:
        logger.info("Interrupted by user (Ctrl+C)")
        typer.secho("\n✓ Stopped by user (Ctrl+C)", fg=typer.colors.YELLOW)
        raise typer.Exit(code=130)

    except Exception as e:
        logging.getLogger(__name__).exception("Fatal error")
        typer.secho(f"Fatal Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
