import logging
from pathlib import Path
from typing import Optional


def setup_logging(log_path: Optional[Path] = None, debug: bool = False) -> logging.Logger:
    """
    Setup logging configuration for compress-vids.

    Console output belongs to the reporter, so log records only go to a file
    when log_path is given. Without it records are discarded.

    Args:
        log_path: Optional path to the log file; parent directories are created
        debug: If True, enable DEBUG level logging (ffmpeg/ffprobe command lines)
    """
    level = logging.DEBUG if debug else logging.INFO

    handlers: list = []
    if log_path:
        log_file = Path(log_path)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    else:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized: {log_path or 'disabled'} (debug={'ON' if debug else 'OFF'})")

    return logger
