"""Logging helpers for the terminal UI."""

from __future__ import annotations

from pathlib import Path

from loguru import logger


def configure_logging(log_file: str | None, level: str = "INFO") -> Path | None:
    """
    Configure loguru for a full-screen terminal app.

    The stderr sink is removed because it would draw over the UI. When a log file
    is configured, records go to a rotating file instead. Returns the file path in
    use, otherwise None.
    """
    logger.remove()

    if not log_file:
        return None

    log_path = Path(log_file).expanduser()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level=level,
            rotation="5 MB",
            retention=5,
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )
    except OSError as exc:
        logger.warning(f"File logging disabled; unable to write to {log_path}: {exc}")
        return None

    return log_path
