"""Root logger configuration for the CLI and the web service."""

import logging
import logging.handlers
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    level: str | int = logging.INFO,
    log_file: Path | None = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """Log to stderr and, if ``log_file`` is given, to a rotating file."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                str(log_file),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        )

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any existing handlers to prevent duplicate logs
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
