"""Service settings read from the environment."""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path


def _env(key: str, default: str) -> str:
    return os.environ.get(key) or default


def _env_int(key: str, default: int) -> int:
    value = os.environ.get(key)
    if value:
        try:
            return int(value)
        except ValueError:
            pass
    return default


@dataclass
class Settings:
    host: str = "127.0.0.1"
    port: int = 8081
    max_file_size: int = 50 * 1024 * 1024
    temp_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=_env("WAVSPLICE_HOST", "127.0.0.1"),
            port=_env_int("WAVSPLICE_PORT", 8081),
            max_file_size=_env_int("WAVSPLICE_MAX_FILE_SIZE", 50 * 1024 * 1024),
            temp_dir=Path(_env("WAVSPLICE_TEMP_DIR", tempfile.gettempdir())),
            log_level=_env("WAVSPLICE_LOG_LEVEL", "INFO").upper(),
        )
