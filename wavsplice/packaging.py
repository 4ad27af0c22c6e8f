"""Archive packaging and temp-file cleanup for processing results."""

import logging
import zipfile
from pathlib import Path

from wavsplice.errors import AudioIOError
from wavsplice.models import ProcessingResult

logger = logging.getLogger(__name__)


def create_zip_from_result(result: ProcessingResult, zip_path: Path) -> Path:
    """Bundle every output file into an uncompressed ZIP under its base name."""
    zip_path = Path(zip_path)
    try:
        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_STORED) as zf:
            for i, path in enumerate(result.files):
                arcname = Path(path).name or f"output_{i}.wav"
                zf.write(path, arcname=arcname)
    except OSError as e:
        raise AudioIOError(f"cannot create archive {zip_path}: {e}") from e
    return zip_path


def result_summary(result: ProcessingResult) -> dict:
    """Per-run metadata reported alongside the archive."""
    summary = result.to_dict()
    summary["files"] = [Path(p).name for p in result.files]
    summary["file_count"] = len(result.files)
    return summary


def _remove(path: Path, what: str) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Failed to remove %s %s: %s", what, path, e)


def cleanup_temp_files(
    input_path: Path | None, output_files: list[Path], zip_path: Path | None
) -> None:
    """Best-effort removal of a run's input, outputs and archive.

    The directory holding the outputs is removed too once it is empty.
    Failures are logged and never raised.
    """
    if input_path is not None:
        _remove(Path(input_path), "input file")

    for path in output_files:
        _remove(Path(path), "output file")

    if zip_path is not None:
        _remove(Path(zip_path), "archive")

    if output_files:
        parent = Path(output_files[0]).parent
        try:
            parent.rmdir()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to remove output directory %s: %s", parent, e)

    logger.info("Cleanup completed for processing session")
