"""HTTP routes for wavsplice."""

import io
import json
import logging
import shutil
import time
import uuid
from pathlib import Path

from flask import Blueprint, current_app, jsonify, render_template, request, send_file
from werkzeug.exceptions import HTTPException

from wavsplice import engine
from wavsplice.config import config_from_form
from wavsplice.errors import AudioError, AudioFileNotFoundError, AudioIOError
from wavsplice.packaging import cleanup_temp_files, create_zip_from_result, result_summary

logger = logging.getLogger(__name__)

bp = Blueprint("web", __name__, template_folder="templates")


@bp.errorhandler(AudioError)
def handle_audio_error(error: AudioError):
    logger.error("Audio processing failed: %s", error)
    return jsonify(error.to_dict()), error.status_code


@bp.errorhandler(Exception)
def handle_unexpected_error(error: Exception):
    if isinstance(error, HTTPException):
        return error
    logger.exception("Unhandled error while processing request")
    wrapped = AudioError(str(error) or error.__class__.__name__)
    return jsonify(wrapped.to_dict()), wrapped.status_code


@bp.route("/")
def index():
    return render_template("index.html")


@bp.route("/api/v1/health")
def health():
    uptime = time.time() - current_app.config["START_TIME"]
    return jsonify({
        "status": "healthy",
        "version": current_app.config["VERSION"],
        "uptime_seconds": int(uptime),
    })


@bp.route("/api/v1/audio/<processor_type>", methods=["POST"])
@bp.route("/api/v1/audio/<processor_type>/multipart", methods=["POST"])
def process_audio(processor_type: str):
    if processor_type not in engine.PROCESSORS:
        return jsonify({
            "error": f"Unknown processor type: {processor_type}",
            "error_type": "NotFound",
        }), 404
    return _process_upload(processor_type)


@bp.route("/process", methods=["POST"])
def process_legacy():
    """Splice endpoint kept for older clients posting form fields."""
    return _process_upload("splice")


def _process_upload(processor_type: str):
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        raise AudioFileNotFoundError("No file provided")

    config = config_from_form(request.form, processor_type)
    # Reject bad parameters before anything is written to disk
    engine.get_processor(config).validate_config(config)

    job_dir = Path(current_app.config["WORK_DIR"]) / uuid.uuid4().hex[:12]
    input_path = job_dir / "input.wav"
    output_dir = job_dir / "output"
    zip_path = job_dir / f"{processor_type}.zip"

    result = None
    try:
        try:
            job_dir.mkdir(parents=True, exist_ok=True)
            upload.save(input_path)
        except OSError as e:
            raise AudioIOError(f"cannot store upload: {e}") from e

        logger.info("Processing %s request: %s (%s)", processor_type, upload.filename, config)

        result = engine.process(input_path, output_dir, config)
        create_zip_from_result(result, zip_path)
        try:
            payload = io.BytesIO(zip_path.read_bytes())
        except OSError as e:
            raise AudioIOError(f"cannot read archive {zip_path}: {e}") from e
    finally:
        produced = result.files if result else sorted(output_dir.glob("*.wav"))
        cleanup_temp_files(input_path, produced, zip_path)
        _discard_job_dir(job_dir)

    summary = result_summary(result)
    response = send_file(
        payload,
        mimetype="application/zip",
        as_attachment=True,
        download_name=f"{processor_type}_result.zip",
    )
    response.headers["X-Processor-Type"] = result.metadata.processor_type
    response.headers["X-Output-Count"] = str(summary["file_count"])
    response.headers["X-Processing-Time-Ms"] = str(result.metadata.processing_time_ms)
    response.headers["X-Input-Duration"] = f"{result.metadata.input_duration:.3f}"
    response.headers["X-Processing-Summary"] = json.dumps(summary, separators=(",", ":"))
    return response


def _discard_job_dir(job_dir: Path) -> None:
    if not job_dir.exists():
        return
    try:
        shutil.rmtree(job_dir)
    except OSError as e:
        logger.warning("Failed to remove job directory %s: %s", job_dir, e)
