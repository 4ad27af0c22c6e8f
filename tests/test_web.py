"""Unit tests for the wavsplice HTTP service."""

import io
import json
import zipfile
from unittest.mock import patch

import numpy as np
import pytest
import soundfile as sf

from conftest import SAMPLE_RATE, noise
from wavsplice.errors import AudioIOError
from wavsplice.settings import Settings
from wavsplice.web import create_app


def _wav_bytes(samples: np.ndarray) -> bytes:
    buf = io.BytesIO()
    sf.write(buf, samples, SAMPLE_RATE, subtype="PCM_16", format="WAV")
    return buf.getvalue()


@pytest.fixture
def app(tmp_path):
    app = create_app(work_dir=tmp_path / "work", settings=Settings(temp_dir=tmp_path))
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def wav_upload() -> bytes:
    return _wav_bytes(noise(6.0))


def _post(client, url, content: bytes | None, **fields):
    data = dict(fields)
    if content is not None:
        data["file"] = (io.BytesIO(content), "clip.wav")
    return client.post(url, data=data, content_type="multipart/form-data")


def _names(resp) -> list[str]:
    with zipfile.ZipFile(io.BytesIO(resp.data)) as zf:
        return sorted(zf.namelist())


class TestIndex:
    def test_serves_html(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert b"wavsplice" in resp.data


class TestHealth:
    def test_health(self, client, app):
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["status"] == "healthy"
        assert data["version"] == app.config["VERSION"]
        assert data["version"]
        assert data["uptime_seconds"] >= 0


class TestSplice:
    def test_returns_zip(self, client, wav_upload):
        resp = _post(
            client, "/api/v1/audio/splice/multipart", wav_upload,
            spliceDuration="1.0", spliceCount="3", reverse="true",
        )
        assert resp.status_code == 200
        assert resp.mimetype == "application/zip"
        assert _names(resp) == ["splice_0.wav", "splice_1.wav", "splice_2.wav"]
        assert resp.headers["X-Processor-Type"] == "splice"
        assert resp.headers["X-Output-Count"] == "3"

    def test_summary_header(self, client, wav_upload):
        resp = _post(
            client, "/api/v1/audio/splice", wav_upload, spliceDuration="1.0", spliceCount="2"
        )
        summary = json.loads(resp.headers["X-Processing-Summary"])
        assert summary["file_count"] == 2
        assert summary["files"] == ["splice_0.wav", "splice_1.wav"]
        assert summary["metadata"]["processor_type"] == "splice"
        assert summary["metadata"]["sample_rate"] == SAMPLE_RATE
        assert summary["metadata"]["input_duration"] == pytest.approx(6.0)

    def test_json_config_field(self, client, wav_upload):
        resp = _post(
            client, "/api/v1/audio/splice", wav_upload,
            config=json.dumps({"type": "splice", "duration": 0.5, "count": 2}),
        )
        assert resp.status_code == 200
        assert _names(resp) == ["splice_0.wav", "splice_1.wav"]

    def test_legacy_endpoint(self, client, wav_upload):
        resp = _post(client, "/process", wav_upload, spliceDuration="2", spliceCount="1", reverse="false")
        assert resp.status_code == 200
        assert _names(resp) == ["splice_0.wav"]

    def test_invalid_duration(self, client, wav_upload, app):
        resp = _post(client, "/api/v1/audio/splice/multipart", wav_upload, spliceDuration="0", spliceCount="2")
        assert resp.status_code == 400
        body = resp.get_json()
        assert body["error_type"] == "InvalidDuration"
        assert "timestamp" in body
        # rejected before the upload is written anywhere
        assert not app.config["WORK_DIR"].exists()

    def test_unparsable_count(self, client, wav_upload):
        resp = _post(client, "/api/v1/audio/splice/multipart", wav_upload, spliceDuration="1", spliceCount="many")
        assert resp.status_code == 400
        assert resp.get_json()["error_type"] == "InvalidSpliceCount"

    def test_duration_longer_than_source(self, client, wav_upload):
        resp = _post(client, "/api/v1/audio/splice/multipart", wav_upload, spliceDuration="30", spliceCount="1")
        assert resp.status_code == 500
        assert resp.get_json()["error_type"] == "ProcessingError"

    def test_missing_file(self, client):
        resp = _post(client, "/api/v1/audio/splice/multipart", None, spliceDuration="1", spliceCount="1")
        assert resp.status_code == 404
        assert resp.get_json()["error_type"] == "FileNotFound"

    def test_not_a_wav(self, client):
        resp = _post(client, "/api/v1/audio/splice/multipart", b"definitely not audio",
                     spliceDuration="1", spliceCount="1")
        assert resp.status_code == 500
        assert resp.get_json()["error_type"] == "WavError"


class TestNormalize:
    def test_whole_file(self, client, wav_upload):
        resp = _post(client, "/api/v1/audio/normalize/multipart", wav_upload, targetLevel="0.8")
        assert resp.status_code == 200
        assert _names(resp) == ["normalized_audio.wav"]
        assert resp.headers["X-Processor-Type"] == "normalize"

    def test_apply_to_splices(self, client, wav_upload):
        resp = _post(
            client, "/api/v1/audio/normalize/multipart", wav_upload,
            targetLevel="0.8", applyToSplices="true",
        )
        assert resp.status_code == 200
        assert _names(resp) == [f"normalized_splice_{i}.wav" for i in range(5)]

    def test_target_out_of_range(self, client, wav_upload):
        resp = _post(client, "/api/v1/audio/normalize/multipart", wav_upload, targetLevel="1.5")
        assert resp.status_code == 400
        assert resp.get_json()["error_type"] == "ProcessingError"

    def test_silent_input(self, client):
        silent = _wav_bytes(np.zeros(SAMPLE_RATE, dtype=np.int16))
        resp = _post(client, "/api/v1/audio/normalize/multipart", silent, targetLevel="1.0")
        assert resp.status_code == 500
        assert "silent" in resp.get_json()["error"]


class TestRouting:
    def test_unknown_processor(self, client, wav_upload):
        resp = _post(client, "/api/v1/audio/reverb/multipart", wav_upload)
        assert resp.status_code == 404

    def test_payload_too_large(self, tmp_path):
        app = create_app(work_dir=tmp_path, settings=Settings(max_file_size=1024))
        resp = _post(app.test_client(), "/api/v1/audio/splice", b"x" * 4096,
                     spliceDuration="1", spliceCount="1")
        assert resp.status_code == 413


class TestCleanup:
    def test_work_dir_emptied_on_success(self, client, wav_upload, app):
        _post(client, "/api/v1/audio/splice", wav_upload, spliceDuration="1", spliceCount="2")
        assert list(app.config["WORK_DIR"].iterdir()) == []

    def test_work_dir_emptied_on_failure(self, client, app):
        silent = _wav_bytes(np.zeros(SAMPLE_RATE, dtype=np.int16))
        _post(client, "/api/v1/audio/normalize", silent, targetLevel="1.0")
        assert list(app.config["WORK_DIR"].iterdir()) == []

    @patch("wavsplice.web.routes.create_zip_from_result", side_effect=AudioIOError("disk full"))
    def test_packaging_failure(self, mock_zip, client, wav_upload, app):
        resp = _post(client, "/api/v1/audio/splice", wav_upload, spliceDuration="1", spliceCount="2")
        assert resp.status_code == 500
        assert resp.get_json()["error_type"] == "IoError"
        assert list(app.config["WORK_DIR"].iterdir()) == []

    def test_upload_save_failure(self, client, wav_upload, app):
        def partial_save(dst, *args, **kwargs):
            with open(dst, "wb") as f:
                f.write(b"RIFF")
            raise OSError("disk full")

        with patch("werkzeug.datastructures.FileStorage.save", side_effect=partial_save):
            resp = _post(client, "/api/v1/audio/splice", wav_upload, spliceDuration="1", spliceCount="2")
        assert resp.status_code == 500
        assert resp.get_json()["error_type"] == "IoError"
        assert list(app.config["WORK_DIR"].iterdir()) == []
