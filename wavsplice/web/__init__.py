"""Flask application factory for the wavsplice HTTP service."""

import time
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from flask import Flask, jsonify

from wavsplice.settings import Settings

try:
    VERSION = version("wavsplice")
except PackageNotFoundError:
    # running from a source checkout that was never installed
    VERSION = "0+unknown"


def create_app(work_dir: Path | None = None, settings: Settings | None = None) -> Flask:
    settings = settings or Settings.from_env()

    app = Flask(__name__)
    app.config["WORK_DIR"] = Path(work_dir or settings.temp_dir / "wavsplice")
    app.config["MAX_CONTENT_LENGTH"] = settings.max_file_size
    app.config["START_TIME"] = time.time()
    app.config["VERSION"] = VERSION

    from wavsplice.web.routes import bp
    app.register_blueprint(bp)

    @app.errorhandler(413)
    def request_entity_too_large(error):
        return jsonify({"error": "File too large", "error_type": "PayloadTooLarge"}), 413

    return app
