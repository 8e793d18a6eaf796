#!/usr/bin/env python3
"""
PixelPack - Flask HTTP API

A local endpoint that compresses uploaded files and returns the output or
the archive directly.
"""

import io
import logging
import os
import sys
from pathlib import Path, PurePosixPath

from flask import Flask, jsonify, request, send_file
from flask_cors import CORS

# Add parent directory to path to import pixelpack
sys.path.insert(0, str(Path(__file__).parent.parent))

from pixelpack import (
    BatchFailure,
    CodecFailure,
    CompressionConfig,
    InputFile,
    InvalidConfiguration,
    PixelPackError,
    UnsupportedContent,
    compress_batch,
    plan_compression,
)
from pixelpack.config import ALGORITHM_DEFLATE

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 500 * 1024 * 1024  # 500MB max upload

ERROR_STATUS = {
    InvalidConfiguration: 400,
    UnsupportedContent: 415,
    CodecFailure: 422,
    BatchFailure: 422,
}


def create_app() -> Flask:
    """Build the Flask application."""
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_CONTENT_LENGTH
    CORS(app, expose_headers=["X-PixelPack-Codec", "X-PixelPack-Original-Size"])

    @app.errorhandler(PixelPackError)
    def handle_pixelpack_error(error: PixelPackError):
        status = ERROR_STATUS.get(type(error), 500)
        logger.debug("request failed (%d): %s", status, error)
        return jsonify({"error": str(error), "type": type(error).__name__}), status

    @app.route("/api/compress", methods=["POST"])
    def compress():
        """Compress uploaded files; one file comes back as-is, several as a zip."""
        files = read_uploads()
        config = read_config()

        result = compress_batch(files, config)

        response = send_file(
            io.BytesIO(result.data),
            mimetype=result.content_type,
            as_attachment=True,
            download_name=result.name,
        )
        if not result.is_archive:
            response.headers["X-PixelPack-Codec"] = result.results[0].codec
        response.headers["X-PixelPack-Original-Size"] = str(result.original_size)
        return response

    @app.route("/api/plan", methods=["POST"])
    def plan():
        """Return the codec and parameters each uploaded file would get."""
        files = read_uploads()
        config = read_config()
        plans = plan_compression(files, config)
        return jsonify({
            "config": config.to_dict(),
            "files": [p.to_dict() for p in plans],
        })

    return app


def upload_name(filename: str) -> str:
    """Drop any directory part a client sent; keep the file name itself."""
    name = PurePosixPath(filename.replace("\\", "/")).name
    return name if name not in ("", ".", "..") else "upload"


def read_uploads():
    """Collect uploaded files as InputFile triples, in upload order."""
    uploads = [f for f in request.files.getlist("files") if f.filename]
    if not uploads:
        raise InvalidConfiguration("No files provided")

    return [
        InputFile(
            name=upload_name(f.filename),
            content_type=f.mimetype or "",
            data=f.read(),
        )
        for f in uploads
    ]


def read_config() -> CompressionConfig:
    """Build the configuration from form fields."""
    algorithm = request.form.get("algorithm", ALGORITHM_DEFLATE)
    preset = request.form.get("preset")
    target = request.form.get("target_percent")

    if preset:
        return CompressionConfig.from_preset(preset, algorithm=algorithm)
    if target is None or target == "":
        return CompressionConfig(algorithm=algorithm)
    try:
        target_percent = int(target)
    except ValueError:
        raise InvalidConfiguration(f"target_percent must be an integer, got {target!r}") from None
    return CompressionConfig(algorithm=algorithm, target_percent=target_percent)


app = create_app()


if __name__ == "__main__":
    print("Starting PixelPack API...")
    print("POST files to http://localhost:5000/api/compress")
    app.run(debug=bool(os.environ.get("PIXELPACK_DEBUG")), host="127.0.0.1", port=5000)
