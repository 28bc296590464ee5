#!/usr/bin/env python3
"""
Image Resizer API Server
Upload an image, optionally trim borders and drop the background, get it
back resized as PNG or JPEG.
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, Response, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from models.process_options import ProcessOptions, normalize_quality
from pipeline.image_processor import process_image
from repositories.image_repository import ImageDecodeError, ImageEncodeError
from services.image_service import ImageService, ImageTooLargeError

logger = logging.getLogger(__name__)

# Configuration
MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_SIZE_MB", "10"))
DEFAULT_JPEG_QUALITY = int(os.getenv("DEFAULT_JPEG_QUALITY", "90"))
DEFAULT_OUTPUT_FORMAT = os.getenv("DEFAULT_OUTPUT_FORMAT", "png")
TRUTHY = {"1", "true", "on", "yes"}

HOME_PAGE = """<!DOCTYPE html>
<html>
<head>
    <title>Image Resizer</title>
</head>
<body>
    <h1>Image Resizer</h1>
    <form action="/resize" method="post" enctype="multipart/form-data">
        <p><label>Image: <input type="file" name="image" accept="image/*" required></label></p>
        <p><label>Width: <input type="number" name="width" min="0" placeholder="e.g. 200"></label></p>
        <p><label>Height: <input type="number" name="height" min="0" placeholder="e.g. 200"></label></p>
        <p>
            <label>Output format:
                <select name="format">
                    <option value="png">PNG</option>
                    <option value="jpeg">JPEG</option>
                </select>
            </label>
        </p>
        <p><label>Quality (1-100): <input type="number" name="quality" min="1" max="100" placeholder="90"></label></p>
        <p><label><input type="checkbox" name="trim" value="1"> Trim borders (transparent or solid color)</label></p>
        <p><label><input type="checkbox" name="remove_background" value="1"> Make background transparent</label></p>
        <p><button type="submit">Resize</button></p>
    </form>
    <p><small>Supports PNG, JPEG, and WebP input. Leave width or height empty to maintain aspect ratio.</small></p>
</body>
</html>"""


def _int_field(name: str) -> int:
    """Empty form fields mean 0; anything else must be an integer."""
    raw = (request.form.get(name) or "").strip()
    if not raw:
        return 0
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"'{name}' must be an integer, got '{raw}'") from None


def _flag_field(name: str) -> bool:
    return (request.form.get(name) or "").strip().lower() in TRUTHY


def parse_options() -> ProcessOptions:
    """Build pipeline options from the submitted multipart form."""
    quality = normalize_quality(_int_field("quality"), DEFAULT_JPEG_QUALITY)
    compression = None
    if (request.form.get("compression") or "").strip():
        compression = _int_field("compression")
        if not 0 <= compression <= 9:
            raise ValueError("'compression' must be between 0 and 9")
    return ProcessOptions(
        trim=_flag_field("trim"),
        remove_background=_flag_field("remove_background"),
        format=request.form.get("format") or DEFAULT_OUTPUT_FORMAT,
        quality=quality,
        width=_int_field("width"),
        height=_int_field("height"),
        compression_level=compression,
    )


def create_app(config: dict | None = None, image_service: ImageService | None = None) -> Flask:
    app = Flask(__name__)
    CORS(app)  # Enable CORS for browser clients

    app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_SIZE_MB * 1024 * 1024
    if config:
        app.config.update(config)

    image_service = image_service or ImageService()

    @app.route('/', methods=['GET'])
    def home():
        """Upload form."""
        return Response(HOME_PAGE, mimetype='text/html')

    @app.route('/resize', methods=['POST'])
    def resize():
        """Trim / remove background / resize one uploaded image."""
        if 'image' not in request.files:
            return jsonify({'error': 'Failed to get image'}), 400

        file = request.files['image']
        if file.filename == '':
            return jsonify({'error': 'No file selected'}), 400

        try:
            options = parse_options()
        except ValueError as e:
            return jsonify({'error': str(e)}), 400

        try:
            result = process_image(file.read(), options, image_service=image_service)
        except ImageDecodeError as e:
            logger.warning(f"Decode error for {file.filename}: {e}")
            return jsonify({'error': str(e)}), 400
        except ImageTooLargeError as e:
            logger.warning(f"Rejected {file.filename}: {e}")
            return jsonify({'error': str(e)}), 400
        except ImageEncodeError as e:
            logger.error(f"Encode error for {file.filename}: {e}")
            return jsonify({'error': str(e)}), 500

        response = Response(result.data, mimetype=result.mime_type)
        response.headers['Content-Disposition'] = f'attachment; filename=resized.{result.extension}'
        response.headers['X-Image-Width'] = str(result.width)
        response.headers['X-Image-Height'] = str(result.height)
        return response

    @app.route('/api/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'message': 'Image Resizer API is running',
            'max_upload_mb': app.config['MAX_CONTENT_LENGTH'] // (1024 * 1024),
            'max_image_pixels': image_service.MAX_IMAGE_PIXELS,
        })

    @app.errorhandler(413)
    def too_large(e):
        """Handle file too large error."""
        limit = app.config['MAX_CONTENT_LENGTH'] // (1024 * 1024)
        return jsonify({'error': f'File too large. Maximum size is {limit}MB.'}), 413

    @app.errorhandler(HTTPException)
    def http_error(e):
        """Every other HTTP error as JSON."""
        return jsonify({'error': e.description or e.name}), e.code

    @app.errorhandler(500)
    def internal_error(e):
        """Handle internal server error."""
        logger.error(f"Internal server error: {e}")
        return jsonify({'error': 'Internal server error'}), 500

    return app


app = create_app()


if __name__ == '__main__':
    port = int(os.getenv("API_SERVER_PORT", "8080"))
    host = os.getenv("API_SERVER_HOST", "0.0.0.0")
    logger.info(f"Starting Image Resizer API Server on http://{host}:{port}")
    logger.info(f"Max upload size: {MAX_UPLOAD_SIZE_MB}MB")

    app.run(debug=os.getenv("FLASK_DEBUG", "false").lower() in TRUTHY, host=host, port=port)
