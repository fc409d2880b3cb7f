#!/usr/bin/env python3
"""
Photo Editor API Server
One editing session per document; every editor action has its own endpoint.
The server only moves bytes and JSON around; all pixel work happens in
photo_editor.
"""

import os
import logging
from io import BytesIO
from typing import Dict, Optional
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
from PIL import Image as PILImage

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from photo_editor.errors import (
    InvalidDimensionError,
    OutOfBoundsError,
    InvalidKernelError,
    DecodeError,
    UnsupportedFormatError,
    EncodeError,
    UnknownOperationError,
    NoImageError,
)
from photo_editor.models.pixel_buffer import to_color
from photo_editor.pipeline.editing_session import EditingSession
from photo_editor.repositories.pixel_buffer_repository import PixelBufferRepository
from photo_editor.services.pixel_buffer_service import PixelBufferService

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "100")) * 1024 * 1024
app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

# Initialize services
buffer_service = PixelBufferService()

logger = logging.getLogger(__name__)

# Session storage: one EditingSession per open document
sessions: Dict[str, EditingSession] = {}


class BadRequest(Exception):
    """Malformed request body."""


def get_or_create_session(session_id: Optional[str] = None) -> EditingSession:
    """
    Get existing session or create a new one.
    New sessions are only registered once their first operation succeeds.
    """
    if session_id and session_id in sessions:
        return sessions[session_id]
    return EditingSession(session_id)


def json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise BadRequest("Expected a JSON object body")
    return body


def require_session(body: dict) -> Optional[EditingSession]:
    return sessions.get(body.get('session_id') or "")


def session_payload(session: EditingSession, **extra) -> dict:
    payload = {'success': True}
    payload.update(session.summary())
    payload.update(extra)
    return payload


def error_response(err: Exception):
    """Translate engine errors into HTTP status codes."""
    if isinstance(err, UnsupportedFormatError):
        return jsonify({'success': False, 'error': 'unsupported_format',
                        'message': 'Unsupported file type'}), 415
    if isinstance(err, DecodeError):
        return jsonify({'success': False, 'error': 'decode_error', 'message': str(err)}), 400
    if isinstance(err, NoImageError):
        return jsonify({'success': False, 'error': 'no_image', 'message': str(err)}), 409
    if isinstance(err, (OutOfBoundsError, InvalidDimensionError, InvalidKernelError,
                        UnknownOperationError, EncodeError, BadRequest)):
        return jsonify({'success': False, 'error': type(err).__name__, 'message': str(err)}), 400
    if isinstance(err, (KeyError, TypeError, ValueError)):
        return jsonify({'success': False, 'error': 'bad_request', 'message': f'Invalid request: {err}'}), 400
    logger.exception(f"Unexpected error: {err}")
    return jsonify({'success': False, 'error': 'internal', 'message': 'Internal server error'}), 500


def session_not_found():
    return jsonify({'success': False, 'error': 'session_not_found', 'message': 'Invalid session'}), 404


# ─── Document lifecycle ──────────────────────────────────────────────
@app.route('/api/new', methods=['POST'])
def new_image():
    """Start a session with a blank image."""
    try:
        body = request.get_json(silent=True) or {}
        width = body.get('width')
        height = body.get('height')
        fill = to_color(body['fill']) if body.get('fill') is not None else None
        session = get_or_create_session(body.get('session_id'))
        session.new_image(
            int(width) if width is not None else None,
            int(height) if height is not None else None,
            fill,
        )
        sessions[session.session_id] = session
        return jsonify(session_payload(session, message='New image created'))
    except Exception as e:
        return error_response(e)


@app.route('/api/open', methods=['POST'])
def open_image():
    """Decode an uploaded file into a (new or existing) session."""
    try:
        if 'image' not in request.files:
            return jsonify({'success': False, 'error': 'bad_request', 'message': 'No image provided'}), 400
        data = request.files['image'].read()
        session = get_or_create_session(request.form.get('session_id'))
        session.open_bytes(data)
        sessions[session.session_id] = session
        return jsonify(session_payload(session, message='Image loaded'))
    except Exception as e:
        return error_response(e)


@app.route('/api/image/<session_id>', methods=['GET'])
def download_image(session_id):
    """Serve the current image encoded in the requested format (PNG by default)."""
    session = sessions.get(session_id)
    if session is None:
        return session_not_found()
    try:
        fmt = request.args.get('format', os.getenv("DEFAULT_SAVE_FORMAT", "PNG"))
        data = session.save_bytes(fmt)
        pil_format = PixelBufferRepository.normalise_format(fmt)
        mimetype = PILImage.MIME.get(pil_format, 'application/octet-stream')
        return send_file(BytesIO(data), mimetype=mimetype,
                         download_name=f"image.{pil_format.lower()}")
    except Exception as e:
        return error_response(e)


@app.route('/api/session/<session_id>', methods=['DELETE'])
def delete_session(session_id):
    """Close a session and free memory."""
    session = sessions.pop(session_id, None)
    if session is None:
        return session_not_found()
    session.close()
    return jsonify({'success': True, 'message': 'Session cleared'})


# ─── Edits ───────────────────────────────────────────────────────────
@app.route('/api/color-transform', methods=['POST'])
def color_transform():
    try:
        body = json_body()
        session = require_session(body)
        if session is None:
            return session_not_found()
        session.apply_color_transform(body['transform'])
        return jsonify(session_payload(session))
    except Exception as e:
        return error_response(e)


@app.route('/api/convolve', methods=['POST'])
def convolve():
    try:
        body = json_body()
        session = require_session(body)
        if session is None:
            return session_not_found()
        session.apply_convolution(body['kernel'])
        return jsonify(session_payload(session))
    except Exception as e:
        return error_response(e)


@app.route('/api/fill', methods=['POST'])
def fill():
    try:
        body = json_body()
        session = require_session(body)
        if session is None:
            return session_not_found()
        session.fill_region(int(body['row']), int(body['col']), to_color(body['color']))
        return jsonify(session_payload(session))
    except Exception as e:
        return error_response(e)


@app.route('/api/stroke', methods=['POST'])
def stroke():
    try:
        body = json_body()
        session = require_session(body)
        if session is None:
            return session_not_found()
        points = [(float(x), float(y)) for x, y in body['points']]
        diameter = body.get('diameter')
        session.draw_stroke(points,
                            int(diameter) if diameter is not None else None,
                            to_color(body.get('color', (0, 0, 0))))
        return jsonify(session_payload(session))
    except Exception as e:
        return error_response(e)


# ─── History ─────────────────────────────────────────────────────────
@app.route('/api/undo', methods=['POST'])
def undo():
    try:
        body = json_body()
        session = require_session(body)
        if session is None:
            return session_not_found()
        changed = session.undo() is not None
        return jsonify(session_payload(session, changed=changed))
    except Exception as e:
        return error_response(e)


@app.route('/api/redo', methods=['POST'])
def redo():
    try:
        body = json_body()
        session = require_session(body)
        if session is None:
            return session_not_found()
        changed = session.redo() is not None
        return jsonify(session_payload(session, changed=changed))
    except Exception as e:
        return error_response(e)


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'message': 'Photo Editor API is running',
        'active_sessions': len(sessions),
        'supported_formats': buffer_service.supported_formats(),
    })


@app.errorhandler(413)
def too_large(e):
    """Handle file too large error."""
    return jsonify({'success': False,
                    'error': f'File too large. Maximum size is {MAX_CONTENT_LENGTH // (1024 * 1024)}MB.'}), 413


def main():
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "5000"))
    logger.info(f"Starting Photo Editor API on {host}:{port}")
    logger.info(f"Max upload size: {MAX_CONTENT_LENGTH // (1024 * 1024)}MB")
    app.run(host=host, port=port, debug=False, threaded=True)


if __name__ == '__main__':
    main()
