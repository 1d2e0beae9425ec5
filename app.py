"""
Business Card Fusion API - Flask Application Entry Point.

Turns recognized business card text and QR code payloads into one
normalized contact record.
"""

import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import Config, get_config
from api.routes import api_bp

logger = logging.getLogger(__name__)

API_INFO = {
    "name": "Business Card Fusion API",
    "version": "1.0.0",
    "description": "Extract and merge contact data from business card text and QR codes",
    "endpoints": {
        "health": "/api/health",
        "status": "/api/status",
        "parse": "POST /api/parse",
        "parse_text": "POST /api/parse-text",
        "parse_payload": "POST /api/parse-payload",
        "merge": "POST /api/merge",
        "form": "POST /api/form",
        "batch": "POST /api/batch"
    }
}


def error_response(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def create_app(config_name: str = None) -> Flask:
    """Application factory.

    Args:
        config_name: development, production or testing; defaults to CARD_API_ENV

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    config_class = get_config(config_name)
    config_class.init_app(app)

    # The API is called from browser front ends on other origins
    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"]
        }
    })

    app.register_blueprint(api_bp)

    @app.route("/")
    @app.route("/api/info")
    def api_info():
        return jsonify(API_INFO)

    @app.errorhandler(404)
    def not_found(error):
        return error_response("Not found", 404)

    @app.errorhandler(413)
    def request_entity_too_large(error):
        return error_response(
            f"Request too large. Maximum size: {Config.MAX_CONTENT_LENGTH // 1024}KB", 413
        )

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Answer JSON for HTTP errors; log anything else as a 500."""
        if isinstance(error, HTTPException):
            return error_response(error.description, error.code)
        logger.error(f"Uncaught exception: {str(error)}", exc_info=True)
        return error_response("An unexpected error occurred", 500)

    logger.info(f"Application created with config: {config_class.__name__}")

    return app


if __name__ == "__main__":
    port = int(os.getenv("PORT", 5000))
    debug = os.getenv("CARD_API_DEBUG", "True").lower() == "true"

    logger.info(f"Starting card fusion server on port {port}, debug={debug}")

    create_app().run(host="0.0.0.0", port=port, debug=debug)
