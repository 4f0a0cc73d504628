"""Application factory and app-wide configuration."""

import logging
from typing import Any, Mapping, Optional

from flask import Flask
from flask_cors import CORS

from sipswp.app.api.routes import api_bp

DEFAULT_SETTINGS = {
    "CORS_ORIGINS": ["http://localhost:5173", "http://127.0.0.1:5173"],
    "LOG_LEVEL": "INFO",
    "CSV_FILENAME": "SIP_SWP_Report.csv",
}


def create_app(test_config: Optional[Mapping[str, Any]] = None) -> Flask:
    """Build the Flask app instance.

    Settings come from DEFAULT_SETTINGS, then SIPSWP_* environment variables
    (values parsed as JSON, e.g. SIPSWP_LOG_LEVEL=DEBUG), then ``test_config``.
    """
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_SETTINGS)
    app.config.from_prefixed_env("SIPSWP")
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config["LOG_LEVEL"])
    logging.getLogger("sipswp").setLevel(app.config["LOG_LEVEL"])

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
