from typing import Optional

from flask import Flask, jsonify

from memos.api.errors import register_error_handlers
from memos.config import Config
from memos.db import Database
from memos.errors import StorageError
from memos.logger import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(config: Optional[Config] = None, db: Optional[Database] = None) -> Flask:
    """
    Application factory.

    Run with: flask --app memos.app run
    """
    config = config or Config.from_env()
    config.validate()
    configure_logging(config.log_level, config.log_format)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.max_request_size

    # Shared store handle; services and repositories are built per request from it
    app.db = db or Database(config.database_url)

    # Register blueprints
    from memos.api.memos import bp as memos_bp
    from memos.routes.web import bp as web_bp

    app.register_blueprint(memos_bp, url_prefix="/api/v1/memos")
    app.register_blueprint(web_bp)
    register_error_handlers(app)

    @app.route("/health")
    def health():
        return {"status": "ok", "message": "Server is running"}

    @app.route("/ready")
    def ready():
        try:
            app.db.ping()
        except StorageError as e:
            logger.warning("readiness.failed", error=e.message)
            return jsonify({"status": "unavailable"}), 503
        return {"status": "ready"}

    logger.info("app.created", environment=config.environment)
    return app
