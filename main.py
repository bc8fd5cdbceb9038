from storefront.api.reservations.details import details_bp
from storefront.api.reservations.listing import listing_bp
from storefront.routes.reserve import reserve_bp
from flask import Flask, jsonify
from flask_cors import CORS
from dotenv import load_dotenv
from flasgger import Swagger
from werkzeug.exceptions import HTTPException
from swagger__config import SWAGGER_CONFIG, SWAGGER_TEMPLATE
import logging
import os

load_dotenv()
from storefront.config import Config, log_config_summary  # noqa: E402
from storefront.extensions import db  # noqa: E402
from storefront.models import Base  # noqa: E402
from storefront.scheduler import init_scheduler  # noqa: E402
from storefront.services.email_service import email_service  # noqa: E402

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"status": "error", "message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        logger.exception("Unhandled error: %s", e)
        return jsonify({"status": "error", "message": "Internal server error"}), 500


def create_app(config_object=Config, create_tables=True):
    logging.basicConfig(
        level=getattr(config_object, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app = Flask(__name__)
    try:
        app.config.from_object(config_object)
        log_config_summary(app.config)

        if not app.config.get("STAFF_NOTIFICATION_EMAIL"):
            raise RuntimeError(
                "STAFF_NOTIFICATION_EMAIL must be set; new reservation alerts "
                "have nowhere to go"
            )

        CORS(app)
        db.init_app(app)
        email_service.init_app(app)

        # Determine host based on environment
        host = os.environ.get("API_HOST", "127.0.0.1:5000")
        swagger_template = SWAGGER_TEMPLATE.copy()
        swagger_template["host"] = host
        Swagger(app, config=SWAGGER_CONFIG, template=swagger_template)
        logger.info("Swagger initialized - Access at /api/docs")

        blueprints = [
            listing_bp,
            details_bp,
            reserve_bp,
        ]

        for bp in blueprints:
            app.register_blueprint(bp)
            logger.info("  ✓ %s registered", bp.name)

        register_error_handlers(app)

        @app.route("/")
        def home():
            """
            Root endpoint - API status
            ---
            tags:
              - Utility
            responses:
              200:
                description: API is running
            """
            return {"status": "ok", "message": "Backend is running!"}, 200

        if create_tables:
            with app.app_context():
                Base.metadata.create_all(bind=db.engine)
            logger.info("Database tables ready")

        init_scheduler(app)

    except Exception:
        logger.exception("Error during app creation")
        raise

    logger.info("create_app() completed with %d routes", len(list(app.url_map.iter_rules())))
    return app


app = create_app()


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(
        host="0.0.0.0",
        port=port,
        debug=os.environ.get("FLASK_ENV") == "development",
    )
