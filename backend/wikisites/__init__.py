import logging
import os

import colorlog
from flask import Flask, send_file, current_app
from flask.logging import default_handler
from flask_swagger_ui import get_swaggerui_blueprint

from .config import config_by_name, PlatformSettings
from .extensions import db, migrate, jwt
from . import models  # noqa: F401  tables must be registered before migrate/create_all
from .api.v1 import v1_bp
from .middleware.subdomain import subdomain_middleware
from .views import site_views
from .errors import register_error_handlers
from .wiki.gateway import WikiGateway


def create_app(config_name: str = "development", gateway=None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    configure_logging(app)

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    settings = PlatformSettings.from_mapping(app.config)
    app.extensions["wikisites.settings"] = settings
    app.extensions["wikisites.gateway"] = gateway or WikiGateway(settings)

    # -------------------------------------------------
    # Middleware
    # -------------------------------------------------
    subdomain_middleware(app)

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)

    # -------------------------------------------------
    # Serve OpenAPI YAML (PUBLIC)
    # -------------------------------------------------
    @app.route("/openapi/sites.yaml", methods=["GET"], endpoint="openapi_sites")
    def serve_openapi():
        spec_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "sites_openapi.yaml",
        )

        if not os.path.exists(spec_path):
            raise FileNotFoundError("sites_openapi.yaml not found")

        return send_file(
            spec_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/sites.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "Wiki Sites API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    # Catch-all tenant routes go last
    app.register_blueprint(site_views)

    return app


def configure_logging(app):
    """Colored console output in debug mode for app.logger and the wikisites.* loggers."""
    app.logger.setLevel(logging.DEBUG if app.debug else logging.INFO)

    if not app.debug:
        return

    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(colorlog.ColoredFormatter(
        "%(log_color)s[%(asctime)s] %(levelname)-8s%(reset)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        reset=True,
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
    ))
    app.logger.removeHandler(default_handler)
    app.logger.addHandler(handler)
