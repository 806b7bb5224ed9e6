from flask import current_app
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()


def get_settings():
    """PlatformSettings built by the application factory."""
    return current_app.extensions["wikisites.settings"]


def get_gateway():
    """WikiGateway bound to the running application."""
    return current_app.extensions["wikisites.gateway"]
