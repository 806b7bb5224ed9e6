from flask import jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from wikisites.domain.invariants.exceptions import PlatformError
from wikisites.extensions import db


def register_error_handlers(app):
    @app.errorhandler(PlatformError)
    def handle_platform_error(error):
        response = jsonify(error.to_dict())
        response.status_code = error.status_code
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        response = jsonify({
            "error": error.name.replace(" ", ""),
            "message": error.description,
        })
        response.status_code = error.code
        return response

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        # Local store failures are the one unrecoverable class
        db.session.rollback()
        current_app.logger.exception("Local store failure: %s", error)
        response = jsonify({
            "error": "InternalError",
            "message": "Internal server error",
        })
        response.status_code = 500
        return response
