"""JSON error handlers; every error body is ``{"message": ...}``."""

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..services.exceptions import InternalError, OrderDeskError

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Map service errors and HTTP errors to JSON responses."""

    @app.errorhandler(OrderDeskError)
    def handle_service_error(error: OrderDeskError):
        return jsonify({"message": error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.exception(f"Unhandled error: {error}")
        return jsonify({"message": InternalError.default_message}), InternalError.status_code
