"""
Mapping of core error kinds to HTTP responses.

Every route, JSON or HTML, reports failures through error_response() so the
client always gets {"error", "message", "status"}.
"""

from flask import Flask, jsonify
from werkzeug.exceptions import BadRequest, HTTPException

from memos.errors import ErrorKind, InternalError, MemoError, ValidationError
from memos.logger import get_logger

logger = get_logger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORAGE: 500,
    ErrorKind.INTERNAL: 500,
}


def error_response(error: MemoError):
    """Build the JSON error body and status code for a core error."""
    status = STATUS_BY_KIND[error.kind]
    if status >= 500:
        logger.error("request.failed", error_type=error.kind.value, status_code=status, message=error.message)
    else:
        logger.warning("request.rejected", error_type=error.kind.value, status_code=status, message=error.message)

    return jsonify({"error": error.kind.value, "message": error.message, "status": status}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(MemoError)
    def handle_memo_error(error: MemoError):
        return error_response(error)

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        return error_response(ValidationError(error.description))

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        # Routing errors (404, 405, 413) keep their own responses
        if isinstance(error, HTTPException):
            return error
        logger.exception("request.unhandled_exception")
        return error_response(InternalError("An unexpected error occurred"))
