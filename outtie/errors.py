from flask import jsonify
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """Base for every failure surfaced to API callers.

    `kind` is the stable machine-readable name clients branch on; `details`
    are merged into the JSON body next to it.
    """

    kind = "InternalError"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, **details):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details

    def to_dict(self) -> dict:
        body = {"success": False, "error": self.kind, "message": self.message}
        body.update(self.details)
        return body


class ValidationError(ApiError):
    kind = "ValidationError"
    status_code = 400
    default_message = "Invalid request"

    def __init__(self, message: str | None = None, fields=None, **details):
        fields = list(fields or [])
        if message is None and fields:
            message = "Invalid or missing field(s): " + ", ".join(fields)
        super().__init__(message, fields=fields, **details)
        self.fields = fields


class Unauthenticated(ApiError):
    kind = "Unauthenticated"
    status_code = 401
    default_message = "Access token required"


class InvalidCredential(ApiError):
    kind = "InvalidCredential"
    status_code = 401
    default_message = "Invalid or expired token"


class Forbidden(ApiError):
    kind = "Forbidden"
    status_code = 403
    default_message = "Forbidden"

    def __init__(self, message: str | None = None, reason: str = "forbidden", **details):
        super().__init__(message, reason=reason, **details)
        self.reason = reason


class NotFound(ApiError):
    kind = "NotFound"
    status_code = 404
    default_message = "Not found"


class NotFoundOrUnavailable(ApiError):
    kind = "NotFoundOrUnavailable"
    status_code = 404
    default_message = "Item not found or not available"


class NotFoundOrNotActive(ApiError):
    kind = "NotFoundOrNotActive"
    status_code = 404
    default_message = "Active rental not found"


class Conflict(ApiError):
    kind = "Conflict"
    status_code = 409
    default_message = "Conflict"


class InternalError(ApiError):
    kind = "InternalError"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, **details):
        details.setdefault("retryable", True)
        super().__init__(message, **details)


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def _api_error(e: ApiError):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def _not_found(_e):
        return jsonify(NotFound("Route not found").to_dict()), 404

    @app.errorhandler(405)
    def _method_not_allowed(_e):
        return jsonify({"success": False, "error": "MethodNotAllowed", "message": "Method not allowed"}), 405

    @app.errorhandler(Exception)
    def _unexpected(e):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "error": e.name, "message": e.description}), e.code
        app.logger.exception(f"[error] Unhandled exception: {e}")
        return jsonify(InternalError().to_dict()), 500
