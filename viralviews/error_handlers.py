import time

from flask import Blueprint, current_app, jsonify

from .errors import (
    AppError,
    AuthenticationError,
    DuplicateResourceError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from .extensions import limiter

error_handlers_bp = Blueprint("error_handlers", __name__)

DEFAULT_RETRY_AFTER = 60


def _error_response(error):
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors with the field-level issue list."""
    current_app.logger.warning(f"Validation Error: {error.details}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(AuthenticationError)
def handle_authentication_error(error):
    """Handles requests that need an identity but carry none."""
    current_app.logger.info(f"Authentication Error: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(PermissionDeniedError)
def handle_permission_denied_error(error):
    """Handles access-rule rejections."""
    current_app.logger.warning(f"Permission Denied: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(DuplicateResourceError)
def handle_duplicate_resource_error(error):
    """Handles duplicate resource errors."""
    current_app.logger.warning(f"Duplicate Resource Error: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles not found errors."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(429)
def handle_rate_limit(e):
    """Handles rate limit breaches with a Retry-After computed from the reset time."""
    retry_after = DEFAULT_RETRY_AFTER
    current_limit = limiter.current_limit
    if current_limit is not None and current_limit.reset_at:
        retry_after = max(1, int(current_limit.reset_at - time.time()))

    current_app.logger.warning(f"Rate limit exceeded: {e}")
    response = jsonify({"error": "Rate limit exceeded", "retryAfter": retry_after})
    response.status_code = 429
    response.headers["Retry-After"] = str(retry_after)
    return response


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return jsonify({"error": "Not found"}), 404


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    """Handles requests with an unsupported method."""
    return jsonify({"error": "Method not allowed"}), 405


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return jsonify({"error": "Internal server error"}), 500
