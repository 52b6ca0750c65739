"""Flask extensions for the application."""
from flask import current_app
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

limiter = Limiter(get_remote_address)
cors = CORS()


def _configured_limit(key):
    return lambda: current_app.config[key]


# Endpoint classes share one budget per client across all their routes.
auth_limit = limiter.shared_limit(_configured_limit("RATELIMIT_AUTH"), scope="auth")
api_limit = limiter.shared_limit(_configured_limit("RATELIMIT_API"), scope="api")
upload_limit = limiter.shared_limit(
    _configured_limit("RATELIMIT_UPLOAD"), scope="upload"
)
