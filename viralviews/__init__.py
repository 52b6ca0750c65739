"""Initialize the Flask app and its extensions."""

import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask, g

from .extensions import cors, limiter


def _env_flag(name, default):
    return (os.environ.get(name) or default).lower() in ["true", "1", "t"]


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        APP_ENV=os.environ.get("APP_ENV") or "development",
        CORS_PRODUCTION_ORIGIN=os.environ.get("CORS_PRODUCTION_ORIGIN")
        or "https://viral-views.com",
        FIREBASE_API_KEY=os.environ.get("FIREBASE_API_KEY"),
        GEMINI_API_KEY=os.environ.get("GEMINI_API_KEY"),
        AI_MODEL=os.environ.get("AI_MODEL") or "gemini-1.5-flash",
        AUTH_COOKIE_NAME="auth-token",
        AUTH_COOKIE_MAX_AGE=60 * 60 * 24 * 7,
        BATTLE_LIST_LIMIT=int(os.environ.get("BATTLE_LIST_LIMIT") or 20),
        MEDIA_LIST_LIMIT=int(os.environ.get("MEDIA_LIST_LIMIT") or 20),
        RATELIMIT_ENABLED=_env_flag("RATELIMIT_ENABLED", "true"),
        RATELIMIT_STORAGE_URI=os.environ.get("RATELIMIT_STORAGE_URI") or "memory://",
        RATELIMIT_AUTH=os.environ.get("RATELIMIT_AUTH") or "5 per 15 minutes",
        RATELIMIT_API=os.environ.get("RATELIMIT_API") or "100 per 15 minutes",
        RATELIMIT_UPLOAD=os.environ.get("RATELIMIT_UPLOAD") or "10 per hour",
        WTF_CSRF_ENABLED=False,
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        _init_firebase(app)

    # Initialize extensions
    limiter.init_app(app)
    api_origin = (
        app.config["CORS_PRODUCTION_ORIGIN"]
        if app.config["APP_ENV"] == "production"
        else "*"
    )
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": api_origin}},
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=86400,
        send_wildcard=api_origin == "*",
    )

    # Register blueprints
    from . import auth as auth_bp

    app.register_blueprint(auth_bp.bp)

    from . import battles as battles_bp

    app.register_blueprint(battles_bp.bp)

    from . import media as media_bp

    app.register_blueprint(media_bp.bp)

    from . import users as users_bp

    app.register_blueprint(users_bp.bp)

    from . import moderation as moderation_bp

    app.register_blueprint(moderation_bp.bp)

    from . import ai as ai_bp

    app.register_blueprint(ai_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    @app.before_request
    def load_authenticated_user():
        """Verify the caller's ID token, if any, and store the identity in g."""
        from .auth.utils import authenticate_request

        g.auth = authenticate_request()

    @app.after_request
    def set_security_headers(response):
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        return response

    @app.route("/health")
    def health_check():
        """Perform a simple health check."""
        return {"status": "ok", "version": os.environ.get("APP_VERSION", "dev")}

    return app


def _init_firebase(app):
    """Initialize the Firebase Admin SDK from env, file, or default credentials."""
    cred = None
    project_id = None
    cred_info = {}

    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        import json

        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id")
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # If env var fails or is not present, try loading from file (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            import json

            try:
                with open(cred_path, "r") as f:
                    cred_info = json.load(f)
                project_id = cred_info.get("project_id")
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    # If both methods fail, fallback to default credentials
    if not cred:
        try:
            cred = credentials.ApplicationDefault()
            project_id = os.environ.get("FIREBASE_PROJECT_ID")
        except Exception as e:
            app.logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )

    if cred and not firebase_admin._apps:
        try:
            storage_bucket = os.environ.get("FIREBASE_STORAGE_BUCKET")
            if not storage_bucket and project_id:
                storage_bucket = f"{project_id}.firebasestorage.app"

            firebase_options = {"storageBucket": storage_bucket}
            if project_id:
                firebase_options["projectId"] = project_id

            firebase_admin.initialize_app(cred, firebase_options)
        except ValueError:
            # This can happen if the app is already initialized, which is fine.
            app.logger.info("Firebase app already initialized.")
