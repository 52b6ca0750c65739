from firebase_admin import auth, firestore
from flask import current_app, g, jsonify, request

from viralviews.core.forms import validate_payload
from viralviews.errors import DuplicateResourceError, ValidationError
from viralviews.extensions import api_limit, auth_limit
from viralviews.users.services import UserService

from . import bp
from .decorators import login_required
from .forms import SignInForm, SignUpForm
from .utils import clear_auth_cookie, set_auth_cookie, sign_in_with_password


@bp.route("/signin", methods=["POST"])
@auth_limit
def signin():
    """Exchange email and password for an ID token stored in the auth cookie."""
    form = validate_payload(SignInForm, request.get_json(silent=True))
    current_app.logger.info("Sign in attempt")

    result = sign_in_with_password(form.email.data, form.password.data)

    response = jsonify(
        {
            "success": True,
            "user": {
                "uid": result.get("localId"),
                "email": result.get("email"),
                "displayName": result.get("displayName"),
            },
        }
    )
    set_auth_cookie(response, result["idToken"])
    current_app.logger.info(f"Sign in successful for {result.get('localId')}")
    return response


@bp.route("/signup", methods=["POST"])
@auth_limit
def signup():
    """Create the account, its profile document, and sign the new user in."""
    form = validate_payload(SignUpForm, request.get_json(silent=True))
    current_app.logger.info("Sign up attempt")

    db = firestore.client()
    email = form.email.data
    password = form.password.data
    username = form.username.data
    display_name = form.displayName.data

    if UserService.username_taken(db, username):
        raise DuplicateResourceError("Username is already taken")

    try:
        user_record = auth.create_user(
            email=email, password=password, display_name=display_name
        )
    except auth.EmailAlreadyExistsError:
        raise DuplicateResourceError("Email address is already registered")
    except ValueError as e:
        # The Admin SDK rejects malformed emails and short passwords this way.
        message = (
            "Password is too weak" if "password" in str(e).lower() else "Invalid email address"
        )
        raise ValidationError(message) from e

    UserService.create_profile(
        db, {"uid": user_record.uid, "email": email}, username, display_name
    )

    result = sign_in_with_password(email, password)

    response = jsonify(
        {
            "success": True,
            "user": {
                "uid": user_record.uid,
                "email": email,
                "displayName": display_name,
                "username": username,
            },
        }
    )
    set_auth_cookie(response, result["idToken"])
    current_app.logger.info(f"Sign up successful for {user_record.uid} ({username})")
    return response


@bp.route("/signout", methods=["POST"])
@auth_limit
def signout():
    """Drop the auth cookie. Tokens themselves expire on their own."""
    return clear_auth_cookie(jsonify({"success": True}))


@bp.route("/me", methods=["GET"])
@api_limit
@login_required
def me():
    """Return the verified identity of the caller."""
    return jsonify({"success": True, "user": g.auth})
