from flask import current_app, jsonify, request
from flask_login import login_user, logout_user, current_user

from quizhub import db
from quizhub.auth import auth_bp
from quizhub.auth.models import User
from quizhub.auth.utils import is_valid_email, verify_password
from quizhub.common.errors import Unauthorized, error_response
from quizhub.security import SecurityLogger


def _credentials():
    """Return (email, password, remember) from the body, or None if it is malformed."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return None

    email = data.get("email") or ""
    password = data.get("password") or ""
    remember = data.get("remember", False)
    if not isinstance(email, str) or not isinstance(password, str) or not isinstance(remember, bool):
        return None
    return email.strip().lower(), password, remember


@auth_bp.route("/login", methods=["POST"])
def login():
    credentials = _credentials()
    if credentials is None:
        current_app.logger.warning("Rejected login: malformed request body")
        return error_response("Malformed login request", 400)
    email, password, remember = credentials

    if not email or not password:
        return error_response("Email and password are required", 400)

    if not is_valid_email(email):
        return error_response("Please provide a valid email address", 400)

    try:
        user = User.query.filter_by(email=email).first()
    except Exception:
        current_app.logger.exception(f"Error loading user for login: {email}")
        db.session.rollback()
        return error_response("Internal server error", 500)

    if not user or not verify_password(password, user.password_hash):
        SecurityLogger.log_failed_login(email)
        return error_response("Invalid email or password", 401)

    login_user(user, remember=remember)
    SecurityLogger.log_successful_login(user.id, user.email)

    return jsonify({
        "message": "Login successful",
        "user": user.to_summary(),
    }), 200


@auth_bp.route("/logout", methods=["POST"])
def logout_route():
    """End the current session, if any."""
    logout_user()
    return jsonify({"message": "Logged out"}), 200


@auth_bp.route("/me", methods=["GET"])
def me():
    """Return the logged-in user."""
    if not current_user.is_authenticated:
        return Unauthorized().to_response()
    return jsonify({"user": current_user.to_summary()}), 200
