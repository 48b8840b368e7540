import hmac
import logging

from flask import Blueprint, current_app, jsonify, request, session
from flask_login import UserMixin, current_user, login_user, logout_user

from .extensions import login_manager

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


class AdminUser(UserMixin):
    """The single shared admin account, identified by its email."""

    def __init__(self, email):
        self.id = email
        self.email = email


def admin_email() -> str:
    return (current_app.config.get('ADMIN_EMAIL') or '').strip().lower()


def admin_password() -> str:
    return current_app.config.get('ADMIN_PASSWORD') or ''


def check_credentials(email, password):
    """Return ``(user, None)`` on success or ``(None, message)``."""
    expected_email = admin_email()
    expected_password = admin_password()
    if not expected_email or not expected_password:
        return None, 'Admin credentials not configured'

    given = (email or '').strip().lower()
    email_ok = hmac.compare_digest(given.encode(), expected_email.encode())
    password_ok = hmac.compare_digest((password or '').encode(), expected_password.encode())
    if not (email_ok and password_ok):
        return None, 'Invalid credentials'
    return AdminUser(expected_email), None


@login_manager.user_loader
def load_user(user_id: str):
    if user_id and user_id == admin_email():
        return AdminUser(user_id)
    return None


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify(message='Unauthorized'), 401


def require_admin():
    """``before_request`` hook for blueprints that need the admin session."""
    if not current_user.is_authenticated:
        return login_manager.unauthorized()


@auth_bp.post('/auth/login')
@auth_bp.post('/login')
def login():
    data = request.get_json(silent=True) or {}
    user, message = check_credentials(data.get('email'), data.get('password'))
    if user is None:
        logger.warning("Admin login failed: %s", message)
        return jsonify(message=message or 'Login failed'), 401

    session.permanent = True
    login_user(user)
    logger.info("Admin login: %s", user.email)
    return jsonify(email=user.email)


@auth_bp.post('/auth/logout')
@auth_bp.post('/logout')
def logout():
    logout_user()
    return jsonify(ok=True)


@auth_bp.get('/auth/user')
def get_user():
    if current_user.is_authenticated:
        return jsonify(email=current_user.email)
    return jsonify(message='Not authenticated'), 401
