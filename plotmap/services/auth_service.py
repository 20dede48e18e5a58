from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import current_app, jsonify, session
from werkzeug.security import check_password_hash

ADMIN_SESSION_KEY = "is_admin"


class AuthenticationError(Exception):
    """Raised when admin credentials are rejected."""


class AuthService:
    """Check the admin password against a stored hash and track the login."""

    def __init__(self, password_hash: str) -> None:
        self._password_hash = password_hash

    @classmethod
    def from_app_config(cls) -> "AuthService":
        password_hash = current_app.config.get("ADMIN_PASSWORD_HASH") or ""
        if not password_hash:
            current_app.logger.warning("ADMIN_PASSWORD_HASH is not set; admin login is disabled.")
        return cls(password_hash)

    def verify_password(self, password: str) -> bool:
        if not self._password_hash or not password:
            return False
        return check_password_hash(self._password_hash, password)

    def login(self, password: str) -> None:
        """Mark the current session as admin or raise AuthenticationError."""
        if not self.verify_password(password):
            current_app.logger.warning("Rejected admin login attempt")
            raise AuthenticationError("Invalid password.")
        session.clear()
        session[ADMIN_SESSION_KEY] = True
        session.permanent = True
        current_app.logger.info("Admin logged in")

    @staticmethod
    def logout() -> None:
        session.pop(ADMIN_SESSION_KEY, None)

    @staticmethod
    def is_admin() -> bool:
        return bool(session.get(ADMIN_SESSION_KEY))


def admin_required(view: Callable) -> Callable:
    """Reject the request with 401 unless the session belongs to the admin."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if not AuthService.is_admin():
            return jsonify({"message": "Admin login required."}), 401
        return view(*args, **kwargs)

    return wrapper
