from __future__ import annotations

from flask import Blueprint, jsonify, request

from plotmap.app.container import get_auth_service
from plotmap.services.auth_service import AuthenticationError, AuthService

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/api/auth/login")
def login():
    """Log in as the admin."""
    data = request.get_json(silent=True) or {}
    password = data.get("password") or ""

    service = get_auth_service()
    try:
        service.login(password)
        return jsonify({"message": "Logged in successfully!"}), 200
    except AuthenticationError as exc:
        return jsonify({"message": str(exc)}), 401


@auth_bp.post("/api/auth/logout")
def logout():
    AuthService.logout()
    return jsonify({"message": "Logged out."}), 200


@auth_bp.get("/api/auth/status")
def status():
    return jsonify({"isAdmin": AuthService.is_admin()}), 200
