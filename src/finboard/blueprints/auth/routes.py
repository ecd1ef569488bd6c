"""Session login and registration routes."""

from __future__ import annotations

from flask import g, jsonify, session

from ...extensions import get_session_factory
from ...logging_config import get_logger
from ...services import auth as auth_service
from ..helpers import SESSION_USER_KEY, found, login_required, validated
from . import bp
from .forms import LoginForm, RegistrationForm

logger = get_logger(__name__)


def _user_payload(user) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "role": user.role,
        "last_login": user.last_login.isoformat() if user.last_login else None,
    }


@bp.post("/register")
def register():
    form = validated(RegistrationForm)
    user = auth_service.create_user(
        username=form.username,
        password=form.password,
        session_factory=get_session_factory(),
    )
    session.clear()
    session[SESSION_USER_KEY] = user.id
    return jsonify(_user_payload(user)), 201


@bp.post("/login")
def login():
    form = validated(LoginForm)
    user = auth_service.authenticate(
        username=form.username,
        password=form.password,
        session_factory=get_session_factory(),
    )
    if user is None:
        return jsonify({"error": "invalid_credentials"}), 401
    session.clear()
    session[SESSION_USER_KEY] = user.id
    logger.info("User logged in", extra={"user_id": user.id})
    return jsonify(_user_payload(user))


@bp.post("/logout")
@login_required
def logout():
    logger.info("User logged out", extra={"user_id": g.user_id})
    session.clear()
    return jsonify({"status": "logged_out"})


@bp.get("/me")
@login_required
def me():
    user = found(auth_service.get_user(g.user_id, session_factory=get_session_factory()))
    return jsonify(_user_payload(user))
