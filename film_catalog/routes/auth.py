from datetime import datetime

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_user, logout_user
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..errors import Conflict, InvalidArgument
from ..extensions import atomic, db
from ..models.user import ROLE_USER, Role, User

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
def register():
    data = request.get_json(silent=True) or request.form
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""
    if not username:
        raise InvalidArgument("Username is absent")
    if not password:
        raise InvalidArgument("Password is absent")

    user = User(username=username, name=data.get("name"), email=data.get("email") or None)
    user.set_password(password)
    role = db.session.execute(select(Role).filter_by(name=ROLE_USER)).scalar_one_or_none()
    if role is not None:
        user.roles = [role]
    try:
        with atomic() as session:
            session.add(user)
    except IntegrityError as exc:
        raise Conflict(f"Username '{username}' or email already exists.") from exc
    return jsonify({"ok": True, "id": user.id, "username": user.username}), 201


@auth_bp.post("/login")
def login():
    # Support form or JSON body
    data = request.get_json(silent=True) or request.form
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""
    remember = str(data.get("remember", "")).lower() in {"1", "true", "on", "yes"}

    user = db.session.execute(select(User).filter_by(username=username)).scalar_one_or_none()
    if not user or not user.check_password(password):
        return jsonify({"ok": False, "error": "Invalid credentials"}), 401

    user.last_login = datetime.utcnow()
    db.session.commit()
    login_user(user, remember=remember)
    return jsonify({"ok": True, "id": user.id, "username": user.username, "is_admin": user.is_admin})


@auth_bp.post("/logout")
def logout():
    if current_user.is_authenticated:
        logout_user()
    return ("", 204)


@auth_bp.get("/status")
def status():
    if current_user.is_authenticated:
        return jsonify({
            "authenticated": True,
            "id": current_user.id,
            "username": current_user.username,
            "is_admin": current_user.is_admin,
        })
    return jsonify({"authenticated": False})
