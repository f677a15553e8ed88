from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.logger import get_logger
from ..container import Container
from ..core.exceptions import DomainError

log = get_logger("users.controller")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form
        try:
            s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
        except DomainError as e:
            return jsonify({"message": str(e)}), e.http_status

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value

        log.info("login user=%s role=%s", s_user.user_id, s_user.role.value)
        return jsonify({"id": s_user.user_id, "name": s_user.full_name, "role": s_user.role.value})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"})
