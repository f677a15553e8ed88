from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.enums import Role


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"message": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"message": "Please log in to continue"}), 401
        if not Role(session.get("role", Role.EMPLOYEE.value)).is_admin:
            return jsonify({"message": "Admin access required"}), 403
        return view(*args, **kwargs)

    return wrapper
