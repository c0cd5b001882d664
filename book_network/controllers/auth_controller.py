from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt
from book_network.services.auth_service import AuthService
from book_network.repositories.user_repo import UserRepo
from book_network.utils.identity import current_principal_id

auth_bp = Blueprint("auth", __name__)

@auth_bp.post("/register", endpoint="auth_register")
def register():
    data = request.get_json(silent=True) or {}

    username = (data.get("username") or "").strip()
    email = (data.get("email") or "").strip()
    password = (data.get("password") or "").strip()

    if not username or not email or not password:
        return jsonify({"success": False, "message": "username/email/password are required"}), 400

    try:
        user = AuthService.register(username=username, email=email, password=password)
        return jsonify({"success": True, "id": user.id, "username": user.username}), 201
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 400


@auth_bp.post("/login", endpoint="auth_login")
def login():
    data = request.get_json(silent=True) or {}
    try:
        token, user = AuthService.login(
            (data.get("username") or "").strip(),
            (data.get("password") or "").strip()
        )
        return jsonify({
            "success": True,
            "access_token": token,
            "user": {"id": user.id, "username": user.username}
        })
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 401


@auth_bp.get("/me", endpoint="auth_me")
@jwt_required()
def me():
    principal = current_principal_id()
    claims = get_jwt()
    user = UserRepo.get_by_id(int(str(principal)))
    if not user:
        return jsonify({"success": False, "message": "User not found"}), 404

    return jsonify({
        "success": True,
        "user": {
            "principal_id": str(principal),
            "username": claims.get("username", user.username),
            "email": user.email,
        }
    })
