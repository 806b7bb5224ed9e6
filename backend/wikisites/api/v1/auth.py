from flask import request, jsonify, current_app
from flask_jwt_extended import create_access_token
from wikisites.extensions import db
from wikisites.models.user import User
from wikisites.normalizers.user import normalize_user
from wikisites.utils.decorators import login_required, current_principal
from wikisites.utils.transaction import transactional
from . import v1_bp

MIN_PASSWORD_LENGTH = 8


@v1_bp.route("/auth/register", methods=["POST"])
def register():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({"error": "Invalid request body"}), 400

    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not email or not password:
        return jsonify({"error": "Email and password required"}), 400

    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({"error": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"}), 400

    if User.query.filter_by(email=email).first():
        return jsonify({"error": "Email already registered"}), 409

    with transactional():
        user = User()
        user.email = email
        user.name = data.get("name") or None
        user.set_password(password)
        db.session.add(user)

    current_app.logger.info("Registered user %s", user.id)
    return jsonify(normalize_user(user)), 201


@v1_bp.route("/auth/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({"error": "Invalid request body"}), 400

    email = (data.get("email") or "").strip().lower()
    password = data.get("password")

    if not email or not password:
        return jsonify({"error": "Email and password required"}), 400

    user = User.query.filter_by(email=email).first()

    if not user or not user.check_password(password):
        return jsonify({"error": "Invalid credentials"}), 401

    if not user.is_active:
        return jsonify({"error": "User account disabled"}), 403

    # Identity must be a string subject
    access_token = create_access_token(identity=user.id)

    return jsonify({
        "access_token": access_token,
        "user": normalize_user(user),
    }), 200


@v1_bp.route("/auth/me", methods=["GET"])
@login_required
def me():
    return jsonify(normalize_user(current_principal())), 200
