from flask import Blueprint, jsonify
from flask_jwt_extended import current_user

from outtie.extensions import db
from outtie.services.auth_service import AuthService
from outtie.utils.decorators import auth_required
from outtie.utils.serializers import private_user
from outtie.utils.validation import json_body

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
def register():
    token, user = AuthService(db.session).register(json_body())
    return jsonify({
        "success": True,
        "message": "User registered successfully",
        "token": token,
        "user": private_user(user),
    }), 201


@auth_bp.post("/login")
def login():
    token, user = AuthService(db.session).login(json_body())
    return jsonify({"success": True, "message": "Login successful", "token": token, "user": private_user(user)})


@auth_bp.get("/me")
@auth_required
def me():
    return jsonify({"success": True, "user": private_user(current_user)})


@auth_bp.post("/verify-student")
@auth_required
def verify_student():
    user = AuthService(db.session).request_verification(current_user, json_body())
    return jsonify({
        "success": True,
        "message": "Verification request submitted. You will be notified once reviewed.",
        "verification_status": user.verification_status,
    })


@auth_bp.post("/email-token")
@auth_required
def issue_email_token():
    row, sent = AuthService(db.session).issue_email_token(current_user)
    return jsonify({"success": True, "mail_sent": sent, "expires_at": row.expires_at.isoformat()}), 201


@auth_bp.post("/email-token/confirm")
@auth_required
def confirm_email_token():
    AuthService(db.session).confirm_email_token(current_user, json_body().get("token"))
    return jsonify({"success": True, "message": "Email confirmed"})
