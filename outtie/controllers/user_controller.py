from flask import Blueprint, jsonify
from flask_jwt_extended import current_user

from outtie.extensions import db
from outtie.services.user_service import UserService
from outtie.utils.decorators import auth_required
from outtie.utils.serializers import private_user, public_user
from outtie.utils.validation import json_body

user_bp = Blueprint("users", __name__)


@user_bp.get("/<id:user_id>")
@auth_required
def get_user_profile(user_id: int):
    user = UserService(db.session).get_user(user_id)
    return jsonify({"success": True, "user": public_user(user)})


@user_bp.put("/profile")
@auth_required
def update_user_profile():
    user = UserService(db.session).update_profile(current_user, json_body())
    return jsonify({"success": True, "message": "Profile updated successfully", "user": private_user(user)})
