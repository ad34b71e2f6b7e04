from flask import Blueprint, jsonify, request
from flask_jwt_extended import current_user

from outtie.extensions import db
from outtie.services.item_service import ItemService
from outtie.utils.decorators import auth_required, verification_required
from outtie.utils.serializers import item_to_dict, saved_item_to_dict
from outtie.utils.validation import json_body

item_bp = Blueprint("items", __name__)


# browsing only needs a login; everything else needs a verified student
@item_bp.get("/")
@auth_required
def browse_items():
    items = ItemService(db.session).browse_feed(
        current_user.id,
        limit=request.args.get("limit"),
        offset=request.args.get("offset"),
    )
    return jsonify({"success": True, "items": [item_to_dict(i, with_lender=True) for i in items]})


@item_bp.post("/")
@verification_required
def create_item():
    item = ItemService(db.session).create_item(current_user.id, json_body())
    return jsonify({
        "success": True,
        "message": "Item created successfully",
        "item_id": item.id,
        "itemId": item.id,
    }), 201


@item_bp.put("/<id:item_id>")
@verification_required
def update_item(item_id: int):
    ItemService(db.session).update_item(item_id, current_user.id, json_body())
    return jsonify({"success": True, "message": "Item updated successfully"})


@item_bp.delete("/<id:item_id>")
@verification_required
def delete_item(item_id: int):
    ItemService(db.session).delete_item(item_id, current_user.id)
    return jsonify({"success": True, "message": "Item deleted successfully"})


@item_bp.post("/<id:item_id>/deactivate")
@verification_required
def deactivate_item(item_id: int):
    item = ItemService(db.session).deactivate_item(item_id, current_user.id)
    return jsonify({"success": True, "status": item.status})


@item_bp.post("/<id:item_id>/reactivate")
@verification_required
def reactivate_item(item_id: int):
    item = ItemService(db.session).reactivate_item(item_id, current_user.id)
    return jsonify({"success": True, "status": item.status})


@item_bp.get("/my-items")
@verification_required
def my_items():
    items = ItemService(db.session).list_my_items(current_user.id)
    return jsonify({"success": True, "items": [item_to_dict(i) for i in items]})


@item_bp.post("/<id:item_id>/save")
@verification_required
def save_item(item_id: int):
    ItemService(db.session).save_item(current_user.id, item_id)
    return jsonify({"success": True, "message": "Item saved successfully"})


@item_bp.delete("/<id:item_id>/unsave")
@verification_required
def unsave_item(item_id: int):
    ItemService(db.session).unsave_item(current_user.id, item_id)
    return jsonify({"success": True, "message": "Item unsaved successfully"})


@item_bp.get("/saved")
@verification_required
def saved_items():
    rows = ItemService(db.session).list_saved_items(current_user.id)
    return jsonify({"success": True, "items": [saved_item_to_dict(s) for s in rows]})
