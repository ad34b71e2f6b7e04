from flask import Blueprint, jsonify
from flask_jwt_extended import current_user

from outtie.extensions import db
from outtie.services.rental_service import RentalService
from outtie.services.review_service import ReviewService
from outtie.utils.decorators import verification_required
from outtie.utils.serializers import rental_to_dict
from outtie.utils.validation import json_body

rental_bp = Blueprint("rentals", __name__)


@rental_bp.post("/mark-rented")
@verification_required
def mark_rented():
    rental = RentalService(db.session).mark_rented(current_user.id, json_body())
    return jsonify({
        "success": True,
        "message": "Item marked as rented successfully",
        "rental_id": rental.id,
        "rentalId": rental.id,
    })


@rental_bp.post("/mark-returned")
@verification_required
def mark_returned():
    rental = RentalService(db.session).mark_returned(current_user.id, json_body())
    return jsonify({
        "success": True,
        "message": "Item marked as returned successfully",
        "actual_return_date": rental.actual_return_date.isoformat(),
    })


@rental_bp.post("/<id:rental_id>/review")
@verification_required
def create_review(rental_id: int):
    review = ReviewService(db.session).create_review(rental_id, current_user.id, json_body())
    return jsonify({
        "success": True,
        "message": "Review created successfully",
        "review_id": review.id,
        "reviewId": review.id,
    }), 201


@rental_bp.get("/my-rentals")
@verification_required
def my_rentals():
    rentals = RentalService(db.session).list_my_rentals(current_user.id)
    return jsonify({"success": True, "rentals": [rental_to_dict(r, "lender") for r in rentals]})


@rental_bp.get("/my-lent-items")
@verification_required
def my_lent_items():
    rentals = RentalService(db.session).list_my_lent_items(current_user.id)
    return jsonify({"success": True, "rentals": [rental_to_dict(r, "renter") for r in rentals]})
