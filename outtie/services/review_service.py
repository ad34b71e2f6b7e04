from flask import current_app
from sqlalchemy.exc import IntegrityError

from outtie.errors import Conflict, Forbidden, NotFound, ValidationError
from outtie.models.review import Review
from outtie.repositories.rental_repo import RentalRepo
from outtie.repositories.review_repo import ReviewRepo
from outtie.services.transaction import transaction
from outtie.utils.validation import as_int


class ReviewService:
    def __init__(self, session):
        self.session = session
        self.rentals = RentalRepo(session)
        self.reviews = ReviewRepo(session)

    def create_review(self, rental_id: int, reviewer_id: int, data: dict) -> Review:
        """
        One review per participant of a completed rental; the reviewee is the other party.
        """
        errors = []
        rating = as_int(data.get("rating"), "rating", errors)
        if rating is not None and not 1 <= rating <= 5:
            errors.append("rating")
        text = data.get("review_text")
        if text is not None and not isinstance(text, str):
            errors.append("review_text")
        if errors:
            message = "Rating must be an integer between 1 and 5" if errors == ["rating"] else None
            raise ValidationError(message, fields=errors)

        with transaction(self.session, "review"):
            rental = self.rentals.get(rental_id)
            if not rental or rental.status != "completed":
                raise NotFound("Completed rental not found")

            if reviewer_id == rental.renter_id:
                reviewee_id = rental.lender_id
            elif reviewer_id == rental.lender_id:
                reviewee_id = rental.renter_id
            else:
                raise Forbidden("Not authorized to review this rental", reason="not_participant")

            if self.reviews.exists(rental_id, reviewer_id):
                raise Conflict("Review already exists for this rental")

            review = Review(
                rental_id=rental_id,
                reviewer_id=reviewer_id,
                reviewee_id=reviewee_id,
                rating=rating,
                review_text=(text.strip() or None) if text else None,
            )
            try:
                self.reviews.create(review)
            except IntegrityError as e:
                # lost a race against the same reviewer
                raise Conflict("Review already exists for this rental") from e

        current_app.logger.info(f"[review] rental={rental_id} reviewer={reviewer_id} rating={rating}")
        return review
