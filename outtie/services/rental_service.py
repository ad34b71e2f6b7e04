from datetime import datetime

from flask import current_app

from outtie.errors import NotFoundOrNotActive, NotFoundOrUnavailable, ValidationError
from outtie.models.rental import Rental
from outtie.repositories.item_repo import ItemRepo
from outtie.repositories.rental_repo import RentalRepo
from outtie.repositories.user_repo import UserRepo
from outtie.services.transaction import transaction
from outtie.utils.validation import as_datetime, as_id, pick


class RentalService:
    """
    Item/rental state machine.

        Item:   available --mark_rented--> rented --mark_returned--> available
        Rental: (none)    --mark_rented--> active --mark_returned--> completed

    Each transition is a single transaction. The precondition is the WHERE clause
    of a conditional UPDATE, so concurrent callers serialize on the row in the
    database and the loser sees zero affected rows.
    """

    def __init__(self, session):
        self.session = session
        self.items = ItemRepo(session)
        self.rentals = RentalRepo(session)
        self.users = UserRepo(session)

    def mark_rented(self, lender_id: int, data: dict) -> Rental:
        errors = []
        item_id = as_id(pick(data, "item_id", "itemId"), "item_id", errors)
        renter_id = as_id(pick(data, "renter_id", "renterId"), "renter_id", errors)
        start = as_datetime(data.get("rental_start_date"), "rental_start_date", errors)
        end = as_datetime(data.get("rental_end_date"), "rental_end_date", errors)
        if start and end and end < start:
            errors.append("rental_end_date")
        if errors:
            raise ValidationError(fields=errors)
        if renter_id == lender_id:
            raise ValidationError("Lender cannot rent an item to themselves", fields=["renter_id"])
        if not self.users.get_by_id(renter_id):
            raise ValidationError("Renter not found", fields=["renter_id"])

        with transaction(self.session, "rental"):
            if not self.items.transition_status(item_id, "available", "rented", lender_id=lender_id):
                current_app.logger.info(f"[rental] mark_rented refused item={item_id} lender={lender_id}")
                raise NotFoundOrUnavailable()

            rental = Rental(
                item_id=item_id,
                renter_id=renter_id,
                lender_id=lender_id,
                rental_start_date=start,
                rental_end_date=end,
                status="active",
            )
            self.rentals.create(rental)

        current_app.logger.info(
            f"[rental] item={item_id} rented: rental={rental.id} lender={lender_id} renter={renter_id}"
        )
        return rental

    def mark_returned(self, lender_id: int, data: dict) -> Rental:
        errors = []
        rental_id = as_id(pick(data, "rental_id", "rentalId"), "rental_id", errors)
        if errors:
            raise ValidationError(fields=errors)

        now = datetime.utcnow()
        with transaction(self.session, "rental"):
            if not self.rentals.complete_if_active(rental_id, lender_id, now):
                current_app.logger.info(f"[rental] mark_returned refused rental={rental_id} lender={lender_id}")
                raise NotFoundOrNotActive()

            rental = self.rentals.get(rental_id)
            # the bulk UPDATE bypassed the identity map
            self.session.refresh(rental)
            self.items.set_status(rental.item_id, "available")

        current_app.logger.info(f"[rental] rental={rental_id} completed, item={rental.item_id} available")
        return rental

    def list_my_rentals(self, user_id: int):
        return self.rentals.list_by_renter(user_id)

    def list_my_lent_items(self, user_id: int):
        return self.rentals.list_by_lender(user_id)
