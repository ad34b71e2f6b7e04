from datetime import datetime

from sqlalchemy.orm import joinedload

from outtie.models.item import Item
from outtie.models.rental import Rental


class RentalRepo:
    def __init__(self, session):
        self.session = session

    def get(self, rental_id: int):
        return self.session.get(Rental, rental_id)

    def create(self, rental: Rental):
        self.session.add(rental)
        self.session.flush()
        return rental

    def complete_if_active(self, rental_id: int, lender_id: int, now: datetime) -> int:
        return (
            self.session.query(Rental)
            .filter(Rental.id == rental_id, Rental.lender_id == lender_id, Rental.status == "active")
            .update(
                {"status": "completed", "actual_return_date": now, "updated_at": now},
                synchronize_session=False,
            )
        )

    def _joined(self):
        return self.session.query(Rental).options(
            joinedload(Rental.item).selectinload(Item.photos),
            joinedload(Rental.renter),
            joinedload(Rental.lender),
        )

    def list_by_renter(self, renter_id: int):
        return (
            self._joined()
            .filter(Rental.renter_id == renter_id)
            .order_by(Rental.created_at.desc(), Rental.id.desc())
            .all()
        )

    def list_by_lender(self, lender_id: int):
        return (
            self._joined()
            .filter(Rental.lender_id == lender_id)
            .order_by(Rental.created_at.desc(), Rental.id.desc())
            .all()
        )
