from datetime import datetime
from outtie.extensions import db

# "disputed" is reserved: nothing transitions into or out of it yet
RENTAL_STATUSES = ("active", "completed", "disputed")


class Rental(db.Model):
    __tablename__ = "rentals"
    __table_args__ = (
        db.CheckConstraint("status IN ('active', 'completed', 'disputed')", name="ck_rentals_status"),
    )

    id = db.Column(db.Integer, primary_key=True)

    item_id = db.Column(db.Integer, db.ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)
    renter_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    lender_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    rental_start_date = db.Column(db.DateTime, nullable=True)
    rental_end_date = db.Column(db.DateTime, nullable=True)
    actual_return_date = db.Column(db.DateTime, nullable=True)

    status = db.Column(db.String(20), nullable=False, default="active", index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    item = db.relationship("Item", back_populates="rentals")
    renter = db.relationship("User", foreign_keys=[renter_id])
    lender = db.relationship("User", foreign_keys=[lender_id])
    reviews = db.relationship("Review", back_populates="rental", cascade="all, delete-orphan", passive_deletes=True)
