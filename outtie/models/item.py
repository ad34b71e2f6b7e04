from datetime import datetime
from outtie.extensions import db

CATEGORIES = ("tops", "bottoms", "dresses", "outerwear", "accessories", "shoes", "other")
PAYMENT_METHODS = ("cash", "zelle", "either")
ITEM_STATUSES = ("available", "rented", "inactive")
CONTACT_CHANNELS = ("phone", "instagram", "whatsapp", "email")


class Item(db.Model):
    __tablename__ = "items"
    __table_args__ = (
        db.CheckConstraint(
            "category IN ('tops', 'bottoms', 'dresses', 'outerwear', 'accessories', 'shoes', 'other')",
            name="ck_items_category",
        ),
        db.CheckConstraint("payment_method IN ('cash', 'zelle', 'either')", name="ck_items_payment_method"),
        db.CheckConstraint("status IN ('available', 'rented', 'inactive')", name="ck_items_status"),
        db.CheckConstraint("rental_price_per_week > 0", name="ck_items_price_positive"),
    )

    id = db.Column(db.Integer, primary_key=True)
    lender_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(20), nullable=False)
    size = db.Column(db.String(50), nullable=False)
    rental_price_per_week = db.Column(db.Float, nullable=False)
    pickup_location = db.Column(db.String(255), nullable=False)
    must_return_washed = db.Column(db.Boolean, nullable=False, default=False)
    payment_method = db.Column(db.String(10), nullable=False)
    zelle_info = db.Column(db.String(255), nullable=True)

    # ordered list of CONTACT_CHANNELS
    contact_preferences = db.Column(db.JSON, nullable=False)

    status = db.Column(db.String(20), nullable=False, default="available", index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    lender = db.relationship("User", back_populates="items")
    photos = db.relationship(
        "ItemPhoto",
        back_populates="item",
        order_by="ItemPhoto.photo_order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    rentals = db.relationship("Rental", back_populates="item", cascade="all, delete-orphan", passive_deletes=True)
    saved_by = db.relationship("SavedItem", back_populates="item", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def primary_photo(self):
        return self.photos[0].photo_url if self.photos else None
