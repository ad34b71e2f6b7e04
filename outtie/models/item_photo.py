from datetime import datetime
from outtie.extensions import db


class ItemPhoto(db.Model):
    __tablename__ = "item_photos"

    id = db.Column(db.Integer, primary_key=True)
    item_id = db.Column(db.Integer, db.ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)
    photo_url = db.Column(db.String(500), nullable=False)
    photo_order = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    item = db.relationship("Item", back_populates="photos")
