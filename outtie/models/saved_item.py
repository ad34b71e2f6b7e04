from datetime import datetime
from outtie.extensions import db


class SavedItem(db.Model):
    __tablename__ = "saved_items"
    __table_args__ = (db.UniqueConstraint("user_id", "item_id", name="uq_saved_items_user_item"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = db.Column(db.Integer, db.ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    item = db.relationship("Item", back_populates="saved_by")
