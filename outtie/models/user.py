from datetime import datetime
from outtie.extensions import db

VERIFICATION_STATUSES = ("pending", "approved", "rejected")


class User(db.Model):
    __tablename__ = "users"
    __table_args__ = (
        db.CheckConstraint(
            "verification_status IN ('pending', 'approved', 'rejected')",
            name="ck_users_verification_status",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(200), nullable=False)

    graduation_year = db.Column(db.Integer, nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    instagram_handle = db.Column(db.String(100), nullable=True)
    whatsapp = db.Column(db.String(50), nullable=True)
    profile_photo = db.Column(db.String(500), nullable=True)

    verification_status = db.Column(db.String(20), nullable=False, default="pending")
    student_id_document = db.Column(db.String(500), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = db.relationship("Item", back_populates="lender", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def is_approved(self) -> bool:
        return self.verification_status == "approved"
