from __future__ import annotations

import uuid

from ..extensions import db
from ..services.image_codec import to_data_uri
from sweetshop.time_utils import to_utc_z, utcnow


class Sweet(db.Model):
    """
    Inventory item.

    NAME DESIGN DECISION:
    Names are unique across the whole catalogue (exact, case-sensitive match
    after trimming). The service layer pre-checks uniqueness for a friendly
    409, and uq_sweets_name catches the race between two concurrent writers.

    QUANTITY:
    Only ever changed through guarded SQL UPDATE statements in
    stock_service (purchase/restock) or a validated patch (admin edit).
    The CHECK constraints are the last line for the non-negativity rules.
    """
    __tablename__ = "sweets"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_sweets_name"),
        db.CheckConstraint("quantity >= 0", name="ck_sweets_quantity_non_negative"),
        db.CheckConstraint("price >= 0", name="ck_sweets_price_non_negative"),
        db.Index("ix_sweets_category", "category"),
        db.Index("ix_sweets_created_at", "created_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = db.Column(db.String(100), nullable=False)
    category = db.Column(db.String(50), nullable=False)
    price = db.Column(db.Float, nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=0)

    # Raw upload, exposed only as a data URI
    image_data = db.Column(db.LargeBinary, nullable=True)
    image_content_type = db.Column(db.String(32), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Sweet id={self.id} name={self.name!r} quantity={self.quantity}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "price": self.price,
            "quantity": self.quantity,
            "imageUrl": to_data_uri(self.image_data, self.image_content_type),
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
