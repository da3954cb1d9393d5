from __future__ import annotations

import enum
import uuid

from ..extensions import db
from sweetshop.time_utils import to_utc_z, utcnow


class Role(str, enum.Enum):
    """Actor roles. Only ADMIN may manage the catalogue."""
    USER = "user"
    ADMIN = "admin"


class User(db.Model):
    """
    Actor credential record.

    Username is globally unique and case-sensitive; it is trimmed before it
    reaches this table and never changes after creation.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("username", name="uq_users_username"),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    username = db.Column(db.String(50), nullable=False)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(
        db.Enum(Role, name="user_role", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.USER,
    )

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} role={self.role.value}>"

    def to_dict(self) -> dict:
        """Public projection; the password hash is never included."""
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role.value,
        }

    def to_admin_dict(self) -> dict:
        return {
            **self.to_dict(),
            "created_at": to_utc_z(self.created_at),
        }
