# Overview: Service-layer stock movements (purchase / restock) as atomic SQL updates.

"""
Stock Service

Purchase and restock never read the quantity into Python and write it back.
Each is a single UPDATE with the guard in its WHERE clause, so the database's
per-row write lock decides which of several concurrent purchases wins:

    UPDATE sweets SET quantity = quantity - 1 WHERE id = :id AND quantity > 0

Zero affected rows means either the id does not exist (404) or the shelf is
empty (400, OutOfStockError). A follow-up read tells the two apart.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy import update

from ..extensions import db
from ..models import Sweet
from ..validation import (
    MAX_QUANTITY,
    NotFoundError,
    OutOfStockError,
    ValidationError,
    parse_entity_id,
)
from sweetshop.time_utils import utcnow


def _apply_guarded_update(stmt) -> int:
    result = db.session.execute(stmt.execution_options(synchronize_session=False))
    db.session.commit()
    return result.rowcount


def _reload(sweet_id: str) -> Sweet | None:
    return db.session.get(Sweet, sweet_id, populate_existing=True)


def purchase_sweet(sweet_id: str) -> dict:
    """
    Sell exactly one unit.

    Raises:
        ValidationError: malformed id
        NotFoundError: unknown id
        OutOfStockError: quantity is 0
    """
    sweet_id = parse_entity_id(sweet_id)

    stmt = (
        update(Sweet)
        .where(Sweet.id == sweet_id, Sweet.quantity > 0)
        .values(quantity=Sweet.quantity - 1, updated_at=utcnow())
    )
    affected = _apply_guarded_update(stmt)

    sweet = _reload(sweet_id)
    if sweet is None:
        raise NotFoundError("Sweet not found")
    if affected == 0:
        current_app.logger.info("Purchase rejected, sweet id=%s out of stock", sweet_id)
        raise OutOfStockError("Sweet is out of stock")

    return sweet.to_dict()


def restock_sweet(sweet_id: str, amount: int) -> dict:
    """
    Add amount (validated positive integer) units.

    The WHERE clause keeps the result within MAX_QUANTITY.

    Raises:
        ValidationError: malformed id, or the total would exceed MAX_QUANTITY
        NotFoundError: unknown id
    """
    sweet_id = parse_entity_id(sweet_id)

    stmt = (
        update(Sweet)
        .where(Sweet.id == sweet_id, Sweet.quantity <= MAX_QUANTITY - amount)
        .values(quantity=Sweet.quantity + amount, updated_at=utcnow())
    )
    affected = _apply_guarded_update(stmt)

    sweet = _reload(sweet_id)
    if sweet is None:
        raise NotFoundError("Sweet not found")
    if affected == 0:
        current_app.logger.info("Restock rejected, sweet id=%s would exceed %d", sweet_id, MAX_QUANTITY)
        raise ValidationError(f"Quantity cannot exceed {MAX_QUANTITY}")

    current_app.logger.info("Restocked sweet id=%s by %d (now %d)", sweet_id, amount, sweet.quantity)
    return sweet.to_dict()
