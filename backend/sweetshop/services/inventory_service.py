# backend/sweetshop/services/inventory_service.py
"""
Inventory Service

Owns the sweets table: create, list, fetch, patch and delete. Stock
movements (purchase / restock) live in stock_service because they must be
single guarded UPDATE statements rather than read-modify-write here.

All functions return projections (Sweet.to_dict()), never ORM objects, so the
raw image bytes cannot leak into a response.
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Sweet
from ..validation import ConflictError, NotFoundError, parse_entity_id

SWEET_MUTABLE_FIELDS = {"name", "category", "price", "quantity"}

DUPLICATE_NAME = "Sweet with this name already exists"


def apply_sweet_patch(s: Sweet, patch: dict) -> None:
    for k, v in patch.items():
        if k not in SWEET_MUTABLE_FIELDS:
            continue
        setattr(s, k, v)


def _newest_first(query):
    return query.order_by(Sweet.created_at.desc(), Sweet.id.asc())


def _name_taken(name: str, *, exclude_id: str | None = None) -> bool:
    query = db.session.query(Sweet.id).filter(Sweet.name == name)
    if exclude_id is not None:
        query = query.filter(Sweet.id != exclude_id)
    return query.first() is not None


def _commit_or_conflict() -> None:
    try:
        db.session.commit()
    except IntegrityError:
        # uq_sweets_name caught a concurrent writer that passed the pre-check
        db.session.rollback()
        raise ConflictError(DUPLICATE_NAME)


def require_sweet(sweet_id: str) -> Sweet:
    """Resolve a path id: 400 if malformed (ValidationError), 404 if absent."""
    sweet_id = parse_entity_id(sweet_id)
    sweet = db.session.get(Sweet, sweet_id)
    if sweet is None:
        raise NotFoundError("Sweet not found")
    return sweet


def list_sweets() -> list[dict]:
    sweets = _newest_first(db.session.query(Sweet)).all()
    return [s.to_dict() for s in sweets]


def get_sweet(sweet_id: str) -> dict:
    return require_sweet(sweet_id).to_dict()


def create_sweet(*, patch: dict, image: tuple[bytes, str] | None = None) -> dict:
    """
    Create sweet using a validated patch dict.

    Args:
        patch: name, category, price, quantity (already validated)
        image: optional (data, content_type) from image_codec.read_upload

    Raises:
        ConflictError: If the name is already used
    """
    name = patch.get("name")
    if name is None:
        raise ValueError("name is required")

    if _name_taken(name):
        raise ConflictError(DUPLICATE_NAME)

    s = Sweet(quantity=0)
    apply_sweet_patch(s, patch)
    if image is not None:
        s.image_data, s.image_content_type = image

    db.session.add(s)
    _commit_or_conflict()

    current_app.logger.info("Created sweet id=%s name=%s", s.id, s.name)
    return s.to_dict()


def update_sweet(*, sweet_id: str, patch: dict, image: tuple[bytes, str] | None = None) -> dict:
    """
    Update a sweet. Only keys present in patch change.

    Raises:
        ValidationError: malformed id
        NotFoundError: no sweet with that id
        ConflictError: If the new name belongs to another sweet
    """
    s = require_sweet(sweet_id)

    # Name uniqueness enforcement if changing name
    if "name" in patch and patch["name"] != s.name:
        if _name_taken(patch["name"], exclude_id=s.id):
            raise ConflictError(DUPLICATE_NAME)

    apply_sweet_patch(s, patch)
    if image is not None:
        s.image_data, s.image_content_type = image

    _commit_or_conflict()

    changed = sorted(patch.keys()) + (["image"] if image is not None else [])
    current_app.logger.info("Updated sweet id=%s fields: %s", s.id, ", ".join(changed) or "none")
    return s.to_dict()


def delete_sweet(*, sweet_id: str) -> dict:
    """Hard-delete a sweet. There is no soft-delete."""
    s = require_sweet(sweet_id)

    db.session.delete(s)
    db.session.commit()

    current_app.logger.info("Deleted sweet id=%s name=%s", s.id, s.name)
    return {"message": "Sweet deleted successfully"}
