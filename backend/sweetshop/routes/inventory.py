# Overview: Flask API routes for inventory operations; parses input and returns JSON responses.

# backend/sweetshop/routes/inventory.py
"""
Inventory routes.

SECURITY: All routes require authentication.
- Browse, search, fetch and purchase are open to every actor
- Create, update, delete and restock require the admin role

Create and update accept multipart/form-data (fields + optional "image"
file) or a plain JSON body without an image.
"""
from flask import Blueprint, request, jsonify, current_app

from ..models import Sweet
from ..services import inventory_service, search_service, stock_service
from ..services.image_codec import read_upload
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_sweet,
    parse_restock_amount,
    ValidationError,
    ConflictError,
    NotFoundError,
)
from ..decorators import require_auth, require_admin

SWEET_POLICY = ModelValidationPolicy(
    writable_fields={"name", "category", "price", "quantity"},
    required_on_create={"name", "category", "price", "quantity"},
)

inventory_bp = Blueprint("inventory", __name__, url_prefix="/inventory")


def _fail(exc: Exception, status: int):
    current_app.logger.warning("%s %s failed (%s): %s", request.method, request.path, status, exc)
    return jsonify({"message": str(exc)}), status


def _payload() -> dict:
    if request.mimetype in ("multipart/form-data", "application/x-www-form-urlencoded"):
        form = request.form.to_dict()
        # An empty file input can arrive as a plain form field
        form.pop("image", None)
        return form
    return request.get_json(silent=True) or {}


def _upload():
    return read_upload(
        request.files.get("image"),
        max_bytes=current_app.config["MAX_IMAGE_BYTES"],
    )


@inventory_bp.get("")
@require_auth
def list_sweets_route():
    """List every sweet, newest first."""
    return jsonify(inventory_service.list_sweets()), 200


@inventory_bp.get("/search")
@require_auth
def search_sweets_route():
    """
    Filter sweets.

    Query params (all optional, combined with AND):
    - name: case-insensitive substring
    - category: case-insensitive substring
    - minPrice / maxPrice: inclusive non-negative bounds
    """
    try:
        results = search_service.search_sweets(request.args)
    except ValidationError as e:
        return _fail(e, 400)
    return jsonify(results), 200


@inventory_bp.get("/<sweet_id>")
@require_auth
def get_sweet_route(sweet_id: str):
    try:
        sweet = inventory_service.get_sweet(sweet_id)
    except ValidationError as e:
        return _fail(e, 400)
    except NotFoundError as e:
        return _fail(e, 404)
    return jsonify(sweet), 200


@inventory_bp.post("")
@require_auth
@require_admin
def create_sweet_route():
    """
    Create a new sweet.

    Requires admin role.
    """
    try:
        patch = validate_payload(model=Sweet, payload=_payload(), policy=SWEET_POLICY, partial=False)
        enforce_rules_sweet(patch)
        image = _upload()
    except ValidationError as e:
        return _fail(e, 400)

    try:
        created = inventory_service.create_sweet(patch=patch, image=image)
    except ConflictError as e:
        return _fail(e, 409)

    return jsonify(created), 201


@inventory_bp.put("/<sweet_id>")
@require_auth
@require_admin
def update_sweet_route(sweet_id: str):
    """
    Update a sweet. Only supplied fields change; a new image replaces the old.

    Requires admin role.
    """
    try:
        patch = validate_payload(model=Sweet, payload=_payload(), policy=SWEET_POLICY, partial=True)
        enforce_rules_sweet(patch)
        image = _upload()
        updated = inventory_service.update_sweet(sweet_id=sweet_id, patch=patch, image=image)
    except ValidationError as e:
        return _fail(e, 400)
    except NotFoundError as e:
        return _fail(e, 404)
    except ConflictError as e:
        return _fail(e, 409)

    return jsonify(updated), 200


@inventory_bp.delete("/<sweet_id>")
@require_auth
@require_admin
def delete_sweet_route(sweet_id: str):
    """
    Permanently delete a sweet.

    Requires admin role.
    """
    try:
        result = inventory_service.delete_sweet(sweet_id=sweet_id)
    except ValidationError as e:
        return _fail(e, 400)
    except NotFoundError as e:
        return _fail(e, 404)

    return jsonify(result), 200


@inventory_bp.post("/<sweet_id>/purchase")
@require_auth
def purchase_sweet_route(sweet_id: str):
    """Buy one unit. Out of stock is a 400."""
    try:
        sweet = stock_service.purchase_sweet(sweet_id)
    except ValidationError as e:  # includes OutOfStockError
        return _fail(e, 400)
    except NotFoundError as e:
        return _fail(e, 404)

    return jsonify(sweet), 200


@inventory_bp.post("/<sweet_id>/restock")
@require_auth
@require_admin
def restock_sweet_route(sweet_id: str):
    """
    Add stock.

    Request body: {"amount": positive integer}
    Requires admin role.
    """
    payload = _payload()
    if not isinstance(payload, dict):
        return _fail(ValidationError("Invalid JSON payload"), 400)

    try:
        amount = parse_restock_amount(payload.get("amount"))
        sweet = stock_service.restock_sweet(sweet_id, amount)
    except ValidationError as e:
        return _fail(e, 400)
    except NotFoundError as e:
        return _fail(e, 404)

    return jsonify(sweet), 200
