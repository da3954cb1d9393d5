from __future__ import annotations

import math
import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta

# Largest value a signed 64-bit INTEGER column holds
MAX_QUANTITY = 2**63 - 1


class ValidationError(ValueError):
    """400-level input problem."""


class OutOfStockError(ValidationError):
    """400-level domain rule violation: purchase against an empty shelf."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate sweet name)."""


class NotFoundError(LookupError):
    """404-level: a well-formed id that matches nothing."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Integers - strict validation, bounded to what a 64-bit INTEGER column holds
    if isinstance(coltype, Integer):
        number = parse_integer(value, field=col.key)
        if abs(number) > MAX_QUANTITY:
            raise ValidationError(f"{col.key} cannot exceed {MAX_QUANTITY}")
        return number

    # Reals (prices)
    if isinstance(coltype, Float):
        return parse_number(value, field=col.key)

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        if not isinstance(value, str):
            raise ValidationError(f"{col.key} must be a string")
        return value.strip()

    # Default: leave as-is
    return value


def parse_integer(value: Any, *, field: str) -> int:
    """
    Parse a whole number from JSON or form input.

    JSON numbers are accepted when integral (5 and 5.0). Strings must be
    plain digits: no decimal point, no scientific notation.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be an integer, not a decimal")
        return int(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer")
        if 'e' in stripped.lower():
            raise ValidationError(f"{field} must be a plain integer (scientific notation not allowed)")
        if '.' in stripped:
            raise ValidationError(f"{field} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    raise ValidationError(f"{field} must be an integer")


def parse_number(value: Any, *, field: str) -> float:
    """Parse a JSON number or numeric string into a finite float."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise ValidationError(f"{field} must be a finite number")
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise ValidationError(f"{field} must be a number")
    else:
        raise ValidationError(f"{field} must be a number")

    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number")
    return number


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON or form data against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys; blank form
    values are treated as "not provided")
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if partial:
        payload = {k: v for k, v in payload.items() if v is not None and v != ""}

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if payload.get(f) is None or payload.get(f) == "")
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if k not in cols:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        col = cols[k]

        # NULL handling
        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def enforce_rules_sweet(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    if "price" in patch and patch["price"] is not None:
        if patch["price"] < 0:
            raise ValidationError("Price must be a non-negative number")

    if "quantity" in patch and patch["quantity"] is not None:
        if patch["quantity"] < 0:
            raise ValidationError("Quantity must be a non-negative integer")


def parse_restock_amount(value: Any) -> int:
    """Restock amount: required, positive, integral."""
    if value is None or (isinstance(value, str) and value.strip() == ""):
        raise ValidationError("Amount is required")
    if isinstance(value, bool):
        raise ValidationError("Amount must be a positive integer")

    try:
        amount = parse_integer(value, field="amount")
    except ValidationError:
        raise ValidationError("Amount must be a positive integer")

    if amount <= 0:
        raise ValidationError("Amount must be a positive integer")
    if amount > MAX_QUANTITY:
        raise ValidationError(f"Amount cannot exceed {MAX_QUANTITY}")
    return amount


def parse_entity_id(value: str, *, label: str = "sweet") -> str:
    """
    Normalize a path identifier.

    Malformed ids are a client error (400); a well-formed id that matches no
    row is reported separately by the caller as 404.
    """
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        raise ValidationError(f"Invalid {label} ID format")
