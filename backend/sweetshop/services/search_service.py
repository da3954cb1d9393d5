# Overview: Filtered sweet search; builds SQL predicates from query-string parameters.

from __future__ import annotations

from sqlalchemy import func

from ..extensions import db
from ..models import Sweet
from ..validation import ValidationError, parse_number

LIKE_ESCAPE = "\\"


def _contains_pattern(term: str) -> str:
    """Literal, unanchored LIKE pattern (user wildcards are escaped)."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _contains(column, term: str):
    """
    Case-insensitive substring predicate.

    On SQLite the column and term are compared through the registered
    casefold() so non-ASCII letters match regardless of case.
    """
    if db.session.get_bind().dialect.name == "sqlite":
        return func.casefold(column).like(_contains_pattern(term.casefold()), escape=LIKE_ESCAPE)
    return column.ilike(_contains_pattern(term), escape=LIKE_ESCAPE)


def _optional(params, key: str) -> str | None:
    value = params.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _price_bound(raw: str | None, field: str) -> float | None:
    if raw is None:
        return None
    try:
        value = parse_number(raw, field=field)
    except ValidationError:
        raise ValidationError(f"{field} must be a non-negative number")
    if value < 0:
        raise ValidationError(f"{field} must be a non-negative number")
    return value


def build_sweet_filters(params) -> list:
    """
    Translate search parameters into SQLAlchemy filter clauses.

    Accepts any mapping with .get() (request.args, dict).
    - name / category: case-insensitive substring match
    - minPrice / maxPrice: inclusive bounds, each a non-negative number
    Empty or missing parameters are ignored. All clauses are ANDed by the
    caller; an empty list means "everything".

    Raises ValidationError on bad numbers or minPrice > maxPrice.
    """
    clauses = []

    name = _optional(params, "name")
    if name is not None:
        clauses.append(_contains(Sweet.name, name))

    category = _optional(params, "category")
    if category is not None:
        clauses.append(_contains(Sweet.category, category))

    min_price = _price_bound(_optional(params, "minPrice"), "minPrice")
    max_price = _price_bound(_optional(params, "maxPrice"), "maxPrice")

    if min_price is not None and max_price is not None and min_price > max_price:
        raise ValidationError("minPrice cannot be greater than maxPrice")

    if min_price is not None:
        clauses.append(Sweet.price >= min_price)
    if max_price is not None:
        clauses.append(Sweet.price <= max_price)

    return clauses


def search_sweets(params) -> list[dict]:
    clauses = build_sweet_filters(params)
    sweets = (
        db.session.query(Sweet)
        .filter(*clauses)
        .order_by(Sweet.created_at.desc(), Sweet.id.asc())
        .all()
    )
    return [s.to_dict() for s in sweets]
