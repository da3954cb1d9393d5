"""
Payload validation unit tests (policy-driven, column-metadata aware).
"""

import pytest

from sweetshop.models import Sweet
from sweetshop.validation import (
    MAX_QUANTITY,
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_sweet,
    parse_entity_id,
    parse_restock_amount,
    validate_payload,
)

POLICY = ModelValidationPolicy(
    writable_fields={"name", "category", "price", "quantity"},
    required_on_create={"name", "category", "price", "quantity"},
)


class TestValidatePayload:
    def test_create_normalizes(self):
        patch = validate_payload(
            model=Sweet,
            payload={"name": " Fudge ", "category": "Chocolate", "price": "2.50", "quantity": "7"},
            policy=POLICY,
            partial=False,
        )
        assert patch == {"name": "Fudge", "category": "Chocolate", "price": 2.5, "quantity": 7}

    def test_create_requires_all_fields(self):
        with pytest.raises(ValidationError, match="category, price"):
            validate_payload(model=Sweet, payload={"name": "Fudge", "quantity": 1}, policy=POLICY, partial=False)

    def test_partial_keeps_only_provided(self):
        patch = validate_payload(model=Sweet, payload={"price": 3, "name": ""}, policy=POLICY, partial=True)
        assert patch == {"price": 3.0}

    def test_rejects_non_writable(self):
        with pytest.raises(ValidationError, match="Field not allowed"):
            validate_payload(model=Sweet, payload={"image_data": "x"}, policy=POLICY, partial=True)

    def test_rejects_non_string_name(self):
        with pytest.raises(ValidationError):
            validate_payload(model=Sweet, payload={"name": 42}, policy=POLICY, partial=True)

    @pytest.mark.parametrize("value", [True, "1e3", 4.5, "4.0"])
    def test_quantity_strict_integer(self, value):
        with pytest.raises(ValidationError):
            validate_payload(model=Sweet, payload={"quantity": value}, policy=POLICY, partial=True)

    def test_quantity_integral_float_accepted(self):
        patch = validate_payload(model=Sweet, payload={"quantity": 4.0}, policy=POLICY, partial=True)
        assert patch == {"quantity": 4}
        assert isinstance(patch["quantity"], int)

    def test_quantity_upper_bound(self):
        patch = validate_payload(model=Sweet, payload={"quantity": MAX_QUANTITY}, policy=POLICY, partial=True)
        assert patch == {"quantity": MAX_QUANTITY}
        with pytest.raises(ValidationError, match="cannot exceed"):
            validate_payload(model=Sweet, payload={"quantity": MAX_QUANTITY + 1}, policy=POLICY, partial=True)

    def test_price_too_large_for_float(self):
        with pytest.raises(ValidationError, match="finite"):
            validate_payload(model=Sweet, payload={"price": 10**400}, policy=POLICY, partial=True)

    def test_payload_must_be_object(self):
        with pytest.raises(ValidationError):
            validate_payload(model=Sweet, payload=["name"], policy=POLICY, partial=True)


class TestBusinessRules:
    def test_negative_price(self):
        with pytest.raises(ValidationError):
            enforce_rules_sweet({"price": -0.01})

    def test_negative_quantity(self):
        with pytest.raises(ValidationError):
            enforce_rules_sweet({"quantity": -1})

    def test_zero_is_fine(self):
        enforce_rules_sweet({"price": 0.0, "quantity": 0})


class TestParsers:
    def test_entity_id_normalized(self):
        assert parse_entity_id("6F1C1F7E6C3A4A539A551C2B8F0C2D11") == "6f1c1f7e-6c3a-4a53-9a55-1c2b8f0c2d11"

    @pytest.mark.parametrize("value", ["", "123", "6f1c1f7e-zzzz-4a53-9a55-1c2b8f0c2d11"])
    def test_entity_id_malformed(self, value):
        with pytest.raises(ValidationError, match="Invalid sweet ID format"):
            parse_entity_id(value)

    @pytest.mark.parametrize("value,expected", [(1, 1), ("12", 12), (" 3 ", 3), (5.0, 5)])
    def test_restock_amount(self, value, expected):
        assert parse_restock_amount(value) == expected

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_restock_amount_required(self, value):
        with pytest.raises(ValidationError, match="Amount is required"):
            parse_restock_amount(value)

    @pytest.mark.parametrize("value", [MAX_QUANTITY + 1, 10**19, 1e19])
    def test_restock_amount_upper_bound(self, value):
        with pytest.raises(ValidationError, match="Amount cannot exceed"):
            parse_restock_amount(value)

    @pytest.mark.parametrize("value", ["2.5", "1e3", 2.5, 0])
    def test_restock_amount_same_integer_rule(self, value):
        with pytest.raises(ValidationError, match="Amount must be a positive integer"):
            parse_restock_amount(value)
