"""
Search tests: substring matching, price bounds, composition.
"""

import pytest

from sweetshop.services.search_service import build_sweet_filters, search_sweets
from sweetshop.validation import ValidationError
from tests.conftest import make_sweet


@pytest.fixture
def priced(db_session):
    make_sweet(db_session, "Apple Drops", category="Hard Candy", price=5)
    make_sweet(db_session, "Berry Chews", category="Gummies", price=15)
    make_sweet(db_session, "Cocoa Truffle", category="Chocolate", price=25)


def names(resp):
    return sorted(s["name"] for s in resp.json)


class TestSearchRoute:
    def test_price_range(self, client, user_headers, priced):
        resp = client.get("/inventory/search?minPrice=10&maxPrice=20", headers=user_headers)
        assert resp.status_code == 200
        assert names(resp) == ["Berry Chews"]

    def test_range_is_inclusive(self, client, user_headers, priced):
        resp = client.get("/inventory/search?minPrice=5&maxPrice=15", headers=user_headers)
        assert names(resp) == ["Apple Drops", "Berry Chews"]

    def test_inverted_range(self, client, user_headers, priced):
        resp = client.get("/inventory/search?minPrice=20&maxPrice=10", headers=user_headers)
        assert resp.status_code == 400
        assert resp.json["message"] == "minPrice cannot be greater than maxPrice"

    def test_no_parameters_returns_all(self, client, user_headers, priced):
        resp = client.get("/inventory/search", headers=user_headers)
        assert names(resp) == ["Apple Drops", "Berry Chews", "Cocoa Truffle"]

    def test_empty_parameters_are_ignored(self, client, user_headers, priced):
        resp = client.get("/inventory/search?name=&category=&minPrice=&maxPrice=", headers=user_headers)
        assert len(resp.json) == 3

    def test_name_substring_case_insensitive(self, client, user_headers, priced):
        resp = client.get("/inventory/search?name=CHEW", headers=user_headers)
        assert names(resp) == ["Berry Chews"]

    def test_category_substring(self, client, user_headers, priced):
        resp = client.get("/inventory/search?category=candy", headers=user_headers)
        assert names(resp) == ["Apple Drops"]

    def test_conditions_are_anded(self, client, user_headers, priced):
        resp = client.get("/inventory/search?name=o&maxPrice=10", headers=user_headers)
        assert names(resp) == ["Apple Drops"]

    @pytest.mark.parametrize("query", ["minPrice=-1", "maxPrice=-5", "minPrice=cheap", "maxPrice=inf"])
    def test_invalid_bounds(self, client, user_headers, priced, query):
        resp = client.get(f"/inventory/search?{query}", headers=user_headers)
        assert resp.status_code == 400

    def test_wildcards_are_literal(self, client, user_headers, db_session):
        make_sweet(db_session, "100% Cocoa")
        make_sweet(db_session, "Cocoa Nibs")
        resp = client.get("/inventory/search?name=%25", headers=user_headers)
        assert names(resp) == ["100% Cocoa"]

        resp = client.get("/inventory/search?name=_", headers=user_headers)
        assert resp.json == []


class TestSearchService:
    def test_no_filters(self, db_session):
        assert build_sweet_filters({}) == []

    def test_one_clause_per_condition(self, db_session):
        clauses = build_sweet_filters({"name": "a", "category": "b", "minPrice": "1", "maxPrice": "2"})
        assert len(clauses) == 4

    def test_equal_bounds_allowed(self, db_session, priced):
        assert [s["name"] for s in search_sweets({"minPrice": "15", "maxPrice": "15"})] == ["Berry Chews"]

    def test_inverted_bounds(self, db_session):
        with pytest.raises(ValidationError):
            build_sweet_filters({"minPrice": "3", "maxPrice": "2"})


class TestUnicodeCaseFolding:
    def test_accented_name_matches_any_case(self, client, user_headers, db_session):
        make_sweet(db_session, "Éclair", category="Pâtisserie")
        make_sweet(db_session, "Eclipse Mints")

        resp = client.get("/inventory/search", query_string={"name": "éclair"}, headers=user_headers)
        assert resp.status_code == 200
        assert names(resp) == ["Éclair"]

    def test_accented_category_matches_any_case(self, db_session):
        make_sweet(db_session, "Éclair", category="Pâtisserie")
        assert [s["name"] for s in search_sweets({"category": "PÂTISS"})] == ["Éclair"]

    def test_casefold_expansion(self, db_session):
        make_sweet(db_session, "Straßen Toffee")
        assert [s["name"] for s in search_sweets({"name": "STRASSEN"})] == ["Straßen Toffee"]
