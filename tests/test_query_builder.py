"""
Tests for the search statement builder.
Statements are compiled with the PostgreSQL dialect and inspected as SQL.
"""

from decimal import Decimal
from sqlalchemy.dialects import postgresql

from property_service.repositories.property import PropertySearchQuery
from property_service.schemas.property import PropertySearchParams


def _compile(statement):
    compiled = statement.compile(dialect=postgresql.dialect())
    return str(compiled), compiled.params


class TestPropertySearchQuery:
    """Test dynamic predicate assembly."""

    def test_no_filters_no_conditions(self):
        search = PropertySearchQuery(PropertySearchParams())

        assert search.conditions == []
        sql, _ = _compile(search.count_statement())
        assert "WHERE" not in sql

    def test_only_supplied_filters_are_applied(self):
        search = PropertySearchQuery(PropertySearchParams(min_bedrooms=2, max_rent=1800))

        assert len(search.conditions) == 2
        sql, params = _compile(search.page_statement())
        assert "properties.bedrooms >=" in sql
        assert "properties.rent_amount <=" in sql
        assert "properties.rent_amount >=" not in sql
        assert 2 in params.values()
        assert Decimal("1800") in params.values()

    def test_city_is_case_insensitive_substring(self):
        search = PropertySearchQuery(PropertySearchParams(city="AuS"))

        sql, params = _compile(search.count_statement())
        assert "lower(properties.city) LIKE" in sql
        assert "aus" in params.values()

    def test_city_wildcards_are_escaped(self):
        search = PropertySearchQuery(PropertySearchParams(city="a%b_c"))

        _, params = _compile(search.count_statement())
        assert "a/%b/_c" in params.values()

    def test_state_is_case_insensitive_exact(self):
        search = PropertySearchQuery(PropertySearchParams(state="Tx"))

        sql, params = _compile(search.count_statement())
        assert "lower(properties.state) =" in sql
        assert "tx" in params.values()

    def test_zip_code_is_exact(self):
        search = PropertySearchQuery(PropertySearchParams(zip_code="78701"))

        sql, params = _compile(search.count_statement())
        assert "properties.zip_code =" in sql
        assert "78701" in params.values()

    def test_landlord_verified_false_is_a_filter(self):
        search = PropertySearchQuery(PropertySearchParams(landlord_verified=False))

        sql, _ = _compile(search.count_statement())
        assert "properties.landlord_verified = false" in sql

    def test_count_statement_has_no_pagination_or_ordering(self):
        search = PropertySearchQuery(PropertySearchParams(min_rent=500, limit=5, offset=10))

        sql, params = _compile(search.count_statement())
        assert "count(properties.id)" in sql
        assert "JOIN users" in sql
        assert "LIMIT" not in sql
        assert "OFFSET" not in sql
        assert "ORDER BY" not in sql
        assert 5 not in params.values()
        assert 10 not in params.values()

    def test_page_statement_paginates_and_joins_landlord(self):
        search = PropertySearchQuery(PropertySearchParams(limit=5, offset=10))

        sql, params = _compile(search.page_statement())
        assert "JOIN users ON users.id = properties.landlord_id" in sql
        assert "users.first_name" in sql
        assert "LIMIT" in sql and "OFFSET" in sql
        assert 5 in params.values()
        assert 10 in params.values()

    def test_default_order_is_newest_first(self):
        sql, _ = _compile(PropertySearchQuery(PropertySearchParams()).page_statement())

        assert "ORDER BY properties.created_at DESC, properties.id DESC" in sql

    def test_rent_sorts_put_nulls_last(self):
        asc_sql, _ = _compile(PropertySearchQuery(PropertySearchParams(sort_by="rent_asc")).page_statement())
        desc_sql, _ = _compile(PropertySearchQuery(PropertySearchParams(sort_by="rent_desc")).page_statement())

        assert "properties.rent_amount ASC NULLS LAST" in asc_sql
        assert "properties.rent_amount DESC NULLS LAST" in desc_sql

    def test_sqft_sorts_put_nulls_last(self):
        sql, _ = _compile(PropertySearchQuery(PropertySearchParams(sort_by="sqft_desc")).page_statement())

        assert "properties.square_feet DESC NULLS LAST" in sql
