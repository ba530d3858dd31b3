"""
Tests for request and response schemas.
Covers field bounds, rounding, cross-field range checks and pagination math.
"""

import math
import pytest
from decimal import Decimal
from pydantic import ValidationError as PydanticValidationError

from property_service.schemas.property import (
    PropertyCreate,
    PropertySearchParams,
    PropertySort,
    PaginationMeta,
    FiltersApplied
)


def _valid_create(**overrides) -> dict:
    data = {
        "address": "123 Main St",
        "city": "Austin",
        "state": "TX",
        "zip_code": "78701",
        "landlord_id": 5
    }
    data.update(overrides)
    return data


class TestPropertyCreate:
    """Test listing creation validation."""

    def test_minimal_payload(self):
        data = PropertyCreate(**_valid_create())

        assert data.landlord_id == 5
        assert data.rent_amount is None
        assert data.bathrooms is None

    @pytest.mark.parametrize("zip_code", ["78701", "78701-1234"])
    def test_zip_code_formats_accepted(self, zip_code):
        assert PropertyCreate(**_valid_create(zip_code=zip_code)).zip_code == zip_code

    @pytest.mark.parametrize("zip_code", ["7870", "787011", "78701-12", "ABCDE", "78701 1234"])
    def test_zip_code_formats_rejected(self, zip_code):
        with pytest.raises(PydanticValidationError):
            PropertyCreate(**_valid_create(zip_code=zip_code))

    def test_missing_landlord_id_rejected(self):
        data = _valid_create()
        del data["landlord_id"]

        with pytest.raises(PydanticValidationError) as exc_info:
            PropertyCreate(**data)

        assert exc_info.value.errors()[0]["loc"] == ("landlord_id",)

    def test_short_address_rejected(self):
        with pytest.raises(PydanticValidationError):
            PropertyCreate(**_valid_create(address="1 A"))

    @pytest.mark.parametrize("rent", [0, -10, 50000.01])
    def test_rent_bounds(self, rent):
        with pytest.raises(PydanticValidationError):
            PropertyCreate(**_valid_create(rent_amount=rent))

    def test_rent_upper_bound_inclusive(self):
        assert PropertyCreate(**_valid_create(rent_amount=50000)).rent_amount == Decimal("50000.00")

    def test_rent_rounded_half_up_to_cents(self):
        assert PropertyCreate(**_valid_create(rent_amount="1234.565")).rent_amount == Decimal("1234.57")

    def test_bathrooms_rounded_half_up(self):
        assert PropertyCreate(**_valid_create(bathrooms="1.25")).bathrooms == Decimal("1.3")

    def test_bathrooms_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            PropertyCreate(**_valid_create(bathrooms=0))

    @pytest.mark.parametrize("bedrooms,valid", [(0, True), (20, True), (21, False), (-1, False)])
    def test_bedroom_bounds(self, bedrooms, valid):
        if valid:
            assert PropertyCreate(**_valid_create(bedrooms=bedrooms)).bedrooms == bedrooms
        else:
            with pytest.raises(PydanticValidationError):
                PropertyCreate(**_valid_create(bedrooms=bedrooms))

    def test_description_length_limit(self):
        with pytest.raises(PydanticValidationError):
            PropertyCreate(**_valid_create(description="x" * 2001))

    def test_landlord_verified_not_accepted(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            PropertyCreate(**_valid_create(landlord_verified=True))

        assert exc_info.value.errors()[0]["type"] == "extra_forbidden"


class TestPropertySearchParams:
    """Test search parameter validation."""

    def test_defaults(self):
        params = PropertySearchParams()

        assert params.limit == 20
        assert params.offset == 0
        assert params.sort_by == PropertySort.NEWEST

    def test_max_rent_below_min_rent_rejected(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            PropertySearchParams(min_rent=2000, max_rent=1000)

        assert exc_info.value.errors()[0]["loc"] == ("max_rent",)

    def test_equal_rent_bounds_rejected(self):
        with pytest.raises(PydanticValidationError):
            PropertySearchParams(min_rent=1000, max_rent=1000)

    def test_equal_bedroom_bounds_allowed(self):
        params = PropertySearchParams(min_bedrooms=2, max_bedrooms=2)
        assert params.min_bedrooms == params.max_bedrooms == 2

    def test_max_bedrooms_below_min_rejected(self):
        with pytest.raises(PydanticValidationError):
            PropertySearchParams(min_bedrooms=3, max_bedrooms=2)

    def test_equal_bathroom_and_sqft_bounds_allowed(self):
        params = PropertySearchParams(min_bathrooms=2, max_bathrooms=2, min_sqft=800, max_sqft=800)
        assert params.max_bathrooms == Decimal("2.0")
        assert params.max_sqft == 800

    def test_max_sqft_below_min_rejected(self):
        with pytest.raises(PydanticValidationError):
            PropertySearchParams(min_sqft=1000, max_sqft=999)

    def test_lone_max_is_accepted(self):
        assert PropertySearchParams(max_rent=1000).max_rent == Decimal("1000")

    @pytest.mark.parametrize("limit", [0, 101])
    def test_limit_bounds(self, limit):
        with pytest.raises(PydanticValidationError):
            PropertySearchParams(limit=limit)

    def test_negative_offset_rejected(self):
        with pytest.raises(PydanticValidationError):
            PropertySearchParams(offset=-1)

    def test_offset_capped_at_bigint(self):
        assert PropertySearchParams(offset=2 ** 63 - 1).offset == 2 ** 63 - 1

        with pytest.raises(PydanticValidationError):
            PropertySearchParams(offset=2 ** 63)

    @pytest.mark.parametrize("raw,expected", [("true", True), ("FALSE", False), ("True", True), (False, False)])
    def test_landlord_verified_accepts_true_false(self, raw, expected):
        assert PropertySearchParams(landlord_verified=raw).landlord_verified is expected

    @pytest.mark.parametrize("raw", ["1", "0", "yes", "on", "t", ""])
    def test_landlord_verified_rejects_other_strings(self, raw):
        with pytest.raises(PydanticValidationError) as exc_info:
            PropertySearchParams(landlord_verified=raw)

        assert exc_info.value.errors()[0]["loc"] == ("landlord_verified",)

    def test_unknown_sort_rejected(self):
        with pytest.raises(PydanticValidationError):
            PropertySearchParams(sort_by="cheapest")


class TestPaginationMeta:
    """Test pagination metadata formulas."""

    @pytest.mark.parametrize("total,limit,offset", [
        (0, 20, 0),
        (1, 20, 0),
        (20, 20, 0),
        (21, 20, 0),
        (21, 20, 20),
        (95, 10, 45),
        (100, 100, 0),
        (7, 3, 7),
    ])
    def test_page_math(self, total, limit, offset):
        meta = PaginationMeta.build(total, limit, offset)

        assert meta.total_pages == math.ceil(total / limit)
        assert meta.current_page == offset // limit + 1
        assert meta.has_next == (meta.current_page < meta.total_pages)
        assert meta.has_previous == (meta.current_page > 1)

    def test_empty_result(self):
        meta = PaginationMeta.build(0, 20, 0)

        assert meta.total_pages == 0
        assert meta.current_page == 1
        assert meta.has_next is False
        assert meta.has_previous is False


class TestFiltersApplied:
    """Test the filter echo."""

    def test_absent_ranges_are_null(self):
        filters = FiltersApplied.from_params(PropertySearchParams(city="Austin"))

        assert filters.city == "Austin"
        assert filters.rent_range is None
        assert filters.bedrooms_range is None
        assert filters.sort_by == PropertySort.NEWEST

    def test_half_open_range(self):
        filters = FiltersApplied.from_params(PropertySearchParams(min_rent=1200, min_bedrooms=2))

        assert filters.rent_range.min == 1200.0
        assert filters.rent_range.max is None
        assert filters.bedrooms_range.min == 2
