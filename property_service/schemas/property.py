"""
Pydantic schemas for property requests and responses.
Handles listing creation, search parameters, pagination and statistics.
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
import enum


ZIP_CODE_PATTERN = r"^\d{5}(-\d{4})?$"

MAX_RENT = Decimal("50000")
MAX_ROOMS = 20
MAX_SQUARE_FEET = 50000

# Largest OFFSET the store accepts (signed 64-bit)
MAX_OFFSET = 2 ** 63 - 1

BOOLEAN_STRINGS = {"true": True, "false": False}


def _round_half_up(value: Optional[Decimal], places: str) -> Optional[Decimal]:
    if value is None:
        return None
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)


class PropertySort(str, enum.Enum):
    """Supported orderings for listing search."""
    RENT_ASC = "rent_asc"
    RENT_DESC = "rent_desc"
    NEWEST = "newest"
    OLDEST = "oldest"
    SQFT_ASC = "sqft_asc"
    SQFT_DESC = "sqft_desc"


class PropertyCreate(BaseModel):
    """Schema for creating a new property listing."""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "address": "123 Main St",
                "city": "Austin",
                "state": "TX",
                "zip_code": "78701",
                "rent_amount": 1850.00,
                "bedrooms": 2,
                "bathrooms": 1.5,
                "square_feet": 950,
                "description": "Bright two bedroom close to downtown.",
                "landlord_id": 5
            }
        }
    )

    address: str = Field(..., min_length=5, max_length=500, description="Street address")

    city: str = Field(..., min_length=2, max_length=100, description="City name")

    state: str = Field(..., min_length=2, max_length=50, description="State name or code")

    zip_code: str = Field(
        ...,
        pattern=ZIP_CODE_PATTERN,
        description="US zip code, 5 digits or ZIP+4"
    )

    rent_amount: Optional[Decimal] = Field(
        None,
        gt=0,
        le=MAX_RENT,
        description="Monthly rent, rounded to cents"
    )

    bedrooms: Optional[int] = Field(None, ge=0, le=MAX_ROOMS, description="Number of bedrooms")

    bathrooms: Optional[Decimal] = Field(
        None,
        gt=0,
        le=MAX_ROOMS,
        description="Number of bathrooms, rounded to one decimal"
    )

    square_feet: Optional[int] = Field(
        None,
        gt=0,
        le=MAX_SQUARE_FEET,
        description="Interior area in square feet"
    )

    description: Optional[str] = Field(None, max_length=2000, description="Free-text description")

    landlord_id: int = Field(..., description="ID of the landlord user who owns the listing")

    @field_validator("rent_amount")
    @classmethod
    def round_rent_amount(cls, v):
        """Round rent to two decimal places."""
        return _round_half_up(v, "0.01")

    @field_validator("bathrooms")
    @classmethod
    def round_bathrooms(cls, v):
        """Round bathrooms to one decimal place."""
        return _round_half_up(v, "0.1")


class LandlordInfo(BaseModel):
    """Landlord display fields nested in a single-listing response."""

    id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class LandlordSummary(BaseModel):
    """Landlord display fields nested in search results."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class PropertyFields(BaseModel):
    """Listing columns shared by every response shape."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    address: str
    city: str
    state: str
    zip_code: str
    rent_amount: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    square_feet: Optional[int] = None
    description: Optional[str] = None
    landlord_verified: bool = False
    created_at: Optional[datetime] = None


class PropertyRecord(PropertyFields):
    """Flat record returned after creation."""

    landlord_id: Optional[int] = None
    updated_at: Optional[datetime] = None


class PropertyDetail(PropertyFields):
    """Single listing with its landlord."""

    landlord: Optional[LandlordInfo] = None


class PropertySearchItem(PropertyFields):
    """Listing as returned by search."""

    landlord: Optional[LandlordSummary] = None


class PropertyCreateResponse(BaseModel):
    success: bool = True
    message: str = "Property created successfully"
    property: PropertyRecord


class PropertyDetailResponse(BaseModel):
    success: bool = True
    property: PropertyDetail


class PropertySearchParams(BaseModel):
    """
    Validated search query.

    Every filter is optional; only supplied filters constrain the result.
    Each ``max_*`` is checked against its ``min_*`` when both are present:
    the rent pair requires ``max_rent`` strictly greater than ``min_rent``,
    the bedroom, bathroom and square-feet pairs allow equality.
    """

    model_config = ConfigDict(extra="ignore")

    city: Optional[str] = Field(None, min_length=2, max_length=100)
    state: Optional[str] = Field(None, min_length=2, max_length=50)
    zip_code: Optional[str] = Field(None, pattern=ZIP_CODE_PATTERN)

    min_rent: Optional[Decimal] = Field(None, gt=0, le=MAX_RENT)
    max_rent: Optional[Decimal] = Field(None, gt=0, le=MAX_RENT)

    min_bedrooms: Optional[int] = Field(None, ge=0, le=MAX_ROOMS)
    max_bedrooms: Optional[int] = Field(None, ge=0, le=MAX_ROOMS)

    min_bathrooms: Optional[Decimal] = Field(None, gt=0, le=MAX_ROOMS)
    max_bathrooms: Optional[Decimal] = Field(None, gt=0, le=MAX_ROOMS)

    min_sqft: Optional[int] = Field(None, gt=0, le=MAX_SQUARE_FEET)
    max_sqft: Optional[int] = Field(None, gt=0, le=MAX_SQUARE_FEET)

    landlord_verified: Optional[bool] = None

    sort_by: PropertySort = PropertySort.NEWEST

    limit: int = Field(20, ge=1, le=100)
    offset: int = Field(0, ge=0, le=MAX_OFFSET)

    @field_validator("landlord_verified", mode="before")
    @classmethod
    def parse_landlord_verified(cls, v):
        """Only true/false (any case) are accepted from the query string."""
        if v is None or isinstance(v, bool):
            return v
        if isinstance(v, str) and v.lower() in BOOLEAN_STRINGS:
            return BOOLEAN_STRINGS[v.lower()]
        raise ValueError("landlord_verified must be true or false")

    @field_validator("min_bathrooms", "max_bathrooms")
    @classmethod
    def round_bathrooms(cls, v):
        return _round_half_up(v, "0.1")

    @field_validator("max_rent")
    @classmethod
    def validate_rent_range(cls, v, info: ValidationInfo):
        """max_rent must be strictly greater than min_rent."""
        minimum = info.data.get("min_rent")
        if v is not None and minimum is not None and v <= minimum:
            raise ValueError(f"max_rent must be greater than min_rent ({minimum})")
        return v

    @field_validator("max_bedrooms", "max_bathrooms", "max_sqft")
    @classmethod
    def validate_inclusive_range(cls, v, info: ValidationInfo):
        """max_* must be greater than or equal to its min_*."""
        min_field = "min_" + info.field_name[len("max_"):]
        minimum = info.data.get(min_field)
        if v is not None and minimum is not None and v < minimum:
            raise ValueError(f"{info.field_name} must be greater than or equal to {min_field} ({minimum})")
        return v


class RangeFilter(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


class FiltersApplied(BaseModel):
    """Echo of the filters a search was run with."""

    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    rent_range: Optional[RangeFilter] = None
    bedrooms_range: Optional[RangeFilter] = None
    bathrooms_range: Optional[RangeFilter] = None
    sqft_range: Optional[RangeFilter] = None
    landlord_verified: Optional[bool] = None
    sort_by: PropertySort = PropertySort.NEWEST

    @classmethod
    def from_params(cls, params: PropertySearchParams) -> "FiltersApplied":
        def range_of(minimum, maximum) -> Optional[RangeFilter]:
            if minimum is None and maximum is None:
                return None
            return RangeFilter(
                min=float(minimum) if minimum is not None else None,
                max=float(maximum) if maximum is not None else None,
            )

        return cls(
            city=params.city,
            state=params.state,
            zip_code=params.zip_code,
            rent_range=range_of(params.min_rent, params.max_rent),
            bedrooms_range=range_of(params.min_bedrooms, params.max_bedrooms),
            bathrooms_range=range_of(params.min_bathrooms, params.max_bathrooms),
            sqft_range=range_of(params.min_sqft, params.max_sqft),
            landlord_verified=params.landlord_verified,
            sort_by=params.sort_by,
        )


class PaginationMeta(BaseModel):
    """Pagination metadata derived from limit/offset and the total count."""

    total_count: int = Field(..., description="Total listings matching the filters")
    total_pages: int = Field(..., description="ceil(total_count / limit)")
    current_page: int = Field(..., description="floor(offset / limit) + 1")
    limit: int
    offset: int
    has_next: bool
    has_previous: bool

    @classmethod
    def build(cls, total_count: int, limit: int, offset: int) -> "PaginationMeta":
        total_pages = -(-total_count // limit)
        current_page = offset // limit + 1
        return cls(
            total_count=total_count,
            total_pages=total_pages,
            current_page=current_page,
            limit=limit,
            offset=offset,
            has_next=current_page < total_pages,
            has_previous=current_page > 1,
        )


class PropertyListResponse(BaseModel):
    """Schema for a page of search results."""

    success: bool = True
    properties: List[PropertySearchItem]
    pagination: PaginationMeta
    filters_applied: FiltersApplied


class RentStatistics(BaseModel):
    average: Optional[int] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None


class PropertyFeatures(BaseModel):
    avg_bedrooms: Optional[float] = None
    avg_bathrooms: Optional[float] = None
    avg_square_feet: Optional[int] = None


class GeographicCoverage(BaseModel):
    cities: int = 0
    states: int = 0


class PropertyStatistics(BaseModel):
    """Aggregates over listings with a rent amount."""

    total_properties: int = 0
    verified_properties: int = 0
    verification_rate: int = Field(0, description="Verified share as a whole percentage")
    rent_statistics: RentStatistics
    property_features: PropertyFeatures
    geographic_coverage: GeographicCoverage


class PropertyStatisticsResponse(BaseModel):
    success: bool = True
    statistics: PropertyStatistics
