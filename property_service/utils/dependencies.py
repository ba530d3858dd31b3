"""
FastAPI dependency injection utilities.
Provides the property service and validated search parameters to routes.
"""

from typing import Optional
from decimal import Decimal
from fastapi import Depends, Query
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import async_sessionmaker
from property_service.database import get_session_factory
from property_service.repositories.property import PropertyRepository
from property_service.repositories.user import UserRepository
from property_service.schemas.property import PropertySearchParams, PropertySort
from property_service.services.error_handler import ErrorHandlerService
from property_service.services.property import PropertyService
from property_service.utils.exceptions import ValidationError


async def get_property_service(
    session_factory: async_sessionmaker = Depends(get_session_factory)
) -> PropertyService:
    """
    Get property service instance.

    Args:
        session_factory: Shared session factory

    Returns:
        PropertyService instance
    """
    return PropertyService(
        PropertyRepository(session_factory),
        UserRepository(session_factory)
    )


async def get_search_params(
    city: Optional[str] = Query(None, description="Case-insensitive substring of the city"),
    state: Optional[str] = Query(None, description="State, case-insensitive exact match"),
    zip_code: Optional[str] = Query(None, description="Exact zip code"),
    min_rent: Optional[Decimal] = Query(None, description="Minimum rent"),
    max_rent: Optional[Decimal] = Query(None, description="Maximum rent, greater than min_rent"),
    min_bedrooms: Optional[int] = Query(None, description="Minimum bedrooms"),
    max_bedrooms: Optional[int] = Query(None, description="Maximum bedrooms"),
    min_bathrooms: Optional[Decimal] = Query(None, description="Minimum bathrooms"),
    max_bathrooms: Optional[Decimal] = Query(None, description="Maximum bathrooms"),
    min_sqft: Optional[int] = Query(None, description="Minimum square feet"),
    max_sqft: Optional[int] = Query(None, description="Maximum square feet"),
    landlord_verified: Optional[str] = Query(None, description="true or false"),
    sort_by: Optional[PropertySort] = Query(None, description="Result ordering, default newest"),
    limit: Optional[int] = Query(None, description="Page size (1-100, default 20)"),
    offset: Optional[int] = Query(None, description="Rows to skip (default 0)"),
) -> PropertySearchParams:
    """
    Collect query-string filters into validated search parameters.

    Raises:
        ValidationError: If a bound or a min/max pair is violated
    """
    supplied = {
        name: value
        for name, value in {
            "city": city,
            "state": state,
            "zip_code": zip_code,
            "min_rent": min_rent,
            "max_rent": max_rent,
            "min_bedrooms": min_bedrooms,
            "max_bedrooms": max_bedrooms,
            "min_bathrooms": min_bathrooms,
            "max_bathrooms": max_bathrooms,
            "min_sqft": min_sqft,
            "max_sqft": max_sqft,
            "landlord_verified": landlord_verified,
            "sort_by": sort_by,
            "limit": limit,
            "offset": offset,
        }.items()
        if value is not None
    }

    try:
        return PropertySearchParams(**supplied)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid search parameters",
            field_errors=ErrorHandlerService.extract_field_errors(e)
        )
