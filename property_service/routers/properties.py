"""
Property listing endpoints: create, fetch by id, search and statistics.
"""

from fastapi import APIRouter, Depends, status

from property_service.services.property import PropertyService, parse_property_id
from property_service.schemas.property import (
    PropertyCreate,
    PropertyCreateResponse,
    PropertyDetailResponse,
    PropertyListResponse,
    PropertySearchParams,
    PropertyStatisticsResponse,
    PaginationMeta,
    FiltersApplied
)
from property_service.utils.dependencies import get_property_service, get_search_params
from property_service.schemas.error import (
    get_create_error_responses,
    get_read_error_responses,
    get_error_responses
)


router = APIRouter(prefix="/properties", tags=["Properties"])


@router.post(
    "",
    response_model=PropertyCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description="Create a listing for a landlord. landlord_verified always starts false.",
    responses=get_create_error_responses()
)
async def create_property(
    property_data: PropertyCreate,
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyCreateResponse:
    """
    Create a new property listing.

    Args:
        property_data: Validated listing fields
        property_service: Property service instance

    Returns:
        The created record, flat with landlord_id

    Raises:
        LandlordNotFoundError: landlord_id matches no user
        InvalidLandlordRoleError: user is not a landlord
        DuplicatePropertyError: address/zip already listed
    """
    property_obj = await property_service.create_property(property_data)
    return PropertyCreateResponse(property=property_obj.to_dict())


@router.get(
    "/stats",
    response_model=PropertyStatisticsResponse,
    summary="Listing statistics",
    description="Aggregates over listings that have a rent amount.",
    responses=get_error_responses(500, 503)
)
async def get_property_statistics(
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyStatisticsResponse:
    statistics = await property_service.get_property_statistics()
    return PropertyStatisticsResponse(statistics=statistics)


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="Search properties",
    description="Filter, sort and paginate listings. Omitted filters impose no constraint.",
    responses=get_error_responses(400, 500, 503)
)
async def search_properties(
    params: PropertySearchParams = Depends(get_search_params),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyListResponse:
    """
    Search listings.

    Args:
        params: Validated filters, ordering and pagination
        property_service: Property service instance

    Returns:
        Page of listings with pagination metadata and the applied filters
    """
    properties, total_count = await property_service.search_properties(params)

    return PropertyListResponse(
        properties=[p.to_dict(include_landlord=True) for p in properties],
        pagination=PaginationMeta.build(total_count, params.limit, params.offset),
        filters_applied=FiltersApplied.from_params(params)
    )


@router.get(
    "/{property_id}",
    response_model=PropertyDetailResponse,
    summary="Get property by ID",
    description="Fetch one listing with its landlord's display fields.",
    responses=get_read_error_responses()
)
async def get_property(
    property_id: str,
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDetailResponse:
    """
    Get a single listing.

    Raises:
        InvalidPropertyIdError: If the id is not an integer
        PropertyNotFoundError: If no listing has this id
    """
    property_obj = await property_service.get_property(parse_property_id(property_id))
    return PropertyDetailResponse(property=property_obj.to_dict(include_landlord=True))
