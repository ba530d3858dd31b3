"""
Pydantic schemas for request/response validation.
"""

from .property import (
    PropertySort,
    PropertyCreate,
    PropertyCreateResponse,
    PropertyDetailResponse,
    PropertySearchParams,
    PropertyListResponse,
    PaginationMeta,
    FiltersApplied,
    PropertyStatistics,
    PropertyStatisticsResponse
)
from .error import APIErrorResponse, ErrorDetail

__all__ = [
    "PropertySort",
    "PropertyCreate",
    "PropertyCreateResponse",
    "PropertyDetailResponse",
    "PropertySearchParams",
    "PropertyListResponse",
    "PaginationMeta",
    "FiltersApplied",
    "PropertyStatistics",
    "PropertyStatisticsResponse",
    "APIErrorResponse",
    "ErrorDetail",
]
