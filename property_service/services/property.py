"""
Property service implementing listing business rules.
Handles creation checks (landlord existence and role, duplicate listings),
lookups, search and statistics, and maps store failures to API errors.
"""

from typing import Optional, List, Dict, Any, Tuple
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.exc import IntegrityError
from property_service.repositories.property import PropertyRepository
from property_service.repositories.user import UserRepository
from property_service.models.property import Property
from property_service.schemas.property import (
    PropertyCreate,
    PropertySearchParams,
    PropertyStatistics,
    RentStatistics,
    PropertyFeatures,
    GeographicCoverage
)
from property_service.services.error_handler import ErrorHandlerService
from property_service.utils.exceptions import (
    APIException,
    DuplicatePropertyError,
    InternalServerError,
    InvalidLandlordError,
    InvalidLandlordRoleError,
    InvalidPropertyIdError,
    LandlordNotFoundError,
    PropertyNotFoundError,
    SchemaSetupError
)
import logging
import re

logger = logging.getLogger(__name__)

_INTEGER_ID = re.compile(r"^[+-]?\d+$")

MAX_SERIAL_ID = 2_147_483_647


def parse_property_id(raw_id: str) -> int:
    """
    Parse a path id strictly as a base-10 integer.

    Raises:
        InvalidPropertyIdError: If the value is not an integer
    """
    value = raw_id.strip()
    if not _INTEGER_ID.match(value):
        raise InvalidPropertyIdError()
    return int(value)


def _round_half_up(value: Any, places: str = "1") -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP)


class PropertyService:
    """
    Property service for managing listings.
    """

    def __init__(
        self,
        property_repo: PropertyRepository,
        user_repo: UserRepository
    ):
        self.property_repo = property_repo
        self.user_repo = user_repo

    async def setup_database(self) -> None:
        """
        Create the properties table if it does not exist.

        Raises:
            SchemaSetupError: With the store's message when DDL fails
        """
        try:
            await self.property_repo.ensure_schema()
        except Exception as e:
            logger.error(f"Database setup error: {e}")
            raise SchemaSetupError(str(e))

    async def create_property(self, property_data: PropertyCreate) -> Property:
        """
        Create a new listing.

        Checks run in order and stop at the first failure: landlord exists,
        landlord has the landlord role, no listing with the same address and
        zip code exists. ``landlord_verified`` always starts False.

        Raises:
            LandlordNotFoundError: landlord_id matches no user
            InvalidLandlordRoleError: user is not a landlord
            DuplicatePropertyError: address/zip already listed
            InvalidLandlordError: store rejected landlord_id (foreign key)
            InternalServerError: any other failure
        """
        # Ids outside the serial range cannot match a user row
        if not 1 <= property_data.landlord_id <= MAX_SERIAL_ID:
            raise LandlordNotFoundError()

        try:
            landlord = await self.user_repo.get_landlord_candidate(property_data.landlord_id)
            if landlord is None:
                raise LandlordNotFoundError()

            if not landlord.is_landlord:
                raise InvalidLandlordRoleError()

            existing_id = await self.property_repo.find_duplicate_id(
                property_data.address, property_data.zip_code
            )
            if existing_id is not None:
                raise DuplicatePropertyError(existing_id)

            property_obj = await self.property_repo.create_property(property_data.model_dump())

            logger.info(
                f"Property created for landlord {property_data.landlord_id}: "
                f"{property_obj.address} (ID: {property_obj.id})"
            )
            return property_obj

        except APIException:
            raise
        except IntegrityError as e:
            raise await self._map_integrity_error(e, property_data)
        except Exception as e:
            logger.error(f"Error creating property: {e}", exc_info=True)
            raise InternalServerError(message="Failed to create property")

    async def _map_integrity_error(self, error: IntegrityError, property_data: PropertyCreate) -> APIException:
        """Translate an insert-time constraint violation."""
        if ErrorHandlerService.is_foreign_key_violation(error):
            logger.warning(f"Foreign key violation for landlord {property_data.landlord_id}")
            return InvalidLandlordError()

        if ErrorHandlerService.is_unique_violation(error):
            # Lost a race with a concurrent insert of the same listing
            existing_id = None
            try:
                existing_id = await self.property_repo.find_duplicate_id(
                    property_data.address, property_data.zip_code
                )
            except Exception as lookup_error:
                logger.error(f"Failed to look up conflicting property: {lookup_error}")
            return DuplicatePropertyError(existing_id)

        logger.error(f"Error creating property: {error}", exc_info=True)
        return InternalServerError(message="Failed to create property")

    async def get_property(self, property_id: int) -> Property:
        """
        Get a listing with its landlord.

        Raises:
            PropertyNotFoundError: If no listing (with a landlord) has this id
        """
        # Serial ids are positive 32-bit integers
        if not 1 <= property_id <= MAX_SERIAL_ID:
            raise PropertyNotFoundError()

        try:
            property_obj = await self.property_repo.get_property_with_landlord(property_id)
        except Exception as e:
            logger.error(f"Error fetching property {property_id}: {e}", exc_info=True)
            raise InternalServerError(message="Failed to fetch property")

        if property_obj is None:
            raise PropertyNotFoundError()

        return property_obj

    async def search_properties(self, params: PropertySearchParams) -> Tuple[List[Property], int]:
        """
        Search listings.

        Returns:
            Tuple of (page of properties, total matching count)
        """
        try:
            return await self.property_repo.search_properties(params)
        except Exception as e:
            logger.error(f"Error searching properties: {e}", exc_info=True)
            raise InternalServerError(message="Failed to search properties")

    async def get_property_statistics(self) -> PropertyStatistics:
        """
        Aggregate statistics over listings that have a rent amount.
        """
        try:
            stats = await self.property_repo.get_statistics()
        except Exception as e:
            logger.error(f"Error fetching property statistics: {e}", exc_info=True)
            raise InternalServerError(message="Failed to fetch property statistics")

        return self.build_statistics(stats)

    @staticmethod
    def build_statistics(stats: Dict[str, Any]) -> PropertyStatistics:
        """
        Shape raw aggregates: rent average and square feet rounded to whole
        numbers, bedrooms/bathrooms to one decimal, absent averages as None.
        """
        total = int(stats.get("total_properties") or 0)
        verified = int(stats.get("verified_properties") or 0)
        verification_rate = (
            int(_round_half_up(Decimal(verified * 100) / Decimal(total))) if total > 0 else 0
        )

        avg_rent = _round_half_up(stats.get("avg_rent"))
        min_rent = stats.get("min_rent")
        max_rent = stats.get("max_rent")
        avg_bedrooms = _round_half_up(stats.get("avg_bedrooms"), "0.1")
        avg_bathrooms = _round_half_up(stats.get("avg_bathrooms"), "0.1")
        avg_sqft = _round_half_up(stats.get("avg_sqft"))

        return PropertyStatistics(
            total_properties=total,
            verified_properties=verified,
            verification_rate=verification_rate,
            rent_statistics=RentStatistics(
                average=int(avg_rent) if avg_rent is not None else None,
                minimum=float(min_rent) if min_rent is not None else None,
                maximum=float(max_rent) if max_rent is not None else None,
            ),
            property_features=PropertyFeatures(
                avg_bedrooms=float(avg_bedrooms) if avg_bedrooms is not None else None,
                avg_bathrooms=float(avg_bathrooms) if avg_bathrooms is not None else None,
                avg_square_feet=int(avg_sqft) if avg_sqft is not None else None,
            ),
            geographic_coverage=GeographicCoverage(
                cities=int(stats.get("cities_count") or 0),
                states=int(stats.get("states_count") or 0),
            ),
        )
