"""
Property repository for listing storage, search and aggregate statistics.
Search builds its predicate set from the supplied filters only and runs the
page query and the matching count query concurrently.
"""

from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy import Select, select, func, case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import contains_eager
from sqlalchemy.schema import CreateTable, CreateIndex
from property_service.repositories.base import BaseRepository
from property_service.models.property import Property, address_zip_unique_index
from property_service.schemas.property import PropertySearchParams, PropertySort
from typing import Optional, List, Dict, Any, Tuple
import asyncio
import logging

logger = logging.getLogger(__name__)


SORT_ORDERINGS = {
    PropertySort.RENT_ASC: (Property.rent_amount.asc().nulls_last(), Property.id.asc()),
    PropertySort.RENT_DESC: (Property.rent_amount.desc().nulls_last(), Property.id.asc()),
    PropertySort.NEWEST: (Property.created_at.desc(), Property.id.desc()),
    PropertySort.OLDEST: (Property.created_at.asc(), Property.id.asc()),
    PropertySort.SQFT_ASC: (Property.square_feet.asc().nulls_last(), Property.id.asc()),
    PropertySort.SQFT_DESC: (Property.square_feet.desc().nulls_last(), Property.id.asc()),
}

# (search parameter, column, operator) for the numeric range filters
RANGE_FILTERS = (
    ("min_rent", Property.rent_amount, "ge"),
    ("max_rent", Property.rent_amount, "le"),
    ("min_bedrooms", Property.bedrooms, "ge"),
    ("max_bedrooms", Property.bedrooms, "le"),
    ("min_bathrooms", Property.bathrooms, "ge"),
    ("max_bathrooms", Property.bathrooms, "le"),
    ("min_sqft", Property.square_feet, "ge"),
    ("max_sqft", Property.square_feet, "le"),
)


class PropertySearchQuery:
    """
    Builds the page and count statements for a listing search.

    Conditions are appended only for parameters that were supplied, in a
    fixed order. The count statement shares the conditions and the landlord
    join but carries no ordering, limit or offset.
    """

    def __init__(self, params: PropertySearchParams):
        self.params = params
        self.conditions = self._build_filter_conditions()

    def _build_filter_conditions(self) -> List:
        params = self.params
        conditions = []

        # Location filters
        if params.city:
            conditions.append(func.lower(Property.city).contains(params.city.lower(), autoescape=True))
        if params.state:
            conditions.append(func.lower(Property.state) == params.state.lower())
        if params.zip_code:
            conditions.append(Property.zip_code == params.zip_code)

        # Numeric ranges
        for name, column, op in RANGE_FILTERS:
            value = getattr(params, name)
            if value is None:
                continue
            conditions.append(column >= value if op == "ge" else column <= value)

        if params.landlord_verified is not None:
            conditions.append(Property.landlord_verified == params.landlord_verified)

        return conditions

    def order_by(self) -> Tuple:
        return SORT_ORDERINGS[self.params.sort_by]

    def page_statement(self) -> Select:
        """Filtered, sorted and paginated listings with their landlords."""
        return (
            select(Property)
            .join(Property.landlord)
            .options(contains_eager(Property.landlord))
            .where(*self.conditions)
            .order_by(*self.order_by())
            .limit(self.params.limit)
            .offset(self.params.offset)
        )

    def count_statement(self) -> Select:
        """Total listings matching the same filters, without pagination."""
        return (
            select(func.count(Property.id))
            .select_from(Property)
            .join(Property.landlord)
            .where(*self.conditions)
        )


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for listing management, search and statistics.
    """

    def __init__(self, session_factory: async_sessionmaker):
        super().__init__(Property, session_factory)

    async def ensure_schema(self) -> None:
        """
        Create the properties table and its duplicate-listing index if absent.
        Both statements use IF NOT EXISTS so concurrent calls are harmless.

        The table is committed before the index is built. An older table that
        already holds case-variant duplicates keeps working without the index;
        the pre-insert duplicate check still applies.
        """
        async with self.session() as session:
            try:
                conn = await session.connection()
                await conn.execute(CreateTable(Property.__table__, if_not_exists=True))
                await session.commit()
                logger.info("Properties table is in place")
            except Exception as e:
                await session.rollback()
                logger.error(f"Failed to create properties table: {e}")
                raise

        async with self.session() as session:
            try:
                conn = await session.connection()
                await conn.execute(CreateIndex(address_zip_unique_index, if_not_exists=True))
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                logger.warning(
                    f"Skipped unique index {address_zip_unique_index.name}: "
                    f"existing listings share an address and zip code ({e.orig})"
                )
            except Exception as e:
                await session.rollback()
                logger.error(f"Failed to create index {address_zip_unique_index.name}: {e}")
                raise

    async def find_duplicate_id(self, address: str, zip_code: str) -> Optional[int]:
        """
        Id of an existing listing with the same address (case-insensitive)
        and zip code, if any.
        """
        async with self.session() as session:
            query = (
                select(Property.id)
                .where(
                    func.lower(Property.address) == func.lower(address),
                    Property.zip_code == zip_code
                )
                .limit(1)
            )
            result = await session.execute(query)
            return result.scalar_one_or_none()

    async def create_property(self, property_data: Dict[str, Any]) -> Property:
        """
        Insert a listing. ``landlord_verified`` is never taken from input.

        Raises:
            IntegrityError: On foreign key or unique index violations
        """
        create_data = {k: v for k, v in property_data.items() if k != "landlord_verified"}
        create_data["landlord_verified"] = False

        created_property = await self.create(create_data)
        logger.info(f"Created property: {created_property.address} (ID: {created_property.id})")
        return created_property

    async def get_property_with_landlord(self, property_id: int) -> Optional[Property]:
        """
        Get a listing joined to its landlord.
        Listings whose landlord row is missing are not returned.
        """
        async with self.session() as session:
            query = (
                select(Property)
                .join(Property.landlord)
                .options(contains_eager(Property.landlord))
                .where(Property.id == property_id)
            )
            result = await session.execute(query)
            property_obj = result.scalar_one_or_none()

            if property_obj:
                logger.debug(f"Retrieved property with landlord: {property_id}")

            return property_obj

    async def search_properties(self, params: PropertySearchParams) -> Tuple[List[Property], int]:
        """
        Search listings with the supplied filters, ordering and pagination.

        Returns:
            Tuple of (page of properties, total matching count)
        """
        search = PropertySearchQuery(params)

        page_task = asyncio.ensure_future(self._fetch_page(search.page_statement()))
        count_task = asyncio.ensure_future(self._fetch_count(search.count_statement()))
        try:
            properties, total_count = await asyncio.gather(page_task, count_task)
        except BaseException:
            # Do not leave the sibling query running unobserved
            for task in (page_task, count_task):
                task.cancel()
            await asyncio.gather(page_task, count_task, return_exceptions=True)
            raise

        logger.debug(f"Property search returned {len(properties)} of {total_count} total results")
        return properties, total_count

    async def _fetch_page(self, statement: Select) -> List[Property]:
        async with self.session() as session:
            result = await session.execute(statement)
            return list(result.scalars().all())

    async def _fetch_count(self, statement: Select) -> int:
        async with self.session() as session:
            result = await session.execute(statement)
            return int(result.scalar() or 0)

    async def get_statistics(self) -> Dict[str, Any]:
        """
        Raw aggregates over listings that have a rent amount.
        Averages are None when there is nothing to average.
        """
        query = (
            select(
                func.count().label("total_properties"),
                func.count(case((Property.landlord_verified.is_(True), 1))).label("verified_properties"),
                func.avg(Property.rent_amount).label("avg_rent"),
                func.min(Property.rent_amount).label("min_rent"),
                func.max(Property.rent_amount).label("max_rent"),
                func.avg(Property.bedrooms).label("avg_bedrooms"),
                func.avg(Property.bathrooms).label("avg_bathrooms"),
                func.avg(Property.square_feet).label("avg_sqft"),
                func.count(func.distinct(Property.city)).label("cities_count"),
                func.count(func.distinct(Property.state)).label("states_count"),
            )
            .select_from(Property)
            .where(Property.rent_amount.isnot(None))
        )

        async with self.session() as session:
            result = await session.execute(query)
            return dict(result.mappings().one())
