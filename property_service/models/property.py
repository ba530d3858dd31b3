"""
Property model for rental listings.
Maps the ``properties`` table owned by this service, with a foreign key to
the landlord's ``users`` row.
"""

from sqlalchemy import String, Text, Integer, Numeric, Boolean, DateTime, Index, ForeignKey, func, false
from sqlalchemy.orm import Mapped, mapped_column, relationship
from property_service.database import Base
from datetime import datetime
from decimal import Decimal
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from property_service.models.user import User


class Property(Base):
    """
    Rentable unit listed by a landlord.
    Created through the API only; never updated or deleted by this service.
    """

    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Location
    address: Mapped[str] = mapped_column(Text, nullable=False)

    city: Mapped[str] = mapped_column(String(100), nullable=False)

    state: Mapped[str] = mapped_column(String(50), nullable=False)

    zip_code: Mapped[str] = mapped_column(String(20), nullable=False)

    # Listing details
    rent_amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=True
    )

    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    bathrooms: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=3, scale=1),
        nullable=True
    )

    square_feet: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Ownership
    landlord_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=True
    )

    landlord_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false()
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False
    )

    landlord: Mapped[Optional["User"]] = relationship("User", lazy="raise")

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, address={self.address!r}, zip_code={self.zip_code})>"

    def to_dict(self, include_landlord: bool = False) -> dict:
        """
        Convert property to dictionary.

        With ``include_landlord`` the landlord display fields are nested under
        ``landlord`` (the relationship must already be loaded); otherwise the
        record is flat and carries ``landlord_id``.
        """
        result = {
            "id": self.id,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "rent_amount": float(self.rent_amount) if self.rent_amount is not None else None,
            "bedrooms": self.bedrooms,
            "bathrooms": float(self.bathrooms) if self.bathrooms is not None else None,
            "square_feet": self.square_feet,
            "description": self.description,
            "landlord_verified": self.landlord_verified,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

        if include_landlord:
            result["landlord"] = self.landlord.to_dict() if self.landlord else None
        else:
            result["landlord_id"] = self.landlord_id

        return result


# One listing per address and zip code, compared case-insensitively on address
address_zip_unique_index = Index(
    "uq_properties_address_zip",
    func.lower(Property.address),
    Property.zip_code,
    unique=True
)
