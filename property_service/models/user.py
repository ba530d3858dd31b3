"""
User model for the externally owned ``users`` table.
This service only reads landlord accounts; the table schema and lifecycle
belong to the account service.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from property_service.database import Base
import enum
from typing import Optional


class UserRole(str, enum.Enum):
    """Roles this service cares about."""
    LANDLORD = "landlord"


class User(Base):
    """Read-only view of a user account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    role: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    @property
    def is_landlord(self) -> bool:
        return self.role == UserRole.LANDLORD.value

    def to_dict(self, include_id: bool = True) -> dict:
        """Landlord display fields."""
        result = {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
        }
        if include_id:
            result = {"id": self.id, **result}
        return result
