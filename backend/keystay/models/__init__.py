"""SQLAlchemy models for KeyStay.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from keystay.models.access_code import AccessCode
from keystay.models.booking import Booking
from keystay.models.property import Property
from keystay.models.room import Room
from keystay.models.user import User

__all__ = [
    "AccessCode",
    "Booking",
    "Property",
    "Room",
    "User",
]
