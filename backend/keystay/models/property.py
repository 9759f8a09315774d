"""Property model — hotels, resorts, and guesthouses."""

import uuid

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from keystay.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Property(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A lodging business owned by a user. Soft-deleted via ``is_active``."""

    __tablename__ = "properties"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    district: Mapped[str | None] = mapped_column(String(255), default=None)
    province: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    postal_code: Mapped[str | None] = mapped_column(String(5), default=None)
    phone_number: Mapped[str | None] = mapped_column(String(20), default=None)
    email: Mapped[str | None] = mapped_column(String(255), default=None)
    line_id: Mapped[str | None] = mapped_column(String(100), default=None)
    check_in_time: Mapped[str] = mapped_column(String(5), default="14:00")
    check_out_time: Mapped[str] = mapped_column(String(5), default="12:00")
    amenities: Mapped[list | None] = mapped_column(JSON, default=list)
    total_rooms: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name={self.name!r}, slug={self.slug!r})>"
