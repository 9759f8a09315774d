"""AccessCode model — numeric keyless-entry credentials issued per booking."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from keystay.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class AccessCode(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """An entry code valid for ``[valid_from, valid_until]``.

    Used and revoked codes are kept for the audit trail. Expiry is never
    stored; a code is expired when ``valid_until`` lies in the past.
    """

    __tablename__ = "access_codes"

    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Denormalized for property-wide validation and listings
    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False)
    code: Mapped[str] = mapped_column(String(12), nullable=False)
    valid_from: Mapped[datetime] = mapped_column(nullable=False)
    valid_until: Mapped[datetime] = mapped_column(nullable=False)
    is_used: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    used_at: Mapped[datetime | None] = mapped_column(nullable=True)
    is_revoked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(nullable=True)
    revoked_reason: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (Index("ix_access_codes_code_revoked", "code", "is_revoked"),)

    def is_expired(self, now: datetime) -> bool:
        return self.valid_until < now

    def __repr__(self) -> str:
        return f"<AccessCode(id={self.id}, booking_id={self.booking_id}, used={self.is_used}, revoked={self.is_revoked})>"
