"""Booking model — a guest's stay in one room."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from keystay.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Booking(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A reservation of a room for specific dates.

    ``room_price`` is a snapshot taken at creation; later room price changes
    never reach existing bookings. ``access_code`` and ``access_code_expiry``
    cache the most recently generated code so detail reads avoid a lookup.
    The ``access_codes`` table stays authoritative: with concurrent
    generation the cache reflects whichever write landed last.
    """

    __tablename__ = "bookings"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    booking_number: Mapped[str] = mapped_column(String(20), unique=True, index=True, nullable=False)

    # Guest (embedded, bookings are made without guest accounts)
    guest_first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    guest_last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    guest_email: Mapped[str] = mapped_column(String(255), nullable=False)
    guest_phone: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    guest_id_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    guest_nationality: Mapped[str] = mapped_column(String(100), default="Thai")
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)

    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    nights: Mapped[int] = mapped_column(Integer, nullable=False)
    adults: Mapped[int] = mapped_column(Integer, default=1)
    children: Mapped[int] = mapped_column(Integer, default=0)

    room_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    paid_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    payment_method: Mapped[str | None] = mapped_column(String(20), nullable=True)  # cash, promptpay, transfer, card
    payment_status: Mapped[str] = mapped_column(String(20), default="pending")  # pending, partial, paid, refunded

    status: Mapped[str] = mapped_column(
        String(50),
        default="pending",
        index=True,
    )  # pending, confirmed, checked_in, checked_out, cancelled
    source: Mapped[str] = mapped_column(String(20), default="direct")  # direct, walk-in, phone, other
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    access_code: Mapped[str | None] = mapped_column(String(12), nullable=True)
    access_code_expiry: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (Index("ix_bookings_room_dates", "room_id", "check_in", "check_out"),)

    @property
    def guest_name(self) -> str:
        return f"{self.guest_first_name} {self.guest_last_name}"

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, number={self.booking_number!r}, room_id={self.room_id}, status={self.status})>"
