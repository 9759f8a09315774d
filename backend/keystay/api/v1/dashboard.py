"""Dashboard API router — room, arrival and revenue overview for an owner."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from keystay.api.deps import get_current_active_user, get_db
from keystay.constants import BookingStatus, PaymentStatus, RoomStatus
from keystay.database import utcnow
from keystay.models.booking import Booking
from keystay.models.user import User
from keystay.schemas.dashboard import DashboardStatsResponse, RevenueSummary, RoomCounts, TodayCounts
from keystay.services import property_service, room_service

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


def _summarize_bookings(bookings: list[Booking], today: date) -> tuple[TodayCounts, RevenueSummary]:
    """Count today's movements and sum paid revenue by check-in date."""
    month_start = today.replace(day=1)
    check_ins = 0
    check_outs = 0
    revenue_today = Decimal("0")
    revenue_month = Decimal("0")

    for booking in bookings:
        if booking.check_in == today and booking.status in (BookingStatus.PENDING, BookingStatus.CONFIRMED):
            check_ins += 1
        if booking.check_out == today and booking.status == BookingStatus.CHECKED_IN:
            check_outs += 1

        if booking.payment_status != PaymentStatus.PAID:
            continue
        if booking.check_in == today:
            revenue_today += booking.total_price
        if month_start <= booking.check_in <= today:
            revenue_month += booking.total_price

    return (
        TodayCounts(check_ins=check_ins, check_outs=check_outs, total=check_ins + check_outs),
        RevenueSummary(today=revenue_today, month=revenue_month),
    )


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> DashboardStatsResponse:
    """Totals across every active property the current user owns.

    Pending and confirmed bookings arriving today count as check-ins; only
    checked-in guests leaving today count as check-outs. Revenue sums the
    total price of fully paid bookings.
    """
    properties = await property_service.list_properties_for_owner(db, current_user.id)
    property_ids = [p.id for p in properties]

    counts = {status: 0 for status in RoomStatus.ALL}
    counts["total"] = 0
    for property_id in property_ids:
        for key, value in (await room_service.room_stats(db, property_id)).items():
            counts[key] += value

    bookings: list[Booking] = []
    if property_ids:
        result = await db.execute(select(Booking).where(Booking.property_id.in_(property_ids)))
        bookings = list(result.scalars().all())

    today_counts, revenue = _summarize_bookings(bookings, utcnow().date())

    occupancy_rate = Decimal("0.00")
    if counts["total"] > 0:
        occupancy_rate = (Decimal(counts[RoomStatus.OCCUPIED]) / Decimal(counts["total"]) * 100).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )

    return DashboardStatsResponse(
        properties=len(properties),
        rooms=RoomCounts(**counts),
        bookings=today_counts,
        revenue=revenue,
        occupancy_rate=occupancy_rate,
    )
