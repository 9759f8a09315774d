"""Pydantic v2 schemas for dashboard endpoints."""

from decimal import Decimal

from pydantic import BaseModel


class RoomCounts(BaseModel):
    total: int
    available: int
    occupied: int
    cleaning: int
    maintenance: int


class TodayCounts(BaseModel):
    check_ins: int
    check_outs: int
    total: int


class RevenueSummary(BaseModel):
    """Total price of paid bookings, bucketed by check-in date."""

    today: Decimal
    month: Decimal


class DashboardStatsResponse(BaseModel):
    """Overview across every active property the caller owns."""

    properties: int
    rooms: RoomCounts
    bookings: TodayCounts
    revenue: RevenueSummary
    occupancy_rate: Decimal  # percentage 0.00–100.00 of rooms currently occupied
