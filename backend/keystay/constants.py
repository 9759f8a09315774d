"""Status vocabularies shared by models, schemas, and services.

Values are stored as plain strings in the database.
"""


class RoomStatus:
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    CLEANING = "cleaning"
    MAINTENANCE = "maintenance"

    ALL = (AVAILABLE, OCCUPIED, CLEANING, MAINTENANCE)


class BookingStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"

    ALL = (PENDING, CONFIRMED, CHECKED_IN, CHECKED_OUT, CANCELLED)
    # Statuses that hold a room for their date range
    BLOCKING = (PENDING, CONFIRMED, CHECKED_IN)


class PaymentStatus:
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    REFUNDED = "refunded"


ROOM_TYPES = ("standard", "deluxe", "dormitory", "suite")
PAYMENT_METHODS = ("cash", "promptpay", "transfer", "card")
BOOKING_SOURCES = ("direct", "walk-in", "phone", "other")
NOTIFY_METHODS = ("line", "sms", "email", "all")
USER_ROLES = ("owner", "admin", "staff")

# Revocation reasons recorded by the system itself
REVOKE_REASON_REGENERATED = "Regenerated"
REVOKE_REASON_CHECKED_OUT = "Checked out"
REVOKE_REASON_CANCELLED = "Booking cancelled"
REVOKE_REASON_EXPIRED = "Expired"
