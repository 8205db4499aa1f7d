from .db import db, utcnow
from .user import User, ROLES
from .audit_log import AuditLog
from .session import Session
from .court import Court
from .booking import Booking, BookingSlot, BOOKING_STATUSES
from .payment import Payment
from .coupon import Coupon
from .rating import Rating
