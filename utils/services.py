from flask import current_app

from models import db
from services.bookings import BookingService
from services.coupons import CouponService
from services.courts import CourtService
from services.payments import PaymentService
from services.popularity import PopularityService
from services.ratings import RatingService
from services.store import RecordStore
from services.users import UserService


def store() -> RecordStore:
    return RecordStore(db.session)

def booking_service() -> BookingService:
    return BookingService(store())

def coupon_service() -> CouponService:
    return CouponService(store())

def court_service() -> CourtService:
    return CourtService(store())

def payment_service() -> PaymentService:
    return PaymentService(store(), gateway=current_app.extensions["payment_gateway"])

def popularity_service() -> PopularityService:
    return PopularityService(
        store(),
        default_limit=current_app.config.get("POPULAR_COURTS_LIMIT", 6),
        max_limit=current_app.config.get("POPULAR_COURTS_MAX_LIMIT", 50),
    )

def rating_service() -> RatingService:
    return RatingService(
        store(),
        require_confirmed_booking=current_app.config.get("RATINGS_REQUIRE_CONFIRMED_BOOKING", True),
        min_score=current_app.config.get("RATING_MIN", 1),
        max_score=current_app.config.get("RATING_MAX", 5),
    )

def user_service() -> UserService:
    return UserService(store())
