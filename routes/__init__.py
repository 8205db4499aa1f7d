from .health import health_bp
from .users import users_bp
from .courts import court_bp
from .booking import booking_bp
from .coupons import coupons_bp
from .payments import payments_bp
from .ratings import ratings_bp
from .admin import admin_bp
from .audit_logs import audit_bp
