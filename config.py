import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as clubcourt.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "clubcourt.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Cookie fallback for the bearer token
    AUTH_COOKIE_NAME = "clubcourt_session"

    # 8 hours session lifetime
    SESSION_LIFETIME_SECONDS = int(os.getenv("SESSION_LIFETIME_SECONDS", str(8 * 60 * 60)))

    # Idle timeout: 20 minutes
    IDLE_TIMEOUT_SECONDS = int(os.getenv("IDLE_TIMEOUT_SECONDS", str(20 * 60)))

    # Stripe
    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
    PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "bdt")

    # Popular courts ranking
    POPULAR_COURTS_LIMIT = int(os.getenv("POPULAR_COURTS_LIMIT", "6"))
    POPULAR_COURTS_MAX_LIMIT = 50

    # Ratings
    RATINGS_REQUIRE_CONFIRMED_BOOKING = os.getenv("RATINGS_REQUIRE_CONFIRMED_BOOKING", "true").lower() == "true"
    RATING_MIN = 1
    RATING_MAX = 5

    # Basic app settings
    DEBUG = False
