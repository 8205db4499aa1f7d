import pytest

from app import create_app
from config import Config
from models import db
from models.court import Court
from models.user import User
from security.session import create_session
from services.gateway import to_minor_units
from services.store import RecordStore


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    STRIPE_SECRET_KEY = None
    RATINGS_REQUIRE_CONFIRMED_BOOKING = True


class FakeGateway:
    provider = "FAKE"
    currency = "bdt"

    def __init__(self):
        self.calls = []
        self.error = None

    def create_charge_intent(self, amount, currency=None):
        if self.error:
            raise self.error
        currency = (currency or self.currency).lower()
        minor = to_minor_units(amount, currency)
        self.calls.append((minor, currency))
        n = len(self.calls)
        return {
            "client_secret": f"pi_test_{n}_secret",
            "intent_id": f"pi_test_{n}",
            "amount": minor,
            "currency": currency,
        }


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def app(gateway):
    app = create_app(TestConfig, payment_gateway=gateway)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return RecordStore(db.session)


@pytest.fixture
def make_user(app):
    def _make(email, role="user", name=None):
        user = User(email=email, role=role, name=name or email.split("@")[0])
        db.session.add(user)
        db.session.commit()
        return user
    return _make


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        return {"Authorization": f"Bearer {create_session(user.id)}"}
    return _headers


@pytest.fixture
def player(make_user):
    return make_user("player@example.com")


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", role="admin")


@pytest.fixture
def make_court(app):
    def _make(name="Court A", court_type="Tennis", price=500):
        court = Court(
            name=name,
            type=court_type,
            image=f"https://img.example.com/{name.replace(' ', '-').lower()}.jpg",
            location="Dhaka",
            price_per_session=price,
            slots=["7:00 AM - 8:00 AM", "8:00 AM - 9:00 AM", "5:00 PM - 6:00 PM"],
        )
        db.session.add(court)
        db.session.commit()
        return court
    return _make


@pytest.fixture
def court(make_court):
    return make_court()


@pytest.fixture
def booking_payload(court):
    def _payload(user_email="player@example.com", **overrides):
        data = {
            "userEmail": user_email,
            "courtId": court.id,
            "courtTitle": court.name,
            "courtType": court.type,
            "date": "2026-11-02",
            "slots": ["7:00 AM - 8:00 AM"],
            "price": 500,
        }
        data.update(overrides)
        return data
    return _payload
