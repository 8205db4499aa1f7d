from datetime import date, timedelta

import pytest

from models import db
from models.booking import Booking, BookingSlot
from models.user import User
from services.bookings import BookingService, can_transition
from services.errors import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    PartialFailureError,
    ValidationError,
)


@pytest.fixture
def service(store):
    return BookingService(store)


@pytest.mark.parametrize(
    "field", ["userEmail", "courtId", "courtTitle", "courtType", "date", "slots", "price"]
)
def test_create_missing_field_names_it(service, player, booking_payload, field):
    data = booking_payload()
    data.pop(field)

    with pytest.raises(ValidationError) as exc:
        service.create(player, data)

    assert exc.value.field == field
    assert Booking.query.count() == 0


@pytest.mark.parametrize("price", [0, -20, "abc", "1e400"])
def test_create_rejects_non_positive_price(service, player, booking_payload, price):
    with pytest.raises(ValidationError) as exc:
        service.create(player, booking_payload(price=price))
    assert exc.value.field == "price"


def test_create_starts_pending_with_server_timestamp(service, player, booking_payload):
    booking = service.create(player, booking_payload(status="confirmed", createdAt="1999-01-01"))

    assert booking.status == "pending"
    assert booking.created_at is not None
    assert booking.created_at.year >= 2024
    assert booking.slot_labels == ["7:00 AM - 8:00 AM"]


def test_create_for_unknown_court_fails(service, player, booking_payload):
    with pytest.raises(ValidationError) as exc:
        service.create(player, booking_payload(courtId=9999))
    assert exc.value.field == "courtId"


def test_player_cannot_book_for_someone_else(service, player, booking_payload):
    with pytest.raises(ForbiddenError):
        service.create(player, booking_payload(user_email="other@example.com"))


def test_double_booking_same_slot_conflicts(service, player, make_user, booking_payload):
    other = make_user("other@example.com")
    service.create(player, booking_payload())

    with pytest.raises(ConflictError):
        service.create(other, booking_payload(user_email=other.email, slots=["7:00 AM - 8:00 AM", "5:00 PM - 6:00 PM"]))

    assert Booking.query.count() == 1
    # a different slot on the same day is fine
    service.create(other, booking_payload(user_email=other.email, slots=["5:00 PM - 6:00 PM"]))
    assert Booking.query.count() == 2


def test_rejecting_releases_slots(service, player, admin, make_user, booking_payload):
    first = service.create(player, booking_payload())
    service.transition(first.id, "rejected", admin)

    other = make_user("other@example.com")
    again = service.create(other, booking_payload(user_email=other.email))
    assert again.status == "pending"


def test_transition_requires_admin(service, player, booking_payload):
    booking = service.create(player, booking_payload())
    with pytest.raises(ForbiddenError):
        service.transition(booking.id, "approved", player)


def test_transition_missing_booking(service, admin):
    with pytest.raises(NotFoundError):
        service.transition(12345, "approved", admin)


def test_transition_unknown_status(service, player, admin, booking_payload):
    booking = service.create(player, booking_payload())
    with pytest.raises(ValidationError):
        service.transition(booking.id, "archived", admin)


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        ("pending", "approved", True),
        ("pending", "rejected", True),
        ("approved", "confirmed", True),
        ("approved", "rejected", True),
        ("pending", "confirmed", False),
        ("confirmed", "pending", False),
        ("confirmed", "rejected", False),
        ("rejected", "approved", False),
    ],
)
def test_transition_table(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_illegal_transition_is_rejected(service, player, admin, booking_payload):
    booking = service.create(player, booking_payload())
    with pytest.raises(InvalidTransitionError) as exc:
        service.transition(booking.id, "confirmed", admin)
    assert exc.value.current == "pending"
    assert db.session.get(Booking, booking.id).status == "pending"


def test_approval_promotes_requester(service, player, admin, booking_payload):
    booking = service.create(player, booking_payload())

    result = service.transition(booking.id, "approved", admin)

    assert result["booking"].status == "approved"
    assert result["booking_update"] == {"matched": 1, "modified": 1}
    assert result["user_update"] == {"matched": 1, "modified": 1}
    user = User.query.filter_by(email=player.email).one()
    assert user.role == "member"
    assert user.member_since is not None


def test_reapproval_keeps_member_since(service, player, admin, booking_payload):
    first = service.create(player, booking_payload())
    service.transition(first.id, "approved", admin)
    since = User.query.filter_by(email=player.email).one().member_since

    second = service.create(player, booking_payload(slots=["8:00 AM - 9:00 AM"]))
    result = service.transition(second.id, "approved", admin)

    assert result["user_update"] == {"matched": 1, "modified": 0}
    assert User.query.filter_by(email=player.email).one().member_since == since


def test_promotion_failure_is_partial(service, admin, booking_payload, make_user):
    booking = service.create(admin, booking_payload(user_email="ghost@example.com"))

    with pytest.raises(PartialFailureError) as exc:
        service.transition(booking.id, "approved", admin)

    assert exc.value.completed == ["booking"]
    assert exc.value.failed == ["user"]
    assert db.session.get(Booking, booking.id).status == "approved"

    # retrying the approval retries only the promotion
    make_user("ghost@example.com")
    result = service.transition(booking.id, "approved", admin)
    assert result["booking_update"]["modified"] == 0
    assert result["user_update"]["modified"] == 1


def test_delete_by_owner_and_missing(service, player, booking_payload):
    booking = service.create(player, booking_payload())

    assert service.delete(booking.id, player) == {"deleted": 1}
    assert BookingSlot.query.count() == 0
    with pytest.raises(NotFoundError):
        service.delete(booking.id, player)


def test_delete_by_stranger_forbidden(service, player, make_user, booking_payload):
    booking = service.create(player, booking_payload())
    with pytest.raises(ForbiddenError):
        service.delete(booking.id, make_user("stranger@example.com"))


def test_confirmed_booking_cannot_be_deleted(service, player, admin, booking_payload):
    booking = service.create(player, booking_payload())
    service.transition(booking.id, "approved", admin)
    service.transition(booking.id, "confirmed", admin)

    with pytest.raises(InvalidTransitionError):
        service.delete(booking.id, admin)
    assert db.session.get(Booking, booking.id) is not None


def test_list_filters_compose(service, player, admin, make_user, make_court, booking_payload):
    court_b = make_court(name="Court B")
    other = make_user("other@example.com")

    a1 = service.create(player, booking_payload())
    a2 = service.create(other, booking_payload(user_email=other.email, slots=["8:00 AM - 9:00 AM"]))
    service.create(player, booking_payload(courtId=court_b.id, courtTitle="Court B"))
    service.transition(a2.id, "approved", admin)

    found = service.list(admin, search="court a")
    assert {b.id for b in found} == {a1.id, a2.id}

    found = service.list(admin, search="Court A", status="approved")
    assert [b.id for b in found] == [a2.id]

    found = service.list(admin, requester=player.email, search="Court A")
    assert [b.id for b in found] == [a1.id]


def test_player_only_lists_own(service, player, make_user, booking_payload):
    other = make_user("other@example.com")
    service.create(player, booking_payload())
    service.create(other, booking_payload(user_email=other.email, slots=["8:00 AM - 9:00 AM"]))

    assert [b.user_email for b in service.list(player)] == [player.email]
    with pytest.raises(ForbiddenError):
        service.list(player, requester=other.email)


def test_list_returns_every_match_without_paging(service, admin, court):
    start = date(2026, 1, 1)
    db.session.add_all([
        Booking(user_email="bulk@example.com", court_id=court.id, court_title=court.name, court_type=court.type,
                date=start + timedelta(days=i), slot_labels=["7:00 AM - 8:00 AM"], price=500, status="pending")
        for i in range(205)
    ])
    db.session.commit()

    assert len(service.list(admin)) == 205

    rows, total = service.list_page(admin, page=3, size=100)
    assert total == 205
    assert [b.date for b in rows] == [start + timedelta(days=i) for i in (4, 3, 2, 1, 0)]


@pytest.mark.parametrize("page,size", [(0, 10), (1, 0), ("x", 10), (1, "many")])
def test_list_rejects_bad_paging(service, admin, page, size):
    with pytest.raises(ValidationError) as exc:
        service.list(admin, page=page, size=size)
    assert exc.value.field in ("page", "size")


# ---------- HTTP contract ----------

def test_create_booking_route(client, player, auth_headers, booking_payload):
    resp = client.post("/bookings", json=booking_payload(), headers=auth_headers(player))

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["status"] == "pending"
    assert body["userEmail"] == player.email


def test_create_booking_route_validation_envelope(client, player, auth_headers, booking_payload):
    data = booking_payload()
    data.pop("courtType")
    resp = client.post("/bookings", json=data, headers=auth_headers(player))

    assert resp.status_code == 400
    assert resp.get_json() == {
        "error": "Missing field: courtType",
        "kind": "ValidationError",
        "field": "courtType",
    }


def test_patch_reports_both_writes(client, player, admin, auth_headers, booking_payload):
    booking_id = client.post("/bookings", json=booking_payload(), headers=auth_headers(player)).get_json()["id"]

    resp = client.patch(f"/bookings/{booking_id}", json={"status": "approved", "email": player.email},
                        headers=auth_headers(admin))

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["booking"]["status"] == "approved"
    assert body["bookingUpdate"] == {"matched": 1, "modified": 1}
    assert body["userUpdate"] == {"matched": 1, "modified": 1}


def test_patch_by_player_forbidden(client, player, auth_headers, booking_payload):
    booking_id = client.post("/bookings", json=booking_payload(), headers=auth_headers(player)).get_json()["id"]

    resp = client.patch(f"/bookings/{booking_id}", json={"status": "approved"}, headers=auth_headers(player))

    assert resp.status_code == 403
    assert resp.get_json()["kind"] == "ForbiddenError"


def test_patch_partial_failure_status(client, admin, auth_headers, booking_payload):
    booking_id = client.post("/bookings", json=booking_payload(user_email="ghost@example.com"),
                             headers=auth_headers(admin)).get_json()["id"]

    resp = client.patch(f"/bookings/{booking_id}", json={"status": "approved"}, headers=auth_headers(admin))

    assert resp.status_code == 424
    body = resp.get_json()
    assert body["kind"] == "PartialFailureError"
    assert body["details"]["completed"] == ["booking"]
    assert body["details"]["failed"] == ["user"]
    assert body["details"]["status"] == "approved"


def test_delete_missing_booking_route(client, player, auth_headers):
    resp = client.delete("/bookings/999", headers=auth_headers(player))
    assert resp.status_code == 404
    assert resp.get_json()["kind"] == "NotFoundError"


def test_list_route_search_and_status(client, player, admin, auth_headers, booking_payload):
    headers = auth_headers(player)
    client.post("/bookings", json=booking_payload(), headers=headers)

    resp = client.get("/bookings?search=court%20a&status=pending", headers=headers)
    assert [b["courtTitle"] for b in resp.get_json()] == ["Court A"]

    resp = client.get("/bookings?search=court%20a&status=approved", headers=headers)
    assert resp.get_json() == []


def test_get_booking_of_other_user_forbidden(client, player, make_user, auth_headers, booking_payload):
    booking_id = client.post("/bookings", json=booking_payload(), headers=auth_headers(player)).get_json()["id"]
    other = make_user("other@example.com")

    assert client.get(f"/bookings/{booking_id}", headers=auth_headers(other)).status_code == 403
    assert client.get(f"/bookings/{booking_id}", headers=auth_headers(player)).status_code == 200


def test_patch_without_status_is_validation_error(client, player, admin, auth_headers, booking_payload):
    booking_id = client.post("/bookings", json=booking_payload(), headers=auth_headers(player)).get_json()["id"]

    resp = client.patch(f"/bookings/{booking_id}", json={}, headers=auth_headers(admin))

    assert resp.status_code == 400
    assert resp.get_json() == {
        "error": "Missing field: status",
        "kind": "ValidationError",
        "field": "status",
    }


def test_list_route_pages_with_total_header(client, player, auth_headers, booking_payload):
    headers = auth_headers(player)
    for day in ("2026-11-01", "2026-11-02", "2026-11-03"):
        client.post("/bookings", json=booking_payload(date=day), headers=headers)

    resp = client.get("/bookings?page=2&size=2", headers=headers)

    assert resp.status_code == 200
    assert resp.headers["X-Total-Count"] == "3"
    assert [b["date"] for b in resp.get_json()] == ["2026-11-01"]

    resp = client.get("/bookings", headers=headers)
    assert resp.headers["X-Total-Count"] == "3"
    assert len(resp.get_json()) == 3
