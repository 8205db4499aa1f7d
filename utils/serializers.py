def _iso(value):
    return value.isoformat() if value else None


def booking_json(b):
    return {
        "id": b.id,
        "userEmail": b.user_email,
        "courtId": b.court_id,
        "courtTitle": b.court_title,
        "courtType": b.court_type,
        "date": _iso(b.date),
        "slots": list(b.slot_labels or []),
        "price": b.price,
        "couponCode": b.coupon_code,
        "status": b.status,
        "createdAt": _iso(b.created_at),
    }


def payment_json(p):
    return {
        "id": p.id,
        "email": p.email,
        "bookingId": p.booking_id,
        "amount": p.amount,
        "currency": p.currency,
        "transactionId": p.transaction_id,
        "status": p.status,
        "date": _iso(p.created_at),
    }


def court_json(c):
    return {
        "id": c.id,
        "name": c.name,
        "type": c.type,
        "image": c.image,
        "location": c.location,
        "pricePerSession": c.price_per_session,
        "slots": list(c.slots or []),
    }


def coupon_json(c):
    return {
        "id": c.id,
        "code": c.code,
        "discountAmount": c.discount_amount,
        "description": c.description,
    }


def rating_json(r):
    return {
        "id": r.id,
        "courtId": r.court_id,
        "userEmail": r.user_email,
        "rating": r.rating,
        "comment": r.comment,
        "createdAt": _iso(r.created_at),
    }


def user_json(u):
    return {
        "id": u.id,
        "email": u.email,
        "name": u.name,
        "photoUrl": u.photo_url,
        "role": u.role,
        "memberSince": _iso(u.member_since),
        "createdAt": _iso(u.created_at),
    }
