from models.coupon import Coupon
from services.errors import NotFoundError, ValidationError
from services.gateway import positive_amount


class CouponService:
    def __init__(self, store):
        self.store = store

    def validate(self, code):
        """Exact, case-sensitive lookup. An unknown code is a normal outcome, not an error."""
        if not isinstance(code, str) or not code:
            return {"valid": False}

        coupon = self.store.find_one(Coupon, code=code)
        if not coupon:
            return {"valid": False}
        return {"valid": True, "discount_amount": coupon.discount_amount}

    # ---------- admin management ----------
    def create(self, code, discount_amount, description=None):
        code = (code or "").strip()
        if not code:
            raise ValidationError("Missing field: code", field="code")
        amount = positive_amount(discount_amount, field="discountAmount")

        coupon = Coupon(code=code, discount_amount=float(amount), description=description)
        self.store.add(coupon)
        self.store.commit(conflict_message="Coupon code already exists")
        return coupon

    def list(self):
        return self.store.query(Coupon).order_by(Coupon.created_at.desc()).all()

    def update(self, coupon_id, data):
        coupon = self.store.get(Coupon, coupon_id)
        if not coupon:
            raise NotFoundError("Coupon not found")

        if "code" in data:
            code = (data.get("code") or "").strip()
            if not code:
                raise ValidationError("code cannot be empty", field="code")
            coupon.code = code
        if "discountAmount" in data:
            coupon.discount_amount = float(positive_amount(data.get("discountAmount"), field="discountAmount"))
        if "description" in data:
            coupon.description = data.get("description")

        self.store.commit(conflict_message="Coupon code already exists")
        return coupon

    def delete(self, coupon_id):
        coupon = self.store.get(Coupon, coupon_id)
        if not coupon:
            raise NotFoundError("Coupon not found")
        self.store.delete(coupon)
        self.store.commit()
