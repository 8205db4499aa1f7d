from models.user import User
from services.errors import ConflictError, NotFoundError, ValidationError


def normalize_email(value):
    return (value or "").strip().lower()


def _is_valid_email(email):
    return isinstance(email, str) and "@" in email and len(email) <= 255


class UserService:
    def __init__(self, store):
        self.store = store

    def upsert(self, email, name=None, photo_url=None):
        """Create the user on first sign-in. Returns (user, created)."""
        email = normalize_email(email)
        if not email:
            raise ValidationError("Email is required", field="email")
        if not _is_valid_email(email):
            raise ValidationError("Invalid email", field="email")

        existing = self.store.find_one(User, email=email)
        if existing:
            return existing, False

        user = User(email=email, name=name, photo_url=photo_url, role="user")
        self.store.add(user)
        # a concurrent sign-in may have created the row first
        try:
            self.store.commit(conflict_message="User already exists")
        except ConflictError:
            existing = self.store.find_one(User, email=email)
            if existing:
                return existing, False
            raise
        return user, True

    def role_of(self, email):
        user = self.store.find_one(User, email=normalize_email(email))
        if not user:
            raise NotFoundError("User not found")
        return user.role or "user"

    def list_members(self, search=None):
        q = self.store.query(User).filter(User.role == "member")
        if search:
            q = q.filter(User.name.ilike(f"%{search}%"))
        return q.order_by(User.member_since.desc()).all()

    def delete(self, user_id):
        user = self.store.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        self.store.delete(user)
        self.store.commit()
