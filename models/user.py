from models.db import db, utcnow

ROLES = ("user", "member", "admin")


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)

    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120), nullable=True)
    photo_url = db.Column(db.String(500), nullable=True)

    role = db.Column(db.String(20), nullable=False, default="user")  # user, member, admin
    # set once, on the first promotion to member
    member_since = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    sessions = db.relationship("Session", backref="user", cascade="all, delete-orphan", lazy=True)

    @property
    def is_admin(self):
        return self.role == "admin"
