from models.db import db, utcnow

class Court(db.Model):
    __tablename__ = "courts"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    type = db.Column(db.String(60), nullable=False)  # e.g. Tennis, Badminton, Squash
    image = db.Column(db.String(500), nullable=True)
    location = db.Column(db.String(160), nullable=True)
    price_per_session = db.Column(db.Float, nullable=False, default=0)

    # offered slot labels, e.g. ["7:00 AM - 8:00 AM", "5:00 PM - 6:00 PM"]
    slots = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
