from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def utcnow():
    # naive UTC, matches what the DateTime columns store
    return datetime.now(timezone.utc).replace(tzinfo=None)
