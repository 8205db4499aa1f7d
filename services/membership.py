import logging

from models.db import utcnow
from models.user import User
from services.errors import NotFoundError

logger = logging.getLogger(__name__)


class MembershipService:
    """Promotes a user to ``member`` on their first approved booking."""

    def __init__(self, store):
        self.store = store

    def promote(self, email, commit=True):
        """
        Set role=member and stamp member_since, once.

        Re-running for an existing member (or an admin) changes nothing, so
        the promotion can be retried on its own after a partial failure.
        Returns a write outcome: ``{"matched": 1, "modified": 0|1}``.
        """
        user = self.store.find_one(User, email=email) if email else None
        if not user:
            raise NotFoundError(f"User {email!r} not found", field="email")

        if user.role == "admin" or (user.role == "member" and user.member_since is not None):
            return {"matched": 1, "modified": 0}

        user.role = "member"
        user.member_since = utcnow()

        if commit:
            self.store.commit()
        logger.info("User %s promoted to member", user.email)
        return {"matched": 1, "modified": 1}
