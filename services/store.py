import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from services.errors import ConflictError, StoreError

logger = logging.getLogger(__name__)


class RecordStore:
    """
    Thin adapter over a SQLAlchemy session.

    Services receive one of these instead of reaching for ``db.session``
    so they can be exercised against any session (request-scoped or test).
    """

    def __init__(self, session):
        self.session = session

    # ---------- reads ----------
    def get(self, model, record_id):
        if record_id is None:
            return None
        try:
            return self.session.get(model, record_id)
        except SQLAlchemyError as exc:
            raise self._store_error(exc)

    def find_one(self, model, **filters):
        try:
            return self.session.query(model).filter_by(**filters).first()
        except SQLAlchemyError as exc:
            raise self._store_error(exc)

    def query(self, *entities):
        return self.session.query(*entities)

    def count(self, model, **filters):
        try:
            return self.session.query(model).filter_by(**filters).count()
        except SQLAlchemyError as exc:
            raise self._store_error(exc)

    # ---------- writes ----------
    def add(self, obj):
        self.session.add(obj)
        return obj

    def delete(self, obj):
        self.session.delete(obj)

    def flush(self, conflict_message=None):
        try:
            self.session.flush()
        except IntegrityError as exc:
            self.session.rollback()
            raise self._conflict_or_store_error(exc, conflict_message)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise self._store_error(exc)

    def commit(self, conflict_message=None):
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise self._conflict_or_store_error(exc, conflict_message)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise self._store_error(exc)

    def rollback(self):
        self.session.rollback()

    @contextmanager
    def atomic(self, conflict_message=None):
        """Commit everything staged inside the block, or nothing."""
        try:
            yield self
        except Exception:
            self.session.rollback()
            raise
        self.commit(conflict_message=conflict_message)

    # ---------- helpers ----------
    @staticmethod
    def _store_error(exc):
        logger.error("Record store failure: %s", exc)
        return StoreError("Record store operation failed", details={"reason": exc.__class__.__name__})

    def _conflict_or_store_error(self, exc, conflict_message):
        if conflict_message:
            return ConflictError(conflict_message)
        return self._store_error(exc)
