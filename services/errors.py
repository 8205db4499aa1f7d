"""
Error taxonomy for the booking and commerce services.

Every error carries a machine-readable ``kind`` and the HTTP status the
transport layer should answer with. Routes never catch these; the handler
registered in ``app.py`` renders them.
"""


class ServiceError(Exception):
    kind = "ServiceError"
    status_code = 500

    def __init__(self, message, field=None, details=None):
        self.message = message
        self.field = field
        self.details = details or {}
        super().__init__(message)

    def to_dict(self):
        out = {"error": self.message, "kind": self.kind}
        if self.field:
            out["field"] = self.field
        if self.details:
            out["details"] = self.details
        return out


class ValidationError(ServiceError):
    kind = "ValidationError"
    status_code = 400


class Unauthenticated(ServiceError):
    kind = "Unauthenticated"
    status_code = 401


class ForbiddenError(ServiceError):
    kind = "ForbiddenError"
    status_code = 403


class NotFoundError(ServiceError):
    kind = "NotFoundError"
    status_code = 404


class ConflictError(ServiceError):
    kind = "ConflictError"
    status_code = 409


class InvalidTransitionError(ServiceError):
    kind = "InvalidTransitionError"
    status_code = 409

    def __init__(self, current, target, message=None):
        self.current = current
        self.target = target
        super().__init__(
            message or f"Cannot move booking from {current} to {target}",
            field="status",
            details={"from": current, "to": target},
        )


class PartialFailureError(ServiceError):
    """One of two coupled writes failed; ``completed`` lists the half that stuck."""

    kind = "PartialFailureError"
    status_code = 424

    def __init__(self, message, completed, failed, cause=None, result=None):
        self.completed = list(completed)
        self.failed = list(failed)
        self.cause = cause
        self.result = result or {}
        details = {"completed": self.completed, "failed": self.failed}
        if cause is not None:
            details["cause"] = cause.to_dict() if isinstance(cause, ServiceError) else str(cause)
        details.update(self.result)
        super().__init__(message, details=details)


class PaymentGatewayError(ServiceError):
    kind = "PaymentGatewayError"
    status_code = 502


class StoreError(ServiceError):
    kind = "StoreError"
    status_code = 500
