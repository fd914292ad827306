from __future__ import annotations

from typing import Any


class BillingError(Exception):
    code = "billing_error"
    http_status = 500

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidInput(BillingError):
    code = "invalid_input"
    http_status = 400


class ReferenceNotFound(BillingError):
    code = "reference_not_found"
    http_status = 400

    def __init__(self, reference_id: str, kind: str = "Item"):
        super().__init__(f"{kind} with ID {reference_id} not found")
        self.reference_id = reference_id


class NotFound(BillingError):
    code = "not_found"
    http_status = 404


class AuthFailed(BillingError):
    code = "auth_failed"
    http_status = 401


class LoginRequired(BillingError):
    code = "login_required"
    http_status = 303

    def __init__(self, message: str = "login required"):
        super().__init__(message)
