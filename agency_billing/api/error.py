"""Client-facing API errors

Use case errors are raised from routes as ClientError and rendered by
the application's exception handler as:

    {"error": {"code": "...", "message": "...", ...details}}
"""

from typing import Any, Dict
from fastapi import HTTPException, status
from agency_billing.libs.result import Error
from agency_billing.app.errors import ErrorCode


class ClientError(HTTPException):
    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.error = error
        super().__init__(status_code=status_code, detail=error.message)

    def to_dict(self) -> Dict[str, Any]:
        body = {"code": self.error.code, "message": self.error.message}
        body.update(self.error.details or {})
        return {"error": body}


ERROR_STATUS_CODES = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ALREADY_SETTLED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EXCEEDS_BALANCE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.TENANT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.DOCUMENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PAYMENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SERVICE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_STATE_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_CONVERTED: status.HTTP_409_CONFLICT,
    ErrorCode.LIMIT_REACHED: status.HTTP_403_FORBIDDEN,
}


def client_error(error: Error) -> ClientError:
    """ClientError with the HTTP status for the error code (*_FAILED -> 500)"""
    return ClientError(
        error,
        status_code=ERROR_STATUS_CODES.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
    )
