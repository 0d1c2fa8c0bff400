"""Error codes returned by use cases and services"""


class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"
    TENANT_NOT_FOUND = "TENANT_NOT_FOUND"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    PAYMENT_NOT_FOUND = "PAYMENT_NOT_FOUND"
    SERVICE_NOT_FOUND = "SERVICE_NOT_FOUND"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    ALREADY_CONVERTED = "ALREADY_CONVERTED"
    ALREADY_SETTLED = "ALREADY_SETTLED"
    EXCEEDS_BALANCE = "EXCEEDS_BALANCE"
    LIMIT_REACHED = "LIMIT_REACHED"
