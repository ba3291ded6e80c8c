"""
Relay errors. Each one maps to a single HTTP status and JSON body.
"""
from typing import Any, Dict


class RelayError(Exception):
    status_code = 500
    error = "Internal error"
    audit_status = "error"

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error}


class MethodNotAllowedError(RelayError):
    status_code = 405
    error = "Method Not Allowed"
    audit_status = "method_not_allowed"

    def __init__(self, method: str):
        super().__init__(f"{method} not allowed")
        self.method = method


class InvalidRequestError(RelayError):
    status_code = 400
    error = "Invalid request"
    audit_status = "invalid_request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


class UpstreamError(RelayError):
    status_code = 500
    error = "OpenAI API error"
    audit_status = "upstream_error"

    def __init__(self, status: int, details: str):
        super().__init__(f"upstream returned {status}")
        self.status = status
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "details": self.details}
