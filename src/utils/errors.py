"""
Domain errors raised by services and rendered by the handlers in main.py as
``{"success": false, "error": <message>}``.
"""
from typing import Any, Optional


class ApiError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        body = {"success": False, "error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class NotFoundError(ApiError):
    status_code = 404

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} not found with id of {identifier}"
        super().__init__(message)


class UnauthorizedError(ApiError):
    status_code = 401

    def __init__(self, message: str = "Not authorized to access this route"):
        super().__init__(message)


class ForbiddenError(ApiError):
    # role and ownership failures share the 401 of the public contract
    status_code = 401

    def __init__(self, message: str = "Not authorized to perform this action"):
        super().__init__(message)


class InvalidInputError(ApiError):
    status_code = 400


class InvalidStateError(ApiError):
    status_code = 400


class ConflictError(ApiError):
    status_code = 409


class ServerFaultError(ApiError):
    status_code = 500
