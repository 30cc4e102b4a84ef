# backend/core/error_handling.py

"""
Error types shared by the service layer.

Services raise these for expected business conditions; the handlers in
``core.exceptions`` turn them into consistent JSON responses.
"""

from typing import Any, Dict, Optional
import logging

from fastapi import status

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for API errors"""

    error_code = "internal_error"

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return self.error_code

    def to_dict(self) -> Dict[str, Any]:
        payload = {"detail": self.message, "error_code": self.error_code}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(APIError):
    """Resource not found error"""

    error_code = "not_found"

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} with identifier {identifier} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "identifier": str(identifier)},
        )


class ConflictError(APIError):
    """Resource conflict error"""

    error_code = "conflict"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message, status_code=status.HTTP_409_CONFLICT, details=details
        )


class InvalidRequestError(APIError):
    """Missing or malformed input"""

    error_code = "invalid_request"

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"validation_errors": errors} if errors else {},
        )


class InsufficientBalanceError(APIError):
    """Redemption cost exceeds the available token balance"""

    error_code = "insufficient_balance"

    def __init__(self, customer_id: str, balance: int, requested: int):
        super().__init__(
            message="Insufficient token balance",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={
                "customer_id": customer_id,
                "current_balance": balance,
                "requested": requested,
            },
        )
