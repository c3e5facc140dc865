"""HTTP errors raised from the service layer.

Each class pins one status code so services can raise by meaning
(``raise NotFoundError("Product not found")``) and the router stays thin.
"""
from typing import Any, Optional

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ValidationFailure(HTTPException):
    def __init__(self, detail: Any):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class IntegrityConflict(HTTPException):
    """A concurrent write claimed the same unique key; the request may be retried."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": detail, "retryable": True},
        )


class ExternalDependencyFailure(HTTPException):
    def __init__(self, provider: str, message: str, details: Optional[Any] = None):
        self.provider = provider
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": message, "provider": provider, "details": details},
        )


class TransactionFailure(HTTPException):
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        )
