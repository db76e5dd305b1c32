"""Custom exception classes for the application."""

from fastapi import HTTPException, status


class UnauthorizedError(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
        )


class AnalyticsError(HTTPException):
    """Analytics could not be computed. ``detail`` is only filled in debug mode."""

    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to generate analytics", "details": detail},
        )
