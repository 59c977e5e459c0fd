"""Domain exceptions for the insights backend.

Each error carries the HTTP status it maps to; ``app.main`` renders them as
``{"detail": ...}`` responses.
"""


class InsightsError(Exception):
    """Base exception for insights services."""

    status_code = 500
    default_detail = "Insights error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(InsightsError):
    """Raised when no valid session principal is attached to the request."""

    status_code = 401
    default_detail = "Not logged in"


class Forbidden(InsightsError):
    """Raised when the principal lacks access to the requested scope."""

    status_code = 403
    default_detail = "No store access"


class NotFound(InsightsError):
    """Raised when a requested store does not exist in the tenant."""

    status_code = 404
    default_detail = "Store not found"


class ComputationError(InsightsError):
    """Raised when an aggregation cannot be completed (e.g. storage failure)."""

    status_code = 500
    default_detail = "Failed to compute insights"
