"""Custom exception hierarchy for ByTax.

Every application error carries a user-facing message, a stable error code,
an HTTP status code and optional details, so the API layer can render any of
them the same way.

Error codes follow pattern: [CATEGORY][NUMBER]
- BUS: Business profile errors (100-199)
- TAX: Tax calculation errors (300-399)
- STO: Record store errors (400-499)
"""

from __future__ import annotations

from datetime import date
from typing import Any


class ByTaxException(Exception):
    """Base exception for all ByTax application errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        """Initialize exception with user-friendly message and metadata.

        Args:
            message: User-friendly error message
            code: Unique error code (e.g., "TAX300")
            status_code: HTTP status code (default: 400 Bad Request)
            details: Optional additional context
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response format."""
        return {
            "error": {
                "message": self.message,
                "code": self.code,
                "details": self.details,
            }
        }


# ============================================================================
# BUSINESS ERRORS (BUS100-199)
# ============================================================================

class BusinessError(ByTaxException):
    """Base class for business profile errors."""
    pass


class BusinessNotFoundError(BusinessError):
    """Business does not exist; no calculation is attempted."""

    def __init__(self, business_id: int | str | None = None):
        message = "Business not found" if business_id is None else f"Business {business_id} not found"
        super().__init__(
            message=message,
            code="BUS100",
            status_code=404,
            details={"business_id": business_id} if business_id is not None else {},
        )


# ============================================================================
# TAX CALCULATION ERRORS (TAX300-399)
# ============================================================================

class TaxCalculationError(ByTaxException):
    """Base class for tax calculation errors."""
    pass


class InvalidPeriodError(TaxCalculationError):
    """Reporting period is malformed (start after end, unknown period type)."""

    def __init__(self, message: str, period_start: date | None = None, period_end: date | None = None):
        details: dict[str, Any] = {}
        if period_start is not None:
            details["period_start"] = period_start.isoformat()
        if period_end is not None:
            details["period_end"] = period_end.isoformat()
        super().__init__(message=message, code="TAX300", status_code=422, details=details)


class InvalidCalculationStatusError(TaxCalculationError):
    """Unsupported status value or forbidden status transition."""

    def __init__(self, current_status: str | None = None, new_status: str | None = None):
        if current_status and new_status:
            message = f"Cannot change tax calculation status from '{current_status}' to '{new_status}'"
        elif new_status:
            message = f"Invalid tax calculation status: '{new_status}'"
        else:
            message = "Invalid tax calculation status"
        super().__init__(
            message=message,
            code="TAX301",
            status_code=409,
            details={"current_status": current_status, "new_status": new_status},
        )


class TaxCalculationNotFoundError(TaxCalculationError):
    """Stored tax calculation does not exist."""

    def __init__(self, calculation_id: int | str):
        super().__init__(
            message=f"Tax calculation {calculation_id} not found",
            code="TAX302",
            status_code=404,
            details={"calculation_id": calculation_id},
        )


class RateLoadError(TaxCalculationError):
    """Active tax rates could not be loaded.

    Not fatal: the rate table falls back to empty and every tax component
    becomes zero. Raised internally and converted into a result warning.
    """

    def __init__(self, regime: str, reason: str | None = None):
        super().__init__(
            message=f"Failed to load tax rates for regime '{regime}'",
            code="TAX303",
            status_code=502,
            details={"regime": regime, "reason": reason} if reason else {"regime": regime},
        )


# ============================================================================
# RECORD STORE ERRORS (STO400-499)
# ============================================================================

class StoreError(ByTaxException):
    """Base class for record store errors."""
    pass


class RecordStoreError(StoreError):
    """A fetch from the record store failed (permanent)."""

    def __init__(self, operation: str, reason: str | None = None):
        super().__init__(
            message=f"Record store operation '{operation}' failed",
            code="STO400",
            status_code=502,
            details={"operation": operation, "reason": reason, "retryable": False},
        )


class StoreUnavailableError(StoreError):
    """Record store timed out or dropped the connection (transient).

    The caller may retry; the engine never retries on its own.
    """

    def __init__(self, operation: str, reason: str | None = None):
        super().__init__(
            message=f"Record store is temporarily unavailable ({operation})",
            code="STO401",
            status_code=503,
            details={"operation": operation, "reason": reason, "retryable": True},
        )


class CalculationPersistError(StoreError):
    """Saving a tax calculation failed."""

    def __init__(self, business_id: int | str, reason: str | None = None):
        super().__init__(
            message="Failed to save tax calculation",
            code="STO402",
            status_code=500,
            details={"business_id": business_id, "reason": reason},
        )


class UnsupportedRegimeError(TaxCalculationError):
    """Business carries a tax regime the engine has no rules for."""

    def __init__(self, regime: str, supported: list[str]):
        super().__init__(
            message=f"Unsupported tax regime: '{regime}'",
            code="TAX304",
            status_code=422,
            details={"regime": regime, "supported": supported},
        )
