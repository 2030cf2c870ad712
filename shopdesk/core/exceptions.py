"""
Domain exceptions for the ShopDesk application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class ShopDeskError(Exception):
    """Base exception for all ShopDesk errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(ShopDeskError):
    """User-correctable input problem. Never touches a store."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidLineError(ValidationError):
    """A sale line carries a discount price outside [0, price]."""

    def __init__(self, index: int, price: Any, discount_price: Any):
        super().__init__(
            field=f"products[{index}].discount_price",
            message="discount price must be between 0 and the line price",
            value=discount_price,
        )
        self.code = "INVALID_LINE"
        self.details.update({"index": index, "price": str(price)})


class DraftFrozenError(ValidationError):
    """An accepted sale draft was edited."""

    def __init__(self) -> None:
        super().__init__(
            field="draft",
            message="sale draft was already accepted and can no longer change",
        )
        self.code = "DRAFT_FROZEN"


# Lookup Exceptions
class NotFoundError(ShopDeskError):
    """Base exception for missing catalog or sale records."""

    pass


class ProductNotFoundError(NotFoundError):
    """Product not found in the catalog."""

    def __init__(self, product_id: str):
        super().__init__(
            f"Product not found: {product_id}",
            code="PRODUCT_NOT_FOUND",
            details={"product_id": product_id},
        )


class SaleNotFoundError(NotFoundError):
    """Sale record not found."""

    def __init__(self, sale_id: str):
        super().__init__(
            f"Sale not found: {sale_id}",
            code="SALE_NOT_FOUND",
            details={"sale_id": sale_id},
        )


# Storage Exceptions
class PersistenceError(ShopDeskError):
    """A store write or read failed. Nothing was written."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Persistence error during {operation}: {error}",
            code="PERSISTENCE_ERROR",
            details={"operation": operation, "error": error},
        )


# Invoice Exceptions
class InvoiceError(ShopDeskError):
    """Base exception for invoice document problems."""

    pass


class RenderError(InvoiceError):
    """Invoice document generation failed."""

    def __init__(self, sale_id: str | None, reason: str):
        super().__init__(
            f"Failed to render invoice for sale {sale_id}: {reason}",
            code="RENDER_FAILED",
            details={"sale_id": sale_id, "reason": reason},
        )


class UploadError(InvoiceError):
    """Invoice document could not be stored."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Failed to store document '{path}': {reason}",
            code="UPLOAD_FAILED",
            details={"path": path, "reason": reason},
        )


# Notification Exceptions
class DispatchError(ShopDeskError):
    """Notification gateway did not accept the message."""

    def __init__(self, reason: str, code: str = "DISPATCH_FAILED", status: int | None = None):
        super().__init__(
            f"Notification dispatch failed: {reason}",
            code=code,
            details={"reason": reason, "status": status},
        )


class ConfigurationError(ShopDeskError):
    """Configuration error."""

    pass
