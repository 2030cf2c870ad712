"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from shopdesk.application.dto.requests import (
    CreateProductRequest,
    RecordSaleRequest,
    SaleLineRequest,
)
from shopdesk.application.dto.responses import (
    ComponentHealthResponse,
    DeliveryResponse,
    ErrorResponse,
    HealthResponse,
    PricingResponse,
    ProductListResponse,
    ProductResponse,
    SaleLineResponse,
    SaleListResponse,
    SaleResponse,
    VerifySaleResponse,
)

__all__ = [
    # Requests
    "CreateProductRequest",
    "RecordSaleRequest",
    "SaleLineRequest",
    # Responses
    "ComponentHealthResponse",
    "DeliveryResponse",
    "ErrorResponse",
    "HealthResponse",
    "PricingResponse",
    "ProductListResponse",
    "ProductResponse",
    "SaleLineResponse",
    "SaleListResponse",
    "SaleResponse",
    "VerifySaleResponse",
]
