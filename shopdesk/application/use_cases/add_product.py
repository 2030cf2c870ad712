"""
Add Product Use Case.

Validates a catalog entry form and persists the product.
"""

from dataclasses import dataclass

from shopdesk.application.dto.requests import CreateProductRequest
from shopdesk.application.dto.responses import ProductResponse
from shopdesk.config import get_logger
from shopdesk.core.entities.product import Product, Warranty
from shopdesk.core.exceptions import ValidationError
from shopdesk.core.interfaces.catalog_store import ICatalogStore

logger = get_logger(__name__)


@dataclass
class AddProductResult:
    """Result of adding a product."""

    product: Product


class AddProductUseCase:
    """
    Use case for adding a product to the catalog.

    Flow:
    1. Validate name, price and warranty
    2. Persist through the catalog store
    """

    def __init__(self, catalog_store: ICatalogStore | None = None):
        self._catalog_store = catalog_store

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from shopdesk.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    @staticmethod
    def build_product(request: CreateProductRequest) -> Product:
        """
        Turn the form into a Product.

        Raises:
            ValidationError: On the first invalid field.
        """
        name = request.name.strip()
        if not name:
            raise ValidationError("name", "product name is required")
        if request.price <= 0:
            raise ValidationError("price", "price must be greater than zero", request.price)

        warranty = None
        if request.has_warranty:
            if request.warranty_months <= 0:
                raise ValidationError(
                    "warranty_months",
                    "warranty months must be greater than zero",
                    request.warranty_months,
                )
            warranty = Warranty(has_warranty=True, months=request.warranty_months)

        return Product(name=name, price=request.price, warranty=warranty)

    async def execute(self, request: CreateProductRequest) -> AddProductResult:
        product = self.build_product(request)
        store = await self._get_catalog_store()
        created = await store.create_product(product)
        logger.info("product_added", product_id=created.id, name=created.name)
        return AddProductResult(product=created)

    @staticmethod
    def to_response(result: AddProductResult) -> ProductResponse:
        return ProductResponse.from_entity(result.product)
