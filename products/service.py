from products.models import Product, ProductRequest, ProductResponse, utc_now
from products.repository import ProductsRepository


class ProductsService:
    def __init__(self, repository: ProductsRepository) -> None:
        self.repository = repository

    def get_all_products(self) -> list[ProductResponse]:
        return [
            ProductResponse.from_product(product)
            for product in self.repository.get_all()
        ]

    def get_product_by_id(self, product_id: str) -> ProductResponse:
        """Raises ``ProductNotFoundError`` when no item has this id."""
        return ProductResponse.from_product(self.repository.get_by_id(product_id))

    def create_product(self, request: ProductRequest) -> ProductResponse:
        now = utc_now()
        product = Product(
            name=request.name,
            description=request.description,
            price=request.price,
            stock_quantity=request.stock_qty,
            is_active=request.is_active,
            created_at=now,
            last_modified_at=now,
        )
        return ProductResponse.from_product(self.repository.create(product))

    def update_product(self, product_id: str, request: ProductRequest) -> ProductResponse:
        product = self.repository.get_by_id(product_id)

        product.name = request.name
        product.description = request.description
        product.price = request.price
        product.stock_quantity = request.stock_qty
        product.is_active = request.is_active
        product.last_modified_at = utc_now()

        return ProductResponse.from_product(self.repository.update(product))

    def delete_product(self, product_id: str) -> None:
        self.repository.delete(product_id)
