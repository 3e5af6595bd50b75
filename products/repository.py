import os
import uuid
from typing import Any, Mapping, Optional

import boto3
from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from products.models import Product

DEFAULT_TABLE_NAME = "Products-dev"
DEFAULT_REGION = "us-east-1"

logger: Logger = Logger(
    service="product-management-api", level=os.getenv("LOG_LEVEL", "INFO").upper()
)


class ProductNotFoundError(KeyError):
    def __init__(self, product_id: str) -> None:
        super().__init__(product_id)
        self.product_id = product_id

    def __str__(self) -> str:
        return f"Product with ID {self.product_id} was not found."


def _error_code(e: ClientError) -> str:
    return e.response.get("Error", {}).get("Code", "Unknown")


class ProductsRepository:
    """Reads and writes products in a table keyed by the string attribute ``Id``."""

    def __init__(self, table: Any, log: Optional[Logger] = None) -> None:
        self.table = table
        self.logger = log or logger

    @classmethod
    def from_environment(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "ProductsRepository":
        environ = os.environ if environ is None else environ
        table_name = environ.get("DYNAMODB_TABLE_NAME") or DEFAULT_TABLE_NAME
        dynamodb_resource = boto3.resource(
            "dynamodb",
            endpoint_url=environ.get("DYNAMODB_ENDPOINT") or None,
            region_name=environ.get("AWS_REGION") or DEFAULT_REGION,
        )
        return cls(dynamodb_resource.Table(table_name))

    def create(self, product: Product) -> Product:
        self.logger.info("Creating product", product_name=product.name)

        if not product.id:
            product.id = str(uuid.uuid4())
            self.logger.debug("Generated new product ID", product_id=product.id)

        try:
            self.table.put_item(Item=product.to_item())
        except ClientError as e:
            self.logger.exception(
                "Failed to create product",
                product_name=product.name,
                error_code=_error_code(e),
            )
            raise
        self.logger.info("Successfully created product", product_id=product.id)
        return product

    def get_by_id(self, product_id: str) -> Product:
        self.logger.info("Retrieving product", product_id=product_id)

        try:
            response = self.table.get_item(Key={"Id": product_id})
        except ClientError as e:
            self.logger.exception(
                "Failed to retrieve product",
                product_id=product_id,
                error_code=_error_code(e),
            )
            raise

        item = response.get("Item")
        if item is None:
            self.logger.warning("Product not found", product_id=product_id)
            raise ProductNotFoundError(product_id)

        product = Product.from_item(item)
        self.logger.debug(
            "Successfully retrieved product",
            product_id=product.id,
            product_name=product.name,
        )
        return product

    def get_all(self) -> list[Product]:
        self.logger.info("Retrieving all products")

        items: list[dict[str, Any]] = []
        scan_kwargs: dict[str, Any] = {}
        try:
            while True:
                response = self.table.scan(**scan_kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            self.logger.exception(
                "Failed to retrieve all products", error_code=_error_code(e)
            )
            raise

        self.logger.info("Retrieved products", count=len(items))
        return [Product.from_item(item) for item in items]

    def update(self, product: Product) -> Product:
        self.logger.info("Updating product", product_id=product.id)

        try:
            self.table.put_item(Item=product.to_item())
        except ClientError as e:
            self.logger.exception(
                "Failed to update product",
                product_id=product.id,
                error_code=_error_code(e),
            )
            raise
        self.logger.info(
            "Successfully updated product",
            product_id=product.id,
            product_name=product.name,
        )
        return product

    def delete(self, product_id: str) -> None:
        self.logger.info("Deleting product", product_id=product_id)

        try:
            self.table.delete_item(Key={"Id": product_id})
        except ClientError as e:
            self.logger.exception(
                "Failed to delete product",
                product_id=product_id,
                error_code=_error_code(e),
            )
            raise
        self.logger.info("Successfully deleted product", product_id=product_id)
