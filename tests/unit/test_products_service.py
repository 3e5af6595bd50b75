from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from product_test_helpers import CREATED_AT, make_product

from products.models import Product, ProductRequest, ProductResponse
from products.repository import ProductNotFoundError, ProductsRepository
from products.service import ProductsService


@pytest.fixture
def repository() -> MagicMock:
    return MagicMock(spec=ProductsRepository)


@pytest.fixture
def service(repository: MagicMock) -> ProductsService:
    return ProductsService(repository)


def test_get_all_products(service, repository):
    repository.get_all.return_value = [make_product(id="1"), make_product(id="2")]

    result = service.get_all_products()

    assert [response.product_id for response in result] == ["1", "2"]
    assert all(isinstance(response, ProductResponse) for response in result)


def test_get_product_by_id(service, repository):
    repository.get_by_id.return_value = make_product(id="1")

    result = service.get_product_by_id("1")

    assert result.product_id == "1"
    assert result.stock_qty == 100
    assert result.created_at == CREATED_AT


def test_create_product(service, repository):
    repository.create.side_effect = lambda product: product
    request = ProductRequest(
        name="Test Product",
        description="Test Description",
        price=Decimal("10.99"),
        stock_qty=100,
        is_active=True,
    )

    result = service.create_product(request)

    created: Product = repository.create.call_args.args[0]
    assert created.created_at == created.last_modified_at
    assert result.name == request.name
    assert result.description == request.description
    assert result.price == request.price


def test_update_product(service, repository):
    existing = make_product(id="1", name="Original Name")
    repository.get_by_id.return_value = existing
    repository.update.side_effect = lambda product: product
    request = ProductRequest(
        name="Updated Name",
        description="Updated Description",
        price=Decimal("20.99"),
        stock_qty=50,
        is_active=False,
    )

    result = service.update_product("1", request)

    assert result.name == "Updated Name"
    assert result.price == Decimal("20.99")
    assert result.stock_qty == 50
    assert result.is_active is False
    assert result.created_at == CREATED_AT
    assert existing.last_modified_at > CREATED_AT


def test_update_missing_product_raises(service, repository):
    repository.get_by_id.side_effect = ProductNotFoundError("1")
    request = ProductRequest(name="Name", price=Decimal("1"))

    with pytest.raises(ProductNotFoundError):
        service.update_product("1", request)
    repository.update.assert_not_called()


def test_delete_product(service, repository):
    service.delete_product("1")
    repository.delete.assert_called_once_with("1")


def test_request_converts_float_price():
    assert ProductRequest(name="Name", price=10.99).price == Decimal("10.99")
