from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from attrs import define, field
from attrs.validators import ge, instance_of, optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # via str so floats keep their printed value
    return Decimal(str(value))


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    # fromisoformat only learned the Z designator in 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@define(slots=True, kw_only=True)
class Product:
    id: str = field(default="", validator=instance_of(str))  # Partition Key
    name: str = field(validator=instance_of(str))
    description: str = field(default="", validator=instance_of(str))
    price: Decimal = field(converter=_to_decimal, validator=instance_of(Decimal))
    stock_quantity: int = field(default=0, validator=instance_of(int))
    is_active: bool = field(default=True, validator=instance_of(bool))
    created_at: Optional[datetime] = field(
        factory=utc_now, validator=optional(instance_of(datetime))
    )
    last_modified_at: Optional[datetime] = field(
        factory=utc_now, validator=optional(instance_of(datetime))
    )

    def to_item(self) -> dict[str, Any]:
        item = {
            "Id": self.id,
            "Name": self.name,
            "Description": self.description,
            "Price": self.price,
            "StockQuantity": self.stock_quantity,
            "IsActive": self.is_active,
        }
        if self.created_at is not None:
            item["CreatedAt"] = self.created_at.isoformat()
        if self.last_modified_at is not None:
            item["LastModifiedAt"] = self.last_modified_at.isoformat()
        return item

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "Product":
        # only Id is guaranteed; DynamoDB hands numbers back as Decimal
        created_at = _parse_timestamp(item.get("CreatedAt"))
        return cls(
            id=item["Id"],
            name=item.get("Name", ""),
            description=item.get("Description", ""),
            price=item.get("Price", Decimal("0")),
            stock_quantity=int(item.get("StockQuantity", 0)),
            is_active=bool(item.get("IsActive", False)),
            created_at=created_at,
            last_modified_at=_parse_timestamp(item.get("LastModifiedAt")) or created_at,
        )


@define(slots=True, kw_only=True, frozen=True)
class ProductRequest:
    name: str = field(validator=instance_of(str))
    description: str = field(default="", validator=instance_of(str))
    price: Decimal = field(converter=_to_decimal, validator=instance_of(Decimal))
    stock_qty: int = field(default=0, validator=[instance_of(int), ge(0)])
    is_active: bool = field(default=True, validator=instance_of(bool))


@define(slots=True, kw_only=True, frozen=True)
class ProductResponse:
    product_id: str
    name: str
    description: str
    price: Decimal
    stock_qty: int
    is_active: bool
    created_at: Optional[datetime]

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(
            product_id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            stock_qty=product.stock_quantity,
            is_active=product.is_active,
            created_at=product.created_at,
        )
