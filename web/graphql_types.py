from datetime import datetime

import strawberry

from enums.currency import Currency
from enums.permission import Permission
from exceptions import ValidationException
from models.cartItem import CartLineDTO, CartItemDTO
from models.item import ItemDTO
from models.order import OrderDTO
from models.orderItem import OrderItemDTO
from models.user import UserDTO
from services.cart import CartService

PermissionType = strawberry.enum(Permission, name="Permission")
CurrencyType = strawberry.enum(Currency, name="Currency")


def parse_id(value: strawberry.ID | str, name: str = "id") -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationException(f"Invalid {name}: {value!r}", details={name: value})


@strawberry.type(name="Item")
class ItemType:
    id: strawberry.ID
    title: str
    description: str
    price: int
    image: str | None
    large_image: str | None

    @classmethod
    def from_dto(cls, item: ItemDTO) -> "ItemType":
        return cls(
            id=strawberry.ID(str(item.id)),
            title=item.title,
            description=item.description,
            price=item.price,
            image=item.image,
            large_image=item.large_image
        )


@strawberry.type(name="CartItem")
class CartItemType:
    id: strawberry.ID
    quantity: int
    item: ItemType | None

    @classmethod
    def from_line(cls, line: CartLineDTO) -> "CartItemType":
        return cls(id=strawberry.ID(str(line.id)), quantity=line.quantity, item=ItemType.from_dto(line.item))

    @classmethod
    def from_dto(cls, cart_item: CartItemDTO) -> "CartItemType":
        # Removed lines no longer resolve to an item
        return cls(id=strawberry.ID(str(cart_item.id)), quantity=cart_item.quantity, item=None)


@strawberry.type(name="User")
class UserType:
    id: strawberry.ID
    name: str
    email: str
    permissions: list[PermissionType]

    @strawberry.field
    async def cart(self, info: strawberry.Info) -> list[CartItemType]:
        async with info.context["session_factory"]() as session:
            lines = await CartService.get_cart(int(self.id), session)
        return [CartItemType.from_line(line) for line in lines]

    @classmethod
    def from_dto(cls, user: UserDTO) -> "UserType":
        return cls(
            id=strawberry.ID(str(user.id)),
            name=user.name,
            email=user.email,
            permissions=list(user.permissions or [])
        )


@strawberry.type(name="OrderItem")
class OrderItemType:
    id: strawberry.ID
    title: str
    description: str
    price: int
    image: str | None
    large_image: str | None
    quantity: int

    @classmethod
    def from_dto(cls, order_item: OrderItemDTO) -> "OrderItemType":
        return cls(
            id=strawberry.ID(str(order_item.id)),
            title=order_item.title,
            description=order_item.description,
            price=order_item.price,
            image=order_item.image,
            large_image=order_item.large_image,
            quantity=order_item.quantity
        )


@strawberry.type(name="Order")
class OrderType:
    id: strawberry.ID
    total: int
    currency: CurrencyType
    charge: str
    created_at: datetime | None
    items: list[OrderItemType]

    @classmethod
    def from_dto(cls, order: OrderDTO) -> "OrderType":
        return cls(
            id=strawberry.ID(str(order.id)),
            total=order.total,
            currency=order.currency,
            charge=order.charge_id,
            created_at=order.created_at,
            items=[OrderItemType.from_dto(order_item) for order_item in order.items]
        )


@strawberry.type
class SuccessMessage:
    message: str
