import strawberry
from strawberry.extensions import QueryDepthLimiter

import config
from models.item import ItemDTO
from services.auth import AuthService
from services.cart import CartService
from services.item import ItemService
from services.user import UserService
from utils.session_token import create_session_token
from web.extensions import ShopErrorExtension
from web.graphql_types import (
    CartItemType,
    ItemType,
    OrderType,
    PermissionType,
    SuccessMessage,
    UserType,
    parse_id,
)


def set_session_cookie(info: strawberry.Info, user_id: int) -> None:
    info.context["response"].set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=create_session_token(user_id),
        max_age=config.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
        secure=config.HSTS_ENABLED
    )


def clear_session_cookie(info: strawberry.Info) -> None:
    info.context["response"].delete_cookie(
        key=config.SESSION_COOKIE_NAME,
        httponly=True,
        samesite="lax",
        secure=config.HSTS_ENABLED
    )


@strawberry.type
class Query:

    @strawberry.field
    async def me(self, info: strawberry.Info) -> UserType | None:
        async with info.context["session_factory"]() as session:
            user = await UserService.get_current_user(info.context["user_id"], session)
        return UserType.from_dto(user) if user is not None else None


@strawberry.type
class Mutation:

    @strawberry.mutation
    async def create_item(self, info: strawberry.Info, title: str, description: str, price: int,
                          image: str | None = None, large_image: str | None = None) -> ItemType:
        item_dto = ItemDTO(title=title, description=description, price=price, image=image, large_image=large_image)
        async with info.context["session_factory"]() as session:
            item = await ItemService.create_item(info.context["user_id"], item_dto, session)
        return ItemType.from_dto(item)

    @strawberry.mutation
    async def update_item(self, info: strawberry.Info, id: strawberry.ID, title: str | None = None,
                          description: str | None = None, price: int | None = None) -> ItemType:
        item_dto = ItemDTO(id=parse_id(id), title=title, description=description, price=price)
        async with info.context["session_factory"]() as session:
            item = await ItemService.update_item(info.context["user_id"], item_dto, session)
        return ItemType.from_dto(item)

    @strawberry.mutation
    async def delete_item(self, info: strawberry.Info, id: strawberry.ID) -> ItemType:
        async with info.context["session_factory"]() as session:
            item = await ItemService.delete_item(info.context["user_id"], parse_id(id), session)
        return ItemType.from_dto(item)

    @strawberry.mutation
    async def signup(self, info: strawberry.Info, email: str, name: str, password: str) -> UserType:
        async with info.context["session_factory"]() as session:
            user = await AuthService.signup(email, name, password, session)
        set_session_cookie(info, user.id)
        return UserType.from_dto(user)

    @strawberry.mutation
    async def signin(self, info: strawberry.Info, email: str, password: str) -> UserType:
        async with info.context["session_factory"]() as session:
            user = await AuthService.signin(email, password, session)
        set_session_cookie(info, user.id)
        return UserType.from_dto(user)

    @strawberry.mutation
    def signout(self, info: strawberry.Info) -> SuccessMessage:
        clear_session_cookie(info)
        return SuccessMessage(message="Logged out")

    @strawberry.mutation
    async def request_reset(self, info: strawberry.Info, email: str) -> SuccessMessage:
        async with info.context["session_factory"]() as session:
            message = await AuthService.request_reset(
                email,
                session,
                mail_service=info.context["mail_service"],
                rate_limiter=info.context["rate_limiter"]
            )
        return SuccessMessage(message=message)

    @strawberry.mutation
    async def reset_password(self, info: strawberry.Info, reset_token: str, password: str,
                             confirm_password: str) -> UserType:
        async with info.context["session_factory"]() as session:
            user = await AuthService.reset_password(reset_token, password, confirm_password, session)
        set_session_cookie(info, user.id)
        return UserType.from_dto(user)

    @strawberry.mutation
    async def update_permissions(self, info: strawberry.Info, permissions: list[PermissionType],
                                 user_id: strawberry.ID) -> UserType:
        async with info.context["session_factory"]() as session:
            user = await UserService.update_permissions(
                info.context["user_id"], parse_id(user_id, "userId"), permissions, session
            )
        return UserType.from_dto(user)

    @strawberry.mutation
    async def add_to_cart(self, info: strawberry.Info, id: strawberry.ID) -> CartItemType:
        async with info.context["session_factory"]() as session:
            line = await CartService.add_to_cart(info.context["user_id"], parse_id(id), session)
        return CartItemType.from_line(line)

    @strawberry.mutation
    async def remove_from_cart(self, info: strawberry.Info, id: strawberry.ID) -> CartItemType:
        async with info.context["session_factory"]() as session:
            cart_item = await CartService.remove_from_cart(info.context["user_id"], parse_id(id), session)
        return CartItemType.from_dto(cart_item)

    @strawberry.mutation
    async def create_order(self, info: strawberry.Info, token: str) -> OrderType:
        order = await info.context["checkout_service"].checkout(info.context["user_id"], token)
        return OrderType.from_dto(order)


class ShopSchema(strawberry.Schema):

    def process_errors(self, errors, execution_context=None) -> None:
        # Resolver errors are logged by ShopErrorExtension, only engine errors are left
        engine_errors = [error for error in errors if error.original_error is None]
        if engine_errors:
            super().process_errors(engine_errors, execution_context)


schema = ShopSchema(
    query=Query,
    mutation=Mutation,
    extensions=[ShopErrorExtension, lambda: QueryDepthLimiter(max_depth=10)]
)
