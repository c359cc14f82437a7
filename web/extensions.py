from typing import Iterator

from graphql import GraphQLError
from strawberry.extensions import SchemaExtension

from exceptions import ShopException, InconsistentOrderException
from utils.error_handler import handle_service_error, handle_unexpected_error, error_code


class ShopErrorExtension(SchemaExtension):
    """
    Rewrites resolver errors into client-safe errors.

    Every error raised from a resolver gets the public message from
    utils.error_handler and ``extensions.code``. Errors the GraphQL engine
    produced itself (syntax, validation) pass through untouched.
    """

    def on_operation(self) -> Iterator[None]:
        yield
        result = self.execution_context.result
        # graphql-core or strawberry result, depending on where the operation stopped
        if result is not None and getattr(result, "errors", None):
            result.errors = [self.format_error(error) for error in result.errors]

    @staticmethod
    def format_error(error: GraphQLError) -> GraphQLError:
        original_error = error.original_error
        if original_error is None or isinstance(original_error, GraphQLError):
            return error

        if isinstance(original_error, ShopException):
            message = handle_service_error(original_error)
        else:
            message = handle_unexpected_error(original_error)

        extensions = {"code": error_code(original_error)}
        if isinstance(original_error, InconsistentOrderException):
            # Reference for support, the customer has been charged
            extensions["chargeId"] = original_error.charge_id

        return GraphQLError(
            message,
            nodes=error.nodes,
            source=error.source,
            positions=error.positions,
            path=error.path,
            original_error=original_error,
            extensions=extensions
        )
