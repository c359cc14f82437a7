"""
Tests for web/extensions.py

The extension runs against graphql-core's ExecutionResult, which is what
strawberry keeps on the execution context while on_operation unwinds.
"""

from types import SimpleNamespace

from graphql import ExecutionResult, GraphQLError
from strawberry.extensions import QueryDepthLimiter

from exceptions import InconsistentOrderException, PaymentFailedException
from utils.error_handler import GENERIC_ERROR_MESSAGE, INCONSISTENT_ORDER_MESSAGE
from web.extensions import ShopErrorExtension
from web.schema import schema


def run_extension(result) -> None:
    extension = ShopErrorExtension()
    extension.execution_context = SimpleNamespace(result=result)
    operation = extension.on_operation()
    next(operation)
    for _ in operation:
        pass


def resolver_error(original_error: Exception) -> GraphQLError:
    return GraphQLError(str(original_error), path=["createOrder"], original_error=original_error)


class TestShopErrorExtension:

    def test_inconsistent_order_message_replaced(self):
        failure = InconsistentOrderException(user_id=1, charge_id="ch_1", amount=1000,
                                             reason="disk I/O error at /var/db")
        result = ExecutionResult(data=None, errors=[resolver_error(failure)])

        run_extension(result)

        error = result.errors[0]
        assert error.message == INCONSISTENT_ORDER_MESSAGE
        assert error.extensions == {"code": "INCONSISTENT", "chargeId": "ch_1"}
        assert error.path == ["createOrder"]
        assert "disk" not in error.message

    def test_unexpected_error_masked(self):
        result = ExecutionResult(data=None, errors=[resolver_error(RuntimeError("password=hunter2"))])

        run_extension(result)

        assert result.errors[0].message == GENERIC_ERROR_MESSAGE
        assert result.errors[0].extensions == {"code": "INTERNAL"}

    def test_client_error_keeps_message(self):
        result = ExecutionResult(data=None, errors=[resolver_error(PaymentFailedException("Your card was declined."))])

        run_extension(result)

        assert result.errors[0].message == "Payment failed: Your card was declined."
        assert result.errors[0].extensions == {"code": "PAYMENT_FAILED"}

    def test_engine_error_untouched(self):
        engine_error = GraphQLError("Cannot query field 'nope' on type 'Mutation'.")
        result = ExecutionResult(data=None, errors=[engine_error])

        run_extension(result)

        assert result.errors == [engine_error]

    def test_no_result(self):
        run_extension(None)


class TestSchemaExtensions:

    def test_depth_limiter_built_per_operation(self):
        factory = schema.extensions[1]
        first, second = factory(), factory()

        assert isinstance(first, QueryDepthLimiter)
        assert first is not second
