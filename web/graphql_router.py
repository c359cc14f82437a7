from strawberry.fastapi import GraphQLRouter

import config
from enums.runtime_environment import RuntimeEnvironment
from web.context import get_context
from web.schema import schema

# GraphiQL only outside production
graphql_router = GraphQLRouter(
    schema,
    context_getter=get_context,
    graphql_ide="graphiql" if config.RUNTIME_ENVIRONMENT != RuntimeEnvironment.PROD else None
)
