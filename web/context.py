from fastapi import Request


async def get_context(request: Request) -> dict:
    """
    Per-request GraphQL context.

    Merged by strawberry with its default ``request``/``response`` entries;
    the response is where resolvers set and clear the session cookie.
    """
    state = request.app.state
    return {
        "user_id": getattr(request.state, "user_id", None),
        "session_factory": state.session_factory,
        "checkout_service": state.checkout_service,
        "mail_service": state.mail_service,
        "rate_limiter": state.rate_limiter,
    }
