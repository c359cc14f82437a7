import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis

import config
from db import create_db_and_tables, get_db_session
from middleware.rate_limit import RateLimiter
from middleware.security_headers import SecurityHeadersMiddleware
from middleware.session import SessionMiddleware
from payment_api.gateway import StripeGateway
from services.checkout import CheckoutService
from services.mail import MailService
from utils.checkout_lock import CheckoutLock
from utils.reconciliation import ReconciliationLog
from web.graphql_router import graphql_router


def create_app(session_factory=None, redis: Redis | None = None, gateway=None,
               mail_service: MailService | None = None) -> FastAPI:
    """
    Build the API application.

    Every collaborator can be injected; the defaults talk to the configured
    database, Redis, payment gateway and mail server.
    """
    redis_client = redis or Redis(host=config.REDIS_HOST, port=config.REDIS_PORT, password=config.REDIS_PASSWORD)
    own_database = session_factory is None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan event handler for startup and shutdown."""
        if own_database:
            await create_db_and_tables()
            logging.info("[Startup] Database tables ready")
        yield
        logging.warning('Shutting down..')
        if redis is None:
            await redis_client.aclose()
        logging.warning('Bye!')

    app = FastAPI(lifespan=lifespan)

    app.state.session_factory = session_factory or get_db_session
    app.state.rate_limiter = RateLimiter(redis_client)
    app.state.mail_service = mail_service or MailService()
    app.state.checkout_service = CheckoutService(
        gateway=gateway or StripeGateway(),
        checkout_lock=CheckoutLock(redis_client),
        reconciliation_log=ReconciliationLog(redis_client),
        session_factory=app.state.session_factory,
        currency=config.CURRENCY
    )

    app.add_middleware(SessionMiddleware)

    if config.SECURITY_HEADERS_ENABLED:
        app.add_middleware(SecurityHeadersMiddleware)
        logging.info("[Startup] Security headers middleware enabled")
    else:
        logging.debug("[Startup] Security headers middleware disabled")

    if config.CORS_ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ALLOWED_ORIGINS,
            # The session cookie has to travel with cross-origin requests from the frontend
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["Content-Type"],
        )
        logging.info(f"[Startup] CORS middleware enabled for origins: {config.CORS_ALLOWED_ORIGINS}")
    else:
        logging.debug("[Startup] CORS middleware disabled (no allowed origins configured)")

    app.include_router(graphql_router, prefix="/graphql")

    @app.get("/health")
    async def health_check():
        """Health check endpoint for container monitoring."""
        return {"status": "healthy"}

    return app
