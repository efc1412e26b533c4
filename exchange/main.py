import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from exchange import __version__
from exchange.core.config import Settings, get_settings
from exchange.core.container import ApplicationContainer
from exchange.core.errors import ErrorKind, ExchangeError
from exchange.core.logging import configure_logging
from exchange.infrastructure.database.session import init_db
from exchange.interfaces.http import create_api_router

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.INVALID_AMOUNT: 400,
    ErrorKind.INSUFFICIENT_FUNDS: 400,
    ErrorKind.WALLET_NOT_FOUND: 404,
    ErrorKind.WALLET_ALREADY_EXISTS: 409,
    ErrorKind.UNSUPPORTED_CURRENCY: 400,
    ErrorKind.RATE_UNAVAILABLE: 503,
    ErrorKind.TRADE_FAILED: 500,
    ErrorKind.RATE_NOT_FOUND: 404,
    ErrorKind.TRANSACTION_NOT_FOUND: 404,
    ErrorKind.USER_ALREADY_EXISTS: 409,
    ErrorKind.USER_NOT_FOUND: 404,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.INACTIVE_USER: 401,
}


async def exchange_error_handler(request: Request, exc: ExchangeError) -> JSONResponse:
    status_code = ERROR_STATUS[exc.kind]
    if exc.is_internal:
        # The trading service already logged the traceback of the cause.
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    elif status_code >= 500:
        logger.warning("%s %s: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind.value, exc.message)

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "kind": exc.kind.value, "message": exc.message},
        headers=headers,
    )


def create_app(settings: Settings | None = None, container: ApplicationContainer | None = None) -> FastAPI:
    """Build the ASGI app.

    A prebuilt ``container`` is used as-is and left open on shutdown; the
    caller that built it owns its lifetime.
    """
    if settings is None:
        settings = container.settings if container is not None else get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        owned = container is None
        active = container if container is not None else ApplicationContainer.build(settings)
        if settings.environment in {"development", "test"}:
            # Migrations own the schema elsewhere.
            await init_db(active.engine)
            await active.market.seed_currencies()
        app.state.container = active
        logger.info("%s %s started (%s)", settings.project_name, __version__, settings.environment)
        try:
            yield
        finally:
            if owned:
                await active.close()

    app = FastAPI(
        title=settings.project_name,
        description="Cryptocurrency exchange backend",
        version=__version__,
        lifespan=lifespan,
    )
    if container is not None:
        # Available before lifespan runs, e.g. under transports that skip it.
        app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ExchangeError, exchange_error_handler)

    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", tags=["system"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
