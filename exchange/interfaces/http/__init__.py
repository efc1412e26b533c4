from fastapi import APIRouter, Depends

from exchange import __version__
from exchange.core.container import ApplicationContainer
from exchange.interfaces.http.deps import get_container
from exchange.interfaces.http.routers import auth, market, trading, users, wallets
from exchange.schemas import ApiInfo


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)

    @router.get("/", response_model=ApiInfo, tags=["system"], summary="API banner")
    async def api_info(container: ApplicationContainer = Depends(get_container)) -> ApiInfo:
        return ApiInfo(name=container.settings.project_name, version=__version__)

    router.include_router(auth.router, prefix="/auth", tags=["auth"])
    router.include_router(users.router, prefix="/users", tags=["users"])
    router.include_router(wallets.router, prefix="/wallets", tags=["wallets"])
    router.include_router(trading.router, prefix="/trading", tags=["trading"])
    router.include_router(market.router, prefix="/market", tags=["market"])
    return router


__all__ = [
    "create_api_router",
]
