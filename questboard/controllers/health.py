from typing import Dict

from fastapi import APIRouter

from questboard.dependencies import OptionalCache, Store

router = APIRouter()


@router.get("/health")
async def health(store: Store, cache: OptionalCache) -> Dict[str, str]:
    store_status = "healthy" if await store.ping() else "unhealthy"
    cache_status = "disabled"
    if cache is not None:
        cache_status = "healthy" if await cache.ping() else "unhealthy"

    status = "ok" if store_status == "healthy" else "degraded"
    return {"status": status, "store": store_status, "cache": cache_status}
