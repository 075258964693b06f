"""API v1 main router
모든 엔드포인트를 통합하여 하나의 API 라우터로 제공
"""

from fastapi import APIRouter
from busalert.api.v1.endpoints import (
    alerts,
    arrivals,
    departures,
    favorites,
    preferences,
    regions,
    stops,
    websocket,
)

# API v1 main router
api_router = APIRouter()

api_router.include_router(regions.router, prefix="/regions", tags=["regions"])

api_router.include_router(stops.router, prefix="/stops", tags=["stops"])

api_router.include_router(arrivals.router, prefix="/arrivals", tags=["arrivals"])

api_router.include_router(departures.router, prefix="/departures", tags=["departures"])

api_router.include_router(alerts.router, prefix="/alerts", tags=["alerts"])

api_router.include_router(favorites.router, prefix="/favorites", tags=["favorites"])

api_router.include_router(preferences.router, prefix="/settings", tags=["settings"])

api_router.include_router(websocket.router, tags=["websocket"])
