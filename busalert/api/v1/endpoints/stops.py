"""
정류장 검색 REST API 엔드포인트
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from busalert.algorithms.region_classifier import classify_region
from busalert.api.deps import get_stop_directory, get_store
from busalert.core.config import DEFAULT_NEARBY_RADIUS
from busalert.db.redis_client import BusAlertStore
from busalert.models.domain import Coordinate
from busalert.models.responses import StopResolveResponse, StopSearchResponse
from busalert.services.stop_directory_service import StopDirectory

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/search", response_model=StopSearchResponse)
async def search_stops(
    q: str = Query(..., description="검색 키워드", min_length=1, max_length=50),
    directory: StopDirectory = Depends(get_stop_directory),
    store: BusAlertStore = Depends(get_store),
):
    """
    정류장 키워드 검색

    Example:
        GET /v1/stops/search?q=강남역
    """
    logger.info(f"정류장 검색: keyword={q}")
    results = await directory.search_stops(q)
    store.add_recent_search(q)

    return {
        "keyword": q,
        "count": len(results),
        "results": [stop.to_dict() for stop in results],
    }


@router.get("/nearby", response_model=StopSearchResponse)
async def nearby_stops(
    latitude: float = Query(..., ge=-90, le=90, description="위도"),
    longitude: float = Query(..., ge=-180, le=180, description="경도"),
    radius: int = Query(DEFAULT_NEARBY_RADIUS, ge=50, le=5000, description="반경 (미터)"),
    source: str = Query("tago", pattern="^(tago|kakao)$", description="tago / kakao"),
    directory: StopDirectory = Depends(get_stop_directory),
):
    """
    주변 정류장 (가까운 순)

    Example:
        GET /v1/stops/nearby?latitude=37.4979&longitude=127.0276&radius=500
    """
    stops = await directory.find_stops_near(
        Coordinate(latitude, longitude), radius=radius, source=source
    )
    return {"count": len(stops), "results": [stop.to_dict() for stop in stops]}


@router.get("/resolve", response_model=StopResolveResponse)
async def resolve_stop(
    name: str = Query(..., min_length=1, description="정류장 이름"),
    latitude: Optional[float] = Query(None, ge=-90, le=90),
    longitude: Optional[float] = Query(None, ge=-180, le=180),
    provider: Optional[str] = Query(None, pattern="^(bis|tago)$"),
    directory: StopDirectory = Depends(get_stop_directory),
):
    """정류장 이름 -> provider 정류장 ID"""
    region = classify_region(latitude, longitude)
    stop_ref = await directory.find_stop_by_name(name, region, provider=provider)

    if stop_ref is None:
        return {"valid": False, "message": f"'{name}' 정류장을 찾을 수 없습니다"}

    return {
        "valid": True,
        "stop_id": stop_ref.stop_id,
        "stop_name": stop_ref.name,
        "stop_number": stop_ref.number,
        "provider": stop_ref.provider,
    }


@router.get("/recent")
async def recent_searches(store: BusAlertStore = Depends(get_store)):
    searches = store.get_recent_searches()
    return {"count": len(searches), "searches": searches}


@router.delete("/recent")
async def clear_recent_searches(store: BusAlertStore = Depends(get_store)):
    if not store.clear_recent_searches():
        raise HTTPException(status_code=503, detail="최근 검색어 삭제 실패")
    return {"cleared": True}
