"""
버스 도착 정보 REST API 엔드포인트
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from busalert.api.deps import get_bus_alert_service
from busalert.models.domain import Coordinate, LookupStatus
from busalert.models.responses import ArrivalsResponse
from busalert.services.bus_alert_service import BusAlertService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=ArrivalsResponse)
async def get_arrivals(
    stop_id: Optional[str] = Query(None, description="정류장 ID"),
    stop_name: Optional[str] = Query(None, max_length=50, description="정류장 이름"),
    latitude: Optional[float] = Query(None, ge=-90, le=90, description="정류장 위도"),
    longitude: Optional[float] = Query(None, ge=-180, le=180, description="정류장 경도"),
    service: BusAlertService = Depends(get_bus_alert_service),
):
    """
    정류장 도착 정보 (우선순위 노선 순)

    - **stop_id**: 있으면 이름 조회 생략
    - **stop_name**: ID가 없으면 이름으로 정류장 조회
    - **latitude / longitude**: 지역 판별용

    Example:
        GET /v1/arrivals?stop_name=강남역&latitude=37.4979&longitude=127.0276
    """
    if not stop_id and not (stop_name or "").strip():
        raise HTTPException(status_code=400, detail="stop_id 또는 stop_name이 필요합니다")

    coordinate = None
    if latitude is not None and longitude is not None:
        coordinate = Coordinate(latitude, longitude)

    logger.info(f"도착 정보 조회: stop_id={stop_id}, stop_name={stop_name}")
    lookup = await service.lookup_arrivals(
        stop_id=stop_id, stop_name=stop_name, coordinate=coordinate
    )

    if lookup.status == LookupStatus.STOP_NOT_FOUND:
        raise HTTPException(
            status_code=404,
            detail={"error": lookup.message, "code": "STOP_NOT_RESOLVED"},
        )

    return {
        "status": lookup.status.value,
        "region": lookup.region.value,
        "city_code": lookup.city_code,
        "stop_id": lookup.stop.stop_id if lookup.stop else None,
        "stop_name": (lookup.stop.name if lookup.stop else None) or stop_name,
        "is_placeholder": lookup.status == LookupStatus.PLACEHOLDER,
        "count": len(lookup.arrivals),
        "arrivals": [arrival.to_dict() for arrival in lookup.arrivals],
        "message": lookup.message,
    }
