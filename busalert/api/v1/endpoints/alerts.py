"""
출발 알림 REST API 엔드포인트
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from busalert.api.deps import get_distance_estimator, get_store
from busalert.api.v1.endpoints.websocket import manager
from busalert.db.redis_client import BusAlertStore
from busalert.models.requests import AlertScheduleRequest
from busalert.models.responses import AlertHistoryResponse, AlertScheduleResponse
from busalert.services.alert_service import AlertService, AsyncioNotificationScheduler
from busalert.services.distance_service import DistanceEstimator

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=AlertScheduleResponse)
async def schedule_alert(
    request: AlertScheduleRequest,
    store: BusAlertStore = Depends(get_store),
    estimator: DistanceEstimator = Depends(get_distance_estimator),
):
    """
    출발 알림 예약

    client_id의 WebSocket 연결로 알림 전달
    연결이 없으면 예약하지 않고 출발 시각 안내 메시지만 반환
    """
    scheduler = manager.get_scheduler(request.client_id) or AsyncioNotificationScheduler()

    stop = request.stop.to_domain()
    walking = await estimator.estimate_walking_route(request.origin.to_domain(), stop.coordinate)
    outcome = await AlertService(store, scheduler).schedule_departure_alert(
        stop, request.arrival.to_domain(), request.bus_choice, walking
    )

    logger.info(
        f"출발 알림 요청: client={request.client_id}, {stop.name}, "
        f"scheduled={outcome.scheduled}"
    )
    response = asdict(outcome)
    response["status"] = outcome.status.value
    return response


@router.get("/history", response_model=AlertHistoryResponse)
async def alert_history(store: BusAlertStore = Depends(get_store)):
    """알림 기록 (최신순, 최대 50개)"""
    items = store.get_alert_history()
    return {"count": len(items), "items": [asdict(item) for item in items]}


@router.delete("/history")
async def clear_alert_history(store: BusAlertStore = Depends(get_store)):
    if not store.clear_alert_history():
        raise HTTPException(status_code=503, detail="알림 기록 삭제 실패")
    return {"cleared": True}
