"""
도보 시간 / 출발 시간 계산 REST API 엔드포인트
"""

import logging
from math import ceil

from fastapi import APIRouter, Depends, HTTPException

from busalert.algorithms.departure_planner import leave_by, plan_departure
from busalert.api.deps import get_distance_estimator
from busalert.core.config import WALKING_SPEED, settings
from busalert.models.domain import WalkingRoute
from busalert.models.requests import DeparturePlanRequest, WalkingEstimateRequest
from busalert.models.responses import DeparturePlanResponse, WalkingRouteResponse
from busalert.services.distance_service import DistanceEstimator

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/walking", response_model=WalkingRouteResponse)
async def estimate_walking(
    request: WalkingEstimateRequest,
    estimator: DistanceEstimator = Depends(get_distance_estimator),
):
    """현재 위치 -> 정류장 도보 거리/시간"""
    route = await estimator.estimate_walking_route(
        request.origin.to_domain(), request.destination.to_domain()
    )
    return {"distance": route.distance, "duration": route.duration}


@router.post("/plan", response_model=DeparturePlanResponse)
async def plan(
    request: DeparturePlanRequest,
    estimator: DistanceEstimator = Depends(get_distance_estimator),
):
    """
    출발까지 남은 시간

    도보 시간 우선순위: walking_duration > origin/stop 좌표로 추정 > 없음(unknown)
    """
    margin_seconds = (
        request.margin_seconds
        if request.margin_seconds is not None
        else settings.DEPARTURE_MARGIN_SECONDS
    )

    walking = None
    if request.walking_duration is not None:
        walking = WalkingRoute(
            distance=float(ceil(request.walking_duration * WALKING_SPEED)),
            duration=request.walking_duration,
        )
    elif request.origin is not None and request.stop is not None:
        walking = await estimator.estimate_walking_route(
            request.origin.to_domain(), request.stop.to_domain()
        )

    try:
        outcome = plan_departure(
            request.arrival.to_domain(), request.bus_choice, walking, margin_seconds
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    departure_at = leave_by(outcome)
    return {
        "status": outcome.status.value,
        "depart_in_seconds": outcome.depart_in_seconds,
        "leave_by": departure_at.isoformat() if departure_at else None,
        "margin_seconds": margin_seconds,
        "walking": (
            {"distance": walking.distance, "duration": walking.duration} if walking else None
        ),
    }
