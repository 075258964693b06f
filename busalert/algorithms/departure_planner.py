"""
출발 시간 계산

남은 시간 = 버스 도착 시간 - 도보 시간 - 여유 시간
여유 시간은 모든 호출 지점에서 같은 식으로 적용되며 호출자가 값을 지정한다.
"""

from datetime import datetime, timedelta
from typing import Optional

from busalert.core.config import settings
from busalert.models.domain import (
    ArrivalRecord,
    DepartureOutcome,
    DepartureStatus,
    WalkingRoute,
)

DEFAULT_MARGIN_SECONDS = settings.DEPARTURE_MARGIN_SECONDS


def plan_departure(
    arrival: ArrivalRecord,
    bus_choice: int,
    walking: Optional[WalkingRoute],
    margin_seconds: int = DEFAULT_MARGIN_SECONDS,
) -> DepartureOutcome:
    """
    Args:
        arrival: 선택한 노선의 도착 정보
        bus_choice: 1 (첫 번째 버스) / 2 (두 번째 버스)
        walking: 도보 경로 추정값 (아직 없으면 None)
        margin_seconds: 출발 여유 시간 (초)

    Raises:
        ValueError: bus_choice가 1, 2가 아니거나 margin이 음수일 때
    """
    if bus_choice not in (1, 2):
        raise ValueError(f"bus_choice는 1 또는 2여야 합니다: {bus_choice}")
    if margin_seconds < 0:
        raise ValueError(f"margin_seconds는 0 이상이어야 합니다: {margin_seconds}")

    if walking is None:
        return DepartureOutcome.unknown()

    arrival_time = arrival.arrival_time_of(bus_choice)
    if arrival_time is None:
        # 두 번째 버스 정보 없음
        return DepartureOutcome.unknown()

    depart_in = arrival_time - walking.duration - margin_seconds
    if depart_in <= 0:
        return DepartureOutcome.too_late()

    return DepartureOutcome.depart(depart_in)


def leave_by(outcome: DepartureOutcome, now: Optional[datetime] = None) -> Optional[datetime]:
    """Depart 결과 -> 출발해야 하는 시각"""
    if outcome.status != DepartureStatus.DEPART:
        return None
    now = now or datetime.now()
    return now + timedelta(seconds=outcome.depart_in_seconds)
