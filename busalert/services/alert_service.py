"""
출발 알림 예약

알림 전달 채널(WebSocket)이 없으면 예약 불가 => 출발 시각 안내 메시지만 반환
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Dict, Optional, Protocol, Union

from busalert.algorithms.departure_planner import leave_by, plan_departure
from busalert.db.redis_client import BusAlertStore
from busalert.models.domain import (
    AlertHistoryItem,
    ArrivalRecord,
    DepartureStatus,
    Stop,
    WalkingRoute,
)

logger = logging.getLogger(__name__)

ALERT_TITLE = "🚌 버스 출발 시간"

DeliverCallback = Callable[[str, str], Awaitable[None]]


class NotificationScheduler(Protocol):
    async def schedule_one_shot(
        self, title: str, body: str, delay_seconds: int
    ) -> Union[str, bool]:
        """예약 ID, 예약할 수 없으면 False"""
        ...

    async def cancel(self, notification_id: str) -> bool:
        ...

    async def cancel_all(self) -> None:
        ...


class AsyncioNotificationScheduler:
    """asyncio task로 delay 후 deliver 콜백 호출"""

    def __init__(self, deliver: Optional[DeliverCallback] = None):
        self.deliver = deliver
        self._tasks: Dict[str, asyncio.Task] = {}

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    async def schedule_one_shot(
        self, title: str, body: str, delay_seconds: int
    ) -> Union[str, bool]:
        if self.deliver is None:
            logger.info("알림 전달 채널 없음 => 예약하지 않음")
            return False
        if delay_seconds < 0:
            raise ValueError(f"delay_seconds는 0 이상이어야 합니다: {delay_seconds}")

        notification_id = str(uuid.uuid4())
        self._tasks[notification_id] = asyncio.create_task(
            self._fire(notification_id, title, body, delay_seconds)
        )
        logger.debug(f"알림 예약: {notification_id}, {delay_seconds}초 후")
        return notification_id

    async def _fire(self, notification_id: str, title: str, body: str, delay_seconds: int):
        try:
            await asyncio.sleep(delay_seconds)
            await self.deliver(title, body)
            logger.info(f"알림 전송: {notification_id}")
        except asyncio.CancelledError:
            logger.debug(f"알림 취소: {notification_id}")
        except Exception as e:
            logger.error(f"알림 전송 실패: {notification_id}, 오류: {e}", exc_info=True)
        finally:
            self._tasks.pop(notification_id, None)

    async def cancel(self, notification_id: str) -> bool:
        task = self._tasks.pop(notification_id, None)
        if task is None:
            return False
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        return True

    async def cancel_all(self) -> None:
        for notification_id in list(self._tasks):
            await self.cancel(notification_id)


@dataclass
class AlertOutcome:
    scheduled: bool
    status: DepartureStatus
    message: str
    notification_id: Optional[str] = None
    depart_in_seconds: Optional[int] = None
    departure_time: Optional[str] = None  # HH:MM


class AlertService:
    def __init__(self, store: BusAlertStore, scheduler: NotificationScheduler):
        self.store = store
        self.scheduler = scheduler

    async def schedule_departure_alert(
        self,
        stop: Stop,
        arrival: ArrivalRecord,
        bus_choice: int,
        walking: Optional[WalkingRoute],
        now: Optional[datetime] = None,
    ) -> AlertOutcome:
        """
        저장된 설정의 여유 시간으로 출발 시각 계산 후 알림 예약

        Returns:
            AlertOutcome (예약 성공 시 알림 기록 저장)
        """
        now = now or datetime.now()
        margin_seconds = self.store.get_settings().margin_seconds
        outcome = plan_departure(arrival, bus_choice, walking, margin_seconds)

        if outcome.status == DepartureStatus.UNKNOWN:
            return AlertOutcome(
                scheduled=False,
                status=outcome.status,
                message="출발 시간을 계산할 수 없습니다.",
            )
        if outcome.status == DepartureStatus.TOO_LATE:
            return AlertOutcome(
                scheduled=False,
                status=outcome.status,
                message="이미 출발 시간이 지났습니다.",
            )

        departure_time = leave_by(outcome, now).strftime("%H:%M")
        notification_id = await self.scheduler.schedule_one_shot(
            ALERT_TITLE,
            f"{arrival.route_name} 버스를 타기 위해 지금 출발하세요!",
            outcome.depart_in_seconds,
        )

        if notification_id is False:
            return AlertOutcome(
                scheduled=False,
                status=outcome.status,
                message=f"{arrival.route_name} 버스를 타기 위해 {departure_time}에 출발하세요!",
                depart_in_seconds=outcome.depart_in_seconds,
                departure_time=departure_time,
            )

        self.store.add_alert_history(
            AlertHistoryItem(
                id=f"{stop.id}-{arrival.route_id}-{int(now.timestamp() * 1000)}",
                bus_stop_name=stop.name,
                route_name=arrival.route_name,
                alert_time=now.isoformat(),
                departure_time=departure_time,
            )
        )
        logger.info(f"출발 알림 예약: {stop.name} {arrival.route_name} -> {departure_time}")

        return AlertOutcome(
            scheduled=True,
            status=outcome.status,
            message="출발 시간에 알림을 받으실 수 있습니다.",
            notification_id=notification_id,
            depart_in_seconds=outcome.depart_in_seconds,
            departure_time=departure_time,
        )
