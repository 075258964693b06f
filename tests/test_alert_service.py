"""
출발 알림 예약 테스트
"""

import asyncio
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from busalert.db.redis_client import BusAlertStore
from busalert.models.domain import ArrivalRecord, DepartureStatus, WalkingRoute
from busalert.services.alert_service import (
    ALERT_TITLE,
    AlertService,
    AsyncioNotificationScheduler,
)

NOW = datetime(2025, 1, 1, 8, 0, 0)


@pytest.fixture
def store(mock_redis_client):
    return BusAlertStore(mock_redis_client)


@pytest.fixture
def scheduler():
    scheduler = MagicMock()
    scheduler.schedule_one_shot = AsyncMock(return_value="notification-1")
    return scheduler


class TestAsyncioNotificationScheduler:
    @pytest.mark.asyncio
    async def test_without_channel_returns_false(self):
        assert await AsyncioNotificationScheduler().schedule_one_shot("t", "b", 10) is False

    @pytest.mark.asyncio
    async def test_delivers_after_delay(self):
        deliver = AsyncMock()
        scheduler = AsyncioNotificationScheduler(deliver)

        notification_id = await scheduler.schedule_one_shot("제목", "본문", 0)
        await asyncio.sleep(0.05)

        assert isinstance(notification_id, str)
        deliver.assert_awaited_once_with("제목", "본문")
        assert scheduler.pending_count == 0

    @pytest.mark.asyncio
    async def test_cancel(self):
        deliver = AsyncMock()
        scheduler = AsyncioNotificationScheduler(deliver)

        notification_id = await scheduler.schedule_one_shot("제목", "본문", 60)

        assert await scheduler.cancel(notification_id) is True
        assert await scheduler.cancel(notification_id) is False
        deliver.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cancel_all(self):
        scheduler = AsyncioNotificationScheduler(AsyncMock())
        await scheduler.schedule_one_shot("a", "b", 60)
        await scheduler.schedule_one_shot("c", "d", 60)

        await scheduler.cancel_all()

        assert scheduler.pending_count == 0

    @pytest.mark.asyncio
    async def test_negative_delay(self):
        with pytest.raises(ValueError):
            await AsyncioNotificationScheduler(AsyncMock()).schedule_one_shot("a", "b", -1)


class TestAlertService:
    @pytest.mark.asyncio
    async def test_schedules_with_stored_margin(self, store, scheduler, sample_stop, sample_arrival):
        """300 - 120 - 60(기본 1분) = 120초 후"""
        outcome = await AlertService(store, scheduler).schedule_departure_alert(
            sample_stop, sample_arrival, 1, WalkingRoute(distance=133, duration=120), now=NOW
        )

        assert outcome.scheduled is True
        assert outcome.notification_id == "notification-1"
        assert outcome.depart_in_seconds == 120
        assert outcome.departure_time == "08:02"
        scheduler.schedule_one_shot.assert_awaited_once_with(
            ALERT_TITLE, "146 버스를 타기 위해 지금 출발하세요!", 120
        )

        history = store.get_alert_history()
        assert len(history) == 1
        assert history[0].bus_stop_name == "강남역"
        assert history[0].departure_time == "08:02"
        assert history[0].id.startswith("121000012-100100118-")

    @pytest.mark.asyncio
    async def test_margin_from_settings(self, store, scheduler, sample_stop, sample_arrival):
        store.save_settings(alert_advance_minutes=2)

        outcome = await AlertService(store, scheduler).schedule_departure_alert(
            sample_stop, sample_arrival, 1, WalkingRoute(distance=133, duration=120), now=NOW
        )

        assert outcome.depart_in_seconds == 60

    @pytest.mark.asyncio
    async def test_too_late_not_scheduled(self, store, scheduler, sample_stop, sample_arrival):
        outcome = await AlertService(store, scheduler).schedule_departure_alert(
            sample_stop, sample_arrival, 1, WalkingRoute(distance=300, duration=270), now=NOW
        )

        assert outcome.scheduled is False
        assert outcome.status == DepartureStatus.TOO_LATE
        scheduler.schedule_one_shot.assert_not_awaited()
        assert store.get_alert_history() == []

    @pytest.mark.asyncio
    async def test_unknown_when_second_bus_missing(self, store, scheduler, sample_stop):
        arrival = ArrivalRecord(route_id="R1", route_name="146", arrival_time=600)

        outcome = await AlertService(store, scheduler).schedule_departure_alert(
            sample_stop, arrival, 2, WalkingRoute(distance=100, duration=90), now=NOW
        )

        assert outcome.status == DepartureStatus.UNKNOWN
        assert outcome.scheduled is False

    @pytest.mark.asyncio
    async def test_restricted_scheduler_fallback_message(self, store, sample_stop, sample_arrival):
        outcome = await AlertService(store, AsyncioNotificationScheduler()).schedule_departure_alert(
            sample_stop, sample_arrival, 1, WalkingRoute(distance=133, duration=120), now=NOW
        )

        assert outcome.scheduled is False
        assert outcome.status == DepartureStatus.DEPART
        assert outcome.message == "146 버스를 타기 위해 08:02에 출발하세요!"
        assert store.get_alert_history() == []
