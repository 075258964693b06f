"""
ArrivalRefresher 테스트 (정류장 선택, 자동 갱신 취소, 이전 결과 무시)
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from busalert.models.domain import ArrivalResult, Region, StopRef
from busalert.services.arrival_refresher import ArrivalRefresher

GANGNAM = StopRef("121000012", "강남역")
YEOKSAM = StopRef("121000013", "역삼역")


@pytest.fixture
def aggregator():
    aggregator = MagicMock()
    aggregator.get_arrivals = AsyncMock(return_value=ArrivalResult(arrivals=[], source="bis"))
    return aggregator


class TestArrivalRefresher:
    @pytest.mark.asyncio
    async def test_select_fetches_immediately(self, aggregator):
        refresher = ArrivalRefresher(aggregator, interval=60)
        on_update = AsyncMock()

        result = await refresher.select(GANGNAM, Region.SEOUL, on_update)

        assert result.source == "bis"
        on_update.assert_awaited_once_with(GANGNAM, result)
        assert refresher.is_running
        await refresher.stop()

    @pytest.mark.asyncio
    async def test_periodic_refresh(self, aggregator):
        refresher = ArrivalRefresher(aggregator, interval=0.01)
        on_update = AsyncMock()

        await refresher.select(GANGNAM, Region.SEOUL, on_update)
        await asyncio.sleep(0.05)
        await refresher.stop()

        assert on_update.await_count >= 2

    @pytest.mark.asyncio
    async def test_new_selection_cancels_previous_task(self, aggregator):
        refresher = ArrivalRefresher(aggregator, interval=60)

        await refresher.select(GANGNAM, Region.SEOUL, AsyncMock())
        first_task = refresher._task
        await refresher.select(YEOKSAM, Region.SEOUL, AsyncMock())

        assert first_task.done()
        assert refresher.selected_stop == YEOKSAM
        await refresher.stop()

    @pytest.mark.asyncio
    async def test_auto_refresh_disabled(self, aggregator):
        refresher = ArrivalRefresher(aggregator, interval=60)

        await refresher.select(GANGNAM, Region.SEOUL, AsyncMock(), auto_refresh=False)

        assert not refresher.is_running

    @pytest.mark.asyncio
    async def test_refresh_now_without_selection(self, aggregator):
        assert await ArrivalRefresher(aggregator).refresh_now() is None

    @pytest.mark.asyncio
    async def test_stale_refresh_dropped(self, aggregator):
        """갱신 중에 다른 정류장을 선택하면 이전 정류장 결과는 버림"""
        refresher = ArrivalRefresher(aggregator, interval=60)
        gangnam_updates = AsyncMock()
        await refresher.select(GANGNAM, Region.SEOUL, gangnam_updates, auto_refresh=False)

        release = asyncio.Event()

        async def slow_fetch(stop_ref, region):
            await release.wait()
            return ArrivalResult(arrivals=[], source="tago")

        aggregator.get_arrivals = AsyncMock(side_effect=slow_fetch)
        pending = asyncio.create_task(refresher.refresh_now())
        await asyncio.sleep(0)

        aggregator.get_arrivals = AsyncMock(return_value=ArrivalResult(arrivals=[], source="bis"))
        await refresher.select(YEOKSAM, Region.SEOUL, AsyncMock(), auto_refresh=False)
        release.set()

        assert await pending is None
        assert gangnam_updates.await_count == 1

    @pytest.mark.asyncio
    async def test_stop_clears_selection(self, aggregator):
        refresher = ArrivalRefresher(aggregator, interval=60)
        await refresher.select(GANGNAM, Region.SEOUL, AsyncMock())

        await refresher.stop()

        assert refresher.selected_stop is None
        assert not refresher.is_running
        assert await refresher.refresh_now() is None
