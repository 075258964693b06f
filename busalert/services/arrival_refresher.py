"""
선택한 정류장의 도착 정보 주기 갱신 (연결 1개당 1개)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from busalert.core.config import settings
from busalert.models.domain import ArrivalResult, Region, StopRef
from busalert.services.arrival_service import ArrivalAggregator

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[StopRef, ArrivalResult], Awaitable[None]]


@dataclass
class _Selection:
    stop_ref: StopRef
    region: Region
    on_update: UpdateCallback
    generation: int


class ArrivalRefresher:
    def __init__(
        self,
        aggregator: ArrivalAggregator,
        interval: int = settings.ARRIVAL_REFRESH_INTERVAL_SECONDS,
    ):
        self.aggregator = aggregator
        self.interval = interval
        self._selection: Optional[_Selection] = None
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def selected_stop(self) -> Optional[StopRef]:
        return self._selection.stop_ref if self._selection else None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def select(
        self,
        stop_ref: StopRef,
        region: Region,
        on_update: UpdateCallback,
        auto_refresh: bool = True,
    ) -> Optional[ArrivalResult]:
        """
        정류장 선택 => 이전 갱신 task 취소 후 즉시 조회,
        auto_refresh면 interval마다 다시 조회
        """
        await self.stop()

        self._generation += 1
        self._selection = _Selection(stop_ref, region, on_update, self._generation)

        result = await self._fetch_and_publish(self._selection)

        if auto_refresh and self._selection is not None and self._selection.generation == self._generation:
            self._task = asyncio.create_task(self._refresh_loop(self._selection))
            logger.debug(f"도착 정보 자동 갱신 시작: {stop_ref.name or stop_ref.stop_id}, {self.interval}초")

        return result

    async def refresh_now(self) -> Optional[ArrivalResult]:
        """사용자 요청 갱신, 선택된 정류장이 없으면 None"""
        if self._selection is None:
            return None
        return await self._fetch_and_publish(self._selection)

    async def _refresh_loop(self, selection: _Selection):
        try:
            while True:
                await asyncio.sleep(self.interval)
                try:
                    await self._fetch_and_publish(selection)
                except Exception as e:
                    logger.error(f"도착 정보 자동 갱신 오류: {e}", exc_info=True)
        except asyncio.CancelledError:
            logger.debug("도착 정보 자동 갱신 취소")

    async def _fetch_and_publish(self, selection: _Selection) -> Optional[ArrivalResult]:
        result = await self.aggregator.get_arrivals(selection.stop_ref, selection.region)

        # 조회하는 동안 다른 정류장이 선택됨 => 결과 버림
        if selection.generation != self._generation:
            logger.debug(f"이전 정류장 결과 무시: {selection.stop_ref.stop_id}")
            return None

        await selection.on_update(selection.stop_ref, result)
        return result

    async def stop(self):
        """갱신 중지 + 선택 해제"""
        self._generation += 1
        self._selection = None

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
