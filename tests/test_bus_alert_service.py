"""
BusAlertService (정류장 -> 도착 정보 흐름) 테스트
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from busalert.core.config import ApiCredentials
from busalert.models.domain import (
    ArrivalRecord,
    ArrivalResult,
    Coordinate,
    LookupStatus,
    PLACEHOLDER_SOURCE,
    Region,
    StopRef,
)
from busalert.services.bus_alert_service import BusAlertService
from busalert.services.geo_service import GeoService


@pytest.fixture
def directory():
    directory = MagicMock()
    directory.find_stop_by_name = AsyncMock(return_value=StopRef("121000012", "강남역", provider="bis"))
    return directory


@pytest.fixture
def aggregator():
    aggregator = MagicMock()
    aggregator.get_arrivals = AsyncMock(
        return_value=ArrivalResult(
            arrivals=[ArrivalRecord(route_id="R1", route_name="146", arrival_time=120)],
            source="bis",
        )
    )
    return aggregator


def _service(credentials, directory, aggregator):
    return BusAlertService(GeoService(MagicMock(), credentials), directory, aggregator)


class TestLookupArrivals:
    @pytest.mark.asyncio
    async def test_resolves_name_then_fetches(self, credentials, directory, aggregator, gangnam):
        lookup = await _service(credentials, directory, aggregator).lookup_arrivals(
            stop_name="강남역", coordinate=gangnam
        )

        assert lookup.status == LookupStatus.LIVE
        assert lookup.region == Region.SEOUL
        assert lookup.city_code == "11"
        assert lookup.stop.stop_id == "121000012"
        assert lookup.arrivals[0].route_name == "146"
        directory.find_stop_by_name.assert_awaited_once_with("강남역", Region.SEOUL)
        aggregator.get_arrivals.assert_awaited_once_with(lookup.stop, Region.SEOUL)

    @pytest.mark.asyncio
    async def test_stop_not_found_skips_arrivals(self, credentials, directory, aggregator):
        directory.find_stop_by_name.return_value = None

        lookup = await _service(credentials, directory, aggregator).lookup_arrivals(stop_name="없는정류장")

        assert lookup.status == LookupStatus.STOP_NOT_FOUND
        assert "없는정류장" in lookup.message
        aggregator.get_arrivals.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stop_id_skips_name_lookup(self, credentials, directory, aggregator):
        lookup = await _service(credentials, directory, aggregator).lookup_arrivals(
            stop_id="DJB8001793", stop_name="대전역", coordinate=Coordinate(36.3504, 127.3845)
        )

        assert lookup.region == Region.DAEJEON
        assert lookup.city_code == "30"
        directory.find_stop_by_name.assert_not_awaited()
        aggregator.get_arrivals.assert_awaited_once_with(
            StopRef("DJB8001793", "대전역"), Region.DAEJEON
        )

    @pytest.mark.asyncio
    async def test_placeholder_status(self, credentials, directory, aggregator):
        aggregator.get_arrivals.return_value = ArrivalResult(arrivals=[], source=PLACEHOLDER_SOURCE)

        lookup = await _service(credentials, directory, aggregator).lookup_arrivals(stop_id="1")

        assert lookup.status == LookupStatus.PLACEHOLDER

    @pytest.mark.asyncio
    async def test_unsupported_region(self, directory, aggregator):
        service = _service(ApiCredentials(regional_api_key="bis-key"), directory, aggregator)

        lookup = await service.lookup_arrivals(stop_name="부산역", coordinate=Coordinate(35.1796, 129.0756))

        assert lookup.status == LookupStatus.UNSUPPORTED_REGION
        assert lookup.region == Region.BUSAN
        assert lookup.message
        directory.find_stop_by_name.assert_not_awaited()
        aggregator.get_arrivals.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_requires_id_or_name(self, credentials, directory, aggregator):
        with pytest.raises(ValueError):
            await _service(credentials, directory, aggregator).lookup_arrivals()
