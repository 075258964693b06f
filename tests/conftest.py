"""
Pytest 설정 및 공통 Fixture
"""

import os
import sys
from pathlib import Path
from typing import Callable, Dict
from unittest.mock import MagicMock

import httpx
import pytest

# 테스트 중에는 외부 API 키를 사용하지 않음 (모듈 임포트 전에 설정해야 함)
os.environ["KAKAO_REST_KEY"] = ""
os.environ["PUBLIC_DATA_API_KEY"] = ""
os.environ["REGIONAL_BIS_API_KEY"] = ""

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from busalert.core.config import ApiCredentials  # noqa: E402
from busalert.models.domain import ArrivalRecord, Coordinate, Stop  # noqa: E402


@pytest.fixture
def mock_redis_client():
    """dict 기반 Mock Redis 클라이언트 (get/set만 사용)"""
    data: Dict[str, str] = {}

    mock = MagicMock()
    mock.data = data
    mock.get.side_effect = lambda key: data.get(key)

    def _set(key, value):
        data[key] = value
        return True

    mock.set.side_effect = _set
    mock.ping.return_value = True
    return mock


@pytest.fixture
def credentials():
    return ApiCredentials(
        routing_api_key="kakao-key",
        national_transit_api_key="tago-key",
        regional_api_key="bis-key",
    )


@pytest.fixture
def no_credentials():
    return ApiCredentials()


@pytest.fixture
def gangnam():
    """강남역 좌표"""
    return Coordinate(37.4979, 127.0276)


@pytest.fixture
def sample_stop():
    return Stop(
        id="121000012",
        name="강남역",
        latitude=37.4979,
        longitude=127.0276,
        number="22001",
        address="서울특별시 강남구 강남대로 396",
    )


@pytest.fixture
def sample_arrival():
    return ArrivalRecord(
        route_id="100100118",
        route_name="146",
        route_type="간선버스",
        arrival_time=300,
        arrival_time2=900,
        location_no1=2,
        location_no2=6,
    )


@pytest.fixture
def make_http_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """handler(request) -> response 로 동작하는 httpx.AsyncClient"""

    def _make(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
