"""
서비스 인스턴스 (싱글톤)

엔드포인트는 Depends(get_...)로 주입받고, 테스트는 dependency_overrides로 교체
"""

from functools import lru_cache

import httpx

from busalert.clients.bis import BisClient
from busalert.clients.kakao import KakaoClient
from busalert.clients.tago import TagoClient
from busalert.core.config import ApiCredentials, settings
from busalert.db.redis_client import BusAlertStore, init_store
from busalert.services.arrival_service import (
    ArrivalAggregator,
    BisArrivalProvider,
    TagoArrivalProvider,
)
from busalert.services.bus_alert_service import BusAlertService
from busalert.services.distance_service import DistanceEstimator
from busalert.services.geo_service import GeoService
from busalert.services.stop_directory_service import StopDirectory


@lru_cache()
def get_credentials() -> ApiCredentials:
    return settings.credentials


@lru_cache()
def get_http_client() -> httpx.AsyncClient:
    """애플리케이션 전체에서 공유, lifespan 종료 시 close"""
    return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)


@lru_cache()
def get_store() -> BusAlertStore:
    return init_store()


@lru_cache()
def get_kakao_client() -> KakaoClient:
    return KakaoClient(get_http_client(), get_credentials().routing_api_key)


@lru_cache()
def get_tago_client() -> TagoClient:
    return TagoClient(get_http_client(), get_credentials().national_transit_api_key)


@lru_cache()
def get_bis_client() -> BisClient:
    return BisClient(get_http_client(), get_credentials().regional_api_key)


@lru_cache()
def get_geo_service() -> GeoService:
    return GeoService(get_tago_client(), get_credentials())


@lru_cache()
def get_distance_estimator() -> DistanceEstimator:
    return DistanceEstimator(get_kakao_client())


@lru_cache()
def get_stop_directory() -> StopDirectory:
    return StopDirectory(get_bis_client(), get_tago_client(), get_kakao_client())


@lru_cache()
def get_arrival_aggregator() -> ArrivalAggregator:
    directory = get_stop_directory()
    return ArrivalAggregator(
        [
            BisArrivalProvider(get_bis_client(), directory),
            TagoArrivalProvider(get_tago_client(), directory),
        ]
    )


@lru_cache()
def get_bus_alert_service() -> BusAlertService:
    return BusAlertService(get_geo_service(), get_stop_directory(), get_arrival_aggregator())
