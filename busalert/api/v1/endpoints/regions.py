"""
지역 판별 / 도시 코드 REST API 엔드포인트
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from busalert.algorithms.region_classifier import city_code_of, region_name
from busalert.api.deps import get_geo_service
from busalert.models.responses import CityCodeListResponse, CityCodeResponse, RegionResponse
from busalert.services.geo_service import GeoService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/detect", response_model=RegionResponse)
async def detect_region(
    latitude: Optional[float] = Query(None, ge=-90, le=90, description="위도"),
    longitude: Optional[float] = Query(None, ge=-180, le=180, description="경도"),
    geo_service: GeoService = Depends(get_geo_service),
):
    """
    좌표 -> 지역 / TAGO 도시 코드

    좌표가 없거나 어느 지역에도 속하지 않으면 서울

    Example:
        GET /v1/regions/detect?latitude=35.1796&longitude=129.0756
    """
    region = geo_service.classify_region(latitude, longitude)
    return {
        "region": region.value,
        "region_name": region_name(region),
        "city_code": city_code_of(region),
        "support_message": geo_service.region_support_message(latitude, longitude),
    }


@router.get("/city-code", response_model=CityCodeResponse)
async def city_code_from_gps(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    geo_service: GeoService = Depends(get_geo_service),
):
    """GPS 근처 정류소 기준 도시 코드 (조회 실패 시 null)"""
    logger.info(f"GPS 도시코드 조회: ({latitude}, {longitude})")
    city_code = await geo_service.city_code_from_coordinate(latitude, longitude)
    return {"city_code": city_code}


@router.get("/city-codes", response_model=CityCodeListResponse)
async def list_city_codes(geo_service: GeoService = Depends(get_geo_service)):
    cities = await geo_service.list_city_codes()
    return {"count": len(cities), "cities": cities}
