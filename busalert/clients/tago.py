"""
TAGO API (국가대중교통정보센터) 클라이언트
전국 정류소/도착 정보 조회
"""

import logging
from typing import Any, Dict, List

from busalert.clients.base import PublicApiClient
from busalert.core.config import TAGO_HOST, TAGO_SUCCESS_CODE
from busalert.core.exceptions import ProviderUnavailableException

logger = logging.getLogger(__name__)


class TagoClient(PublicApiClient):
    provider_name = "tago"

    STATION_SERVICE = f"{TAGO_HOST}/BusSttnInfoInqireService"
    ARRIVAL_SERVICE = f"{TAGO_HOST}/ArvlInfoInqireService"

    async def find_stations_by_name(
        self, city_code: str, station_name: str, num_of_rows: int = 10
    ) -> List[Dict[str, Any]]:
        """정류소명 검색 (getSttnNoList)"""
        return await self._request_items(
            f"{self.STATION_SERVICE}/getSttnNoList",
            {
                "cityCode": city_code,
                "nodeNm": station_name,
                "numOfRows": num_of_rows,
                "pageNo": 1,
            },
        )

    async def get_arrivals(self, city_code: str, node_id: str) -> List[Dict[str, Any]]:
        """정류소별 도착 예정 정보 (버스 1대당 레코드 1개)"""
        return await self._request_items(
            f"{self.ARRIVAL_SERVICE}/getSttnAcctoArvlPrearngeInfoList",
            {"cityCode": city_code, "nodeId": node_id},
        )

    async def find_nearby_stations(
        self, latitude: float, longitude: float, num_of_rows: int = 50
    ) -> List[Dict[str, Any]]:
        """GPS 좌표 기반 근접 정류소 (반경 500m, 정류소마다 citycode 포함)"""
        return await self._request_items(
            f"{self.STATION_SERVICE}/getCrdntPrxmtSttnList",
            {
                "gpsLati": latitude,
                "gpsLong": longitude,
                "numOfRows": num_of_rows,
                "pageNo": 1,
            },
        )

    async def get_city_codes(self) -> List[Dict[str, Any]]:
        return await self._request_items(f"{self.STATION_SERVICE}/getCtyCodeList", {})

    async def _request_items(self, url: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        api_key = self._require_credential()
        payload = await self._get_json(
            url, {"serviceKey": api_key, "_type": "json", **params}
        )
        return extract_items(payload)


def extract_items(payload: Any) -> List[Dict[str, Any]]:
    """
    TAGO JSON envelope -> item 리스트

    resultCode가 "00"이 아니면 provider 실패
    item이 1개일 때는 list가 아닌 dict로 내려옴
    """
    response = payload.get("response", {}) if isinstance(payload, dict) else {}
    header = response.get("header") or {}
    result_code = str(header.get("resultCode", ""))

    if result_code != TAGO_SUCCESS_CODE:
        raise ProviderUnavailableException(
            f"TAGO 응답 오류: resultCode={result_code or 'missing'}, "
            f"resultMsg={header.get('resultMsg')}"
        )

    body = response.get("body") or {}
    items = body.get("items")
    # 결과가 없으면 items가 빈 문자열로 내려옴
    if not isinstance(items, dict):
        return []

    item = items.get("item")
    if item is None:
        return []
    if isinstance(item, dict):
        return [item]
    return [entry for entry in item if isinstance(entry, dict)]
