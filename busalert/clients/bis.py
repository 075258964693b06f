"""
BIS API (서울/경기 버스정보시스템) 클라이언트
TAGO보다 먼저 시도하는 지역 전용 provider, 응답은 XML
"""

import json
import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Tuple

from busalert.clients.base import PublicApiClient
from busalert.core.config import BIS_SUCCESS_CODE, REGIONAL_BIS_HOSTS, SEOUL_BIS_HOST
from busalert.core.exceptions import ProviderUnavailableException

logger = logging.getLogger(__name__)


class BisClient(PublicApiClient):
    provider_name = "bis"

    def _host(self, region: str) -> str:
        return REGIONAL_BIS_HOSTS.get(region, SEOUL_BIS_HOST)

    async def find_stations_by_name(self, region: str, station_name: str) -> List[Dict[str, str]]:
        return await self._request_items(
            f"{self._host(region)}/stationinfo/getStationByName",
            {"stSrch": station_name},
        )

    async def get_arrivals(self, region: str, station_id: str) -> List[Dict[str, str]]:
        """정류소별 도착 정보 (노선당 레코드 1개, 첫 번째/두 번째 버스 포함)"""
        return await self._request_items(
            f"{self._host(region)}/arrive/getArrInfoByStop",
            {"stId": station_id},
        )

    async def _request_items(self, url: str, params: Dict[str, Any]) -> List[Dict[str, str]]:
        api_key = self._require_credential()
        response = await self._get(url, {"serviceKey": api_key, **params})

        result_code, items = parse_service_result(response.text)
        if result_code != BIS_SUCCESS_CODE:
            # 결과 없음 등 => 빈 결과로 처리, 다음 provider로 넘어감
            logger.warning(f"BIS 응답 코드 {result_code}: {url}")
            return []
        return items


def parse_service_result(text: str) -> Tuple[Optional[str], List[Dict[str, str]]]:
    """
    BIS ServiceResult XML (또는 동일 구조의 JSON) -> (resultCode, itemList)

    <ServiceResult>
      <msgHeader><headerCd>0</headerCd>...</msgHeader>
      <msgBody><itemList><rtNm>146</rtNm>...</itemList>...</msgBody>
    </ServiceResult>
    """
    stripped = text.lstrip()
    if stripped.startswith("{"):
        return _parse_json_result(stripped)

    try:
        root = ET.fromstring(stripped)
    except ET.ParseError as e:
        raise ProviderUnavailableException(f"BIS XML 파싱 실패: {e}") from e

    if root.tag != "ServiceResult":
        raise ProviderUnavailableException(f"BIS 응답 형식 오류: root={root.tag}")

    header = root.find("msgHeader")
    if header is None:
        raise ProviderUnavailableException("BIS 응답에 msgHeader가 없습니다")

    result_code = header.findtext("resultCode") or header.findtext("headerCd")
    result_code = result_code.strip() if result_code else None

    items = [
        {child.tag: (child.text or "").strip() for child in item}
        for item in root.iterfind("msgBody/itemList")
    ]
    return result_code, items


def _parse_json_result(text: str) -> Tuple[Optional[str], List[Dict[str, str]]]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ProviderUnavailableException(f"BIS JSON 파싱 실패: {e}") from e

    result = payload.get("ServiceResult") or {}
    header = result.get("msgHeader") or {}
    result_code = header.get("resultCode", header.get("headerCd"))

    item_list = (result.get("msgBody") or {}).get("itemList") or []
    if isinstance(item_list, dict):
        item_list = [item_list]
    return (str(result_code) if result_code is not None else None), item_list
