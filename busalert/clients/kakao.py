"""
카카오 로컬 / 길찾기 API 클라이언트
"""

import logging
from typing import Any, Dict, List, Optional

from busalert.clients.base import PublicApiClient
from busalert.core.config import KAKAO_HOST, DEFAULT_PAGE_SIZE
from busalert.core.exceptions import ProviderUnavailableException
from busalert.models.domain import Coordinate

logger = logging.getLogger(__name__)

# 카카오모빌리티 자동차 길찾기 (도보 길찾기 API 없음)
KAKAO_NAVI_HOST = "https://apis-navi.kakaomobility.com"


class KakaoClient(PublicApiClient):
    provider_name = "kakao"

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"KakaoAK {self._require_credential()}"}

    async def search_keyword(
        self,
        query: str,
        category_group_code: Optional[str] = None,
        center: Optional[Coordinate] = None,
        radius: Optional[int] = None,
        size: int = DEFAULT_PAGE_SIZE,
        sort_by_distance: bool = False,
    ) -> List[Dict[str, Any]]:
        """키워드 장소 검색 => documents"""
        params: Dict[str, Any] = {
            "query": query,
            "category_group_code": category_group_code,
            "size": size,
        }
        if center is not None:
            params["x"] = center.longitude
            params["y"] = center.latitude
            params["radius"] = radius
        if sort_by_distance:
            params["sort"] = "distance"

        payload = await self._get_json(
            f"{KAKAO_HOST}/v2/local/search/keyword.json", params, self._headers()
        )
        documents = payload.get("documents") if isinstance(payload, dict) else None
        if not isinstance(documents, list):
            raise ProviderUnavailableException("카카오 검색 응답에 documents가 없습니다")
        return documents

    async def route_distance(self, origin: Coordinate, destination: Coordinate) -> float:
        """
        자동차 경로 거리(m)

        카카오 API는 "경도,위도" 순서
        """
        payload = await self._get_json(
            f"{KAKAO_NAVI_HOST}/v1/directions",
            {
                "origin": f"{origin.longitude},{origin.latitude}",
                "destination": f"{destination.longitude},{destination.latitude}",
            },
            self._headers(),
        )

        try:
            distance = payload["routes"][0]["summary"]["distance"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderUnavailableException(
                f"카카오 길찾기 응답에 경로 거리가 없습니다: {e}"
            ) from e

        if not isinstance(distance, (int, float)) or isinstance(distance, bool) or distance < 0:
            raise ProviderUnavailableException(f"카카오 길찾기 거리 값 오류: {distance}")
        return float(distance)
