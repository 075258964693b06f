import logging

from busalert.algorithms.distance_calculator import (
    great_circle_distance,
    walking_route_from_distance,
)
from busalert.clients.kakao import KakaoClient
from busalert.core.exceptions import BusAlertException
from busalert.models.domain import Coordinate, WalkingRoute

logger = logging.getLogger(__name__)


class DistanceEstimator:
    """현재 위치 -> 정류장 도보 시간 추정"""

    def __init__(self, kakao_client: KakaoClient):
        self.kakao_client = kakao_client

    def great_circle_distance(self, a: Coordinate, b: Coordinate) -> float:
        return great_circle_distance(a, b)

    async def estimate_walking_route(
        self, origin: Coordinate, destination: Coordinate
    ) -> WalkingRoute:
        """
        카카오 자동차 경로 거리를 도보 거리로 사용
        API 실패 시 하버사인 직선 거리로 계산 (호출자는 두 경우를 구분하지 않음)
        """
        if self.kakao_client.has_credential:
            try:
                distance = await self.kakao_client.route_distance(origin, destination)
                return walking_route_from_distance(distance)
            except BusAlertException as e:
                logger.warning(f"카카오 길찾기 실패, 직선 거리로 계산: {e.message}")
            except Exception as e:
                logger.error(f"길찾기 처리 중 예상치 못한 오류: {e}", exc_info=True)
        else:
            logger.debug("카카오 API 키 없음 => 직선 거리로 계산")

        return walking_route_from_distance(great_circle_distance(origin, destination))
