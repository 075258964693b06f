import os
from dataclasses import dataclass
from typing import Dict, Optional
from dotenv import load_dotenv

load_dotenv()  # 환경변수 읽어오기


@dataclass(frozen=True)
class ApiCredentials:
    """외부 API 인증키 묶음 => 서비스 생성자에 명시적으로 주입"""

    routing_api_key: Optional[str] = None  # 카카오 REST 키 (길찾기, 장소 검색)
    national_transit_api_key: Optional[str] = None  # 공공데이터포털 TAGO
    regional_api_key: Optional[str] = None  # 서울/경기 BIS


def _optional_env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name, default)
    return value or None  # 빈 문자열 => 키 없음


class Settings:
    PROJECT_NAME: str = "BusAlert Backend"
    VERSION: str = "1.2.0"

    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    PORT: int = int(os.getenv("PORT", 8001))

    # 외부 API 키
    KAKAO_REST_KEY: Optional[str] = _optional_env("KAKAO_REST_KEY")
    PUBLIC_DATA_API_KEY: Optional[str] = _optional_env("PUBLIC_DATA_API_KEY")
    # 공공데이터포털 통합 인증키를 서울/경기 BIS에도 그대로 사용
    REGIONAL_BIS_API_KEY: Optional[str] = _optional_env(
        "REGIONAL_BIS_API_KEY", os.getenv("PUBLIC_DATA_API_KEY")
    )

    # 외부 호출 타임아웃 (초) => 타임아웃은 provider 실패로 취급
    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", 10))

    # 도착 정보 자동 갱신 주기 (초)
    ARRIVAL_REFRESH_INTERVAL_SECONDS: float = float(
        os.getenv("ARRIVAL_REFRESH_INTERVAL_SECONDS", 30)
    )

    # 출발 여유 시간 (초)
    DEPARTURE_MARGIN_SECONDS: int = int(os.getenv("DEPARTURE_MARGIN_SECONDS", 60))

    REDIS_HOST: str = os.getenv("REDIS_HOST", "redis")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", 6379))
    REDIS_DB: int = int(os.getenv("REDIS_DB", 0))

    # CORS 설정
    ALLOWED_ORIGINS: list[str] = os.getenv(
        "ALLOWED_ORIGINS",
        "http://localhost:3000,http://localhost:8081,http://127.0.0.1:8081",
    ).split(",")

    @property
    def credentials(self) -> ApiCredentials:
        return ApiCredentials(
            routing_api_key=self.KAKAO_REST_KEY,
            national_transit_api_key=self.PUBLIC_DATA_API_KEY,
            regional_api_key=self.REGIONAL_BIS_API_KEY,
        )


settings = Settings()  # 모듈화


# ========== 외부 API 호스트 ==========

KAKAO_HOST = "https://dapi.kakao.com"
# 카카오에는 버스정류장 카테고리 코드가 없음 (SW8은 지하철역) => 키워드로 검색
BUS_STOP_KEYWORD = "버스정류장"
DEFAULT_PAGE_SIZE = 15

# 국가대중교통정보센터(TAGO) API (전국)
TAGO_HOST = "https://apis.data.go.kr/1613000"
TAGO_SUCCESS_CODE = "00"

# 서울시 버스정보시스템 API
SEOUL_BIS_HOST = "http://ws.bus.go.kr/api/rest"
BIS_SUCCESS_CODE = "0"

# 지역별 BIS 호스트 (서울, 경기만 사용 => 나머지 지역은 TAGO)
REGIONAL_BIS_HOSTS: Dict[str, str] = {
    "seoul": SEOUL_BIS_HOST,
    "gyeonggi": "http://apis.data.go.kr/6410000",
}

# ========== 도보/거리 ==========

# 평균 도보 속도: 4km/h = 1.11m/s
WALKING_SPEED = 1.11

# 근처 정류장 기본 반경(m) <- TAGO 근접 정류소 API 반경과 동일
DEFAULT_NEARBY_RADIUS = 500

# ========== 지역/도시코드 ==========

# TAGO 도시 코드
CITY_CODES: Dict[str, str] = {
    "seoul": "11",
    "busan": "26",
    "daegu": "27",
    "incheon": "28",
    "gwangju": "29",
    "daejeon": "30",
    "ulsan": "31",
    "gyeonggi": "41",
    "gangwon": "42",
    "chungbuk": "43",
    "chungnam": "44",
    "jeonbuk": "45",
    "jeonnam": "46",
    "gyeongbuk": "47",
    "gyeongnam": "48",
    "jeju": "50",
}
DEFAULT_CITY_CODE = "11"

REGION_NAMES: Dict[str, str] = {
    "seoul": "서울특별시",
    "gyeonggi": "경기도",
    "busan": "부산광역시",
    "incheon": "인천광역시",
    "daegu": "대구광역시",
    "gwangju": "광주광역시",
    "daejeon": "대전광역시",
}
DEFAULT_REGION_NAME = "서울특별시"

# ========== 노선 정렬 ==========

# 노선 유형별 정렬 우선순위 (광역 > 간선 > 지선 > 순환 > 좌석 > 마을/공영)
ROUTE_TYPE_PRIORITY: Dict[str, int] = {
    "광역버스": 1,
    "광역급행버스": 1,
    "간선버스": 2,
    "간선급행버스": 2,
    "지선버스": 3,
    "지선급행버스": 3,
    "순환버스": 4,
    "좌석버스": 5,
    "마을버스": 6,
    "공영버스": 6,
}
UNKNOWN_ROUTE_TYPE_PRIORITY = 99

# 서울 BIS routeType 코드 => TAGO 노선유형 이름
BIS_ROUTE_TYPES: Dict[str, str] = {
    "0": "공용버스",
    "1": "공항버스",
    "2": "마을버스",
    "3": "간선버스",
    "4": "지선버스",
    "5": "순환버스",
    "6": "광역버스",
    "7": "인천버스",
    "8": "경기버스",
}

# 저상버스 표기
LOW_FLOOR_VEHICLE_LABEL = "저상버스"
LOW_FLOOR_MARKER = "1"
