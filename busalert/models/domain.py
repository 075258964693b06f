from enum import Enum
from typing import List, Optional
from dataclasses import dataclass, field, asdict

# domain 정의


class Region(str, Enum):
    SEOUL = "seoul"
    BUSAN = "busan"
    DAEGU = "daegu"
    INCHEON = "incheon"
    GWANGJU = "gwangju"
    DAEJEON = "daejeon"
    ULSAN = "ulsan"
    GYEONGGI = "gyeonggi"
    GANGWON = "gangwon"
    CHUNGBUK = "chungbuk"
    CHUNGNAM = "chungnam"
    JEONBUK = "jeonbuk"
    JEONNAM = "jeonnam"
    GYEONGBUK = "gyeongbuk"
    GYEONGNAM = "gyeongnam"
    JEJU = "jeju"


DEFAULT_REGION = Region.SEOUL


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


@dataclass(frozen=True)
class Stop:
    id: str  # provider 기준 ID (카카오 ID != TAGO ID)
    name: str
    latitude: float
    longitude: float
    number: Optional[str] = None
    address: Optional[str] = None
    distance: Optional[float] = None  # 조회 좌표로부터의 거리 (미터)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class StopRef:
    """이름 -> 정류장 ID 조회 결과"""

    stop_id: str
    name: Optional[str] = None
    number: Optional[str] = None
    provider: Optional[str] = None  # "bis" / "tago" / None(호출자 제공)


@dataclass(frozen=True)
class BusSighting:
    """provider가 보고한 버스 1대 (노선별 그룹화 이전)"""

    route_id: str
    route_name: str
    arrival_time: int  # 초, 음수 => 운행종료
    route_type: Optional[str] = None
    stops_away: Optional[int] = None
    vehicle_type: Optional[str] = None
    low_floor: bool = False


@dataclass
class ArrivalRecord:
    route_id: str
    route_name: str
    arrival_time: int  # 첫 번째 버스 도착까지 남은 시간 (초)
    route_type: Optional[str] = None
    arrival_time2: Optional[int] = None
    location_no1: Optional[int] = None  # 남은 정류장 수
    location_no2: Optional[int] = None
    vehicle_type1: Optional[str] = None
    vehicle_type2: Optional[str] = None
    low_plate: bool = False

    def arrival_time_of(self, bus_choice: int) -> Optional[int]:
        return self.arrival_time if bus_choice == 1 else self.arrival_time2

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class WalkingRoute:
    distance: float  # 미터
    duration: int  # 초


class DepartureStatus(str, Enum):
    DEPART = "depart"
    TOO_LATE = "too_late"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DepartureOutcome:
    status: DepartureStatus
    depart_in_seconds: Optional[int] = None

    @classmethod
    def depart(cls, seconds: int) -> "DepartureOutcome":
        return cls(DepartureStatus.DEPART, seconds)

    @classmethod
    def too_late(cls) -> "DepartureOutcome":
        return cls(DepartureStatus.TOO_LATE)

    @classmethod
    def unknown(cls) -> "DepartureOutcome":
        return cls(DepartureStatus.UNKNOWN)


PLACEHOLDER_SOURCE = "placeholder"


@dataclass
class ArrivalResult:
    arrivals: List[ArrivalRecord]
    source: str  # 응답한 provider 이름 또는 "placeholder"

    @property
    def is_placeholder(self) -> bool:
        return self.source == PLACEHOLDER_SOURCE


class LookupStatus(str, Enum):
    LIVE = "live"
    PLACEHOLDER = "placeholder"
    STOP_NOT_FOUND = "stop_not_found"
    UNSUPPORTED_REGION = "unsupported_region"


@dataclass
class ArrivalLookup:
    status: LookupStatus
    region: Region
    city_code: str
    stop: Optional[StopRef] = None
    arrivals: List[ArrivalRecord] = field(default_factory=list)
    message: Optional[str] = None


@dataclass
class AlertHistoryItem:
    id: str
    bus_stop_name: str
    route_name: str
    alert_time: str  # ISO 8601
    departure_time: str  # HH:MM
    completed: bool = False


@dataclass
class AppSettings:
    default_radius: int = 1000
    alert_advance_minutes: int = 1
    auto_refresh: bool = True
    refresh_interval: int = 30

    @property
    def margin_seconds(self) -> int:
        return self.alert_advance_minutes * 60
