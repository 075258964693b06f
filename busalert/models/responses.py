from typing import List, Optional
from pydantic import BaseModel, Field

from busalert.models.requests import ArrivalRecordModel, StopModel

# service 별 응답 구조 정의


class RegionResponse(BaseModel):
    region: str = Field(..., description="지역 코드")
    region_name: str = Field(..., description="지역 이름")
    city_code: str = Field(..., description="TAGO 도시 코드")
    support_message: Optional[str] = Field(None, description="미지원 지역 안내 메시지")


class CityCodeResponse(BaseModel):
    city_code: Optional[str] = Field(None, description="가장 가까운 정류소의 도시 코드")


class CityCodeItem(BaseModel):
    citycode: str
    cityname: str


class CityCodeListResponse(BaseModel):
    count: int
    cities: List[CityCodeItem] = Field(default_factory=list)


# 정류장 검색 응답
class StopSearchResponse(BaseModel):
    keyword: Optional[str] = Field(None, description="검색 키워드")
    count: int = Field(..., description="검색 결과 수")
    results: List[StopModel] = Field(default_factory=list, description="정류장 리스트")


# 정류장 이름 -> ID 조회 응답
class StopResolveResponse(BaseModel):
    valid: bool = Field(..., description="조회 성공 여부")
    stop_id: Optional[str] = Field(None, description="정류장 ID")
    stop_name: Optional[str] = Field(None, description="정류장 이름")
    stop_number: Optional[str] = Field(None, description="정류장 번호")
    provider: Optional[str] = Field(None, description="ID를 제공한 provider")
    message: Optional[str] = Field(None, description="오류 메시지 (조회 실패 시)")


class ArrivalsResponse(BaseModel):
    status: str = Field(..., description="live / placeholder / stop_not_found / unsupported_region")
    region: str
    city_code: str
    stop_id: Optional[str] = None
    stop_name: Optional[str] = None
    is_placeholder: bool = Field(False, description="예시 데이터 여부")
    count: int
    arrivals: List[ArrivalRecordModel] = Field(default_factory=list)
    message: Optional[str] = None


class WalkingRouteResponse(BaseModel):
    distance: float = Field(..., description="거리 (미터)")
    duration: int = Field(..., description="도보 시간 (초)")


class DeparturePlanResponse(BaseModel):
    status: str = Field(..., description="depart / too_late / unknown")
    depart_in_seconds: Optional[int] = Field(None, description="출발까지 남은 시간 (초)")
    leave_by: Optional[str] = Field(None, description="출발 시각 (ISO 8601)")
    margin_seconds: int
    walking: Optional[WalkingRouteResponse] = None


class AlertScheduleResponse(BaseModel):
    scheduled: bool
    status: str
    notification_id: Optional[str] = None
    depart_in_seconds: Optional[int] = None
    departure_time: Optional[str] = Field(None, description="출발 시각 (HH:MM)")
    message: str


class AlertHistoryEntry(BaseModel):
    id: str
    bus_stop_name: str
    route_name: str
    alert_time: str
    departure_time: str
    completed: bool = False


class AlertHistoryResponse(BaseModel):
    count: int
    items: List[AlertHistoryEntry] = Field(default_factory=list)


class SettingsResponse(BaseModel):
    default_radius: int
    alert_advance_minutes: int
    auto_refresh: bool
    refresh_interval: int


# 에러 응답
class ErrorResponse(BaseModel):
    error: str = Field(..., description="에러 메시지")
    code: Optional[str] = Field(None, description="에러 코드")
