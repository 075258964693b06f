from typing import Optional
from pydantic import BaseModel, Field

from busalert.models.domain import ArrivalRecord, Coordinate, Stop

# service별 requests 구조 정의


class CoordinateModel(BaseModel):
    latitude: float = Field(..., ge=-90, le=90, description="위도")
    longitude: float = Field(..., ge=-180, le=180, description="경도")
    accuracy: Optional[float] = Field(default=None, description="GPS 정확도 (미터)")

    def to_domain(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude, self.accuracy)


class StopModel(BaseModel):
    id: str = Field(..., min_length=1, description="정류장 ID (provider 기준)")
    name: str = Field(..., description="정류장 이름")
    number: Optional[str] = Field(None, description="정류장 번호 (ARS)")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: Optional[str] = None
    distance: Optional[float] = Field(None, description="조회 좌표로부터의 거리 (미터)")

    def to_domain(self) -> Stop:
        return Stop(**self.model_dump())


class ArrivalRecordModel(BaseModel):
    route_id: str
    route_name: str
    route_type: Optional[str] = None
    arrival_time: int = Field(..., description="첫 번째 버스 도착까지 남은 시간 (초)")
    arrival_time2: Optional[int] = Field(None, description="두 번째 버스 (초)")
    location_no1: Optional[int] = None
    location_no2: Optional[int] = None
    vehicle_type1: Optional[str] = None
    vehicle_type2: Optional[str] = None
    low_plate: bool = False

    def to_domain(self) -> ArrivalRecord:
        return ArrivalRecord(**self.model_dump())


# 도보 경로 추정
class WalkingEstimateRequest(BaseModel):
    origin: CoordinateModel = Field(..., description="현재 위치")
    destination: CoordinateModel = Field(..., description="정류장 위치")


# 출발 시간 계산
class DeparturePlanRequest(BaseModel):
    arrival: ArrivalRecordModel
    bus_choice: int = Field(default=1, ge=1, le=2, description="첫 번째(1)/두 번째(2) 버스")
    origin: Optional[CoordinateModel] = Field(None, description="현재 위치")
    stop: Optional[CoordinateModel] = Field(None, description="정류장 위치")
    walking_duration: Optional[int] = Field(
        None, ge=0, description="이미 계산된 도보 시간 (초), 있으면 재계산하지 않음"
    )
    margin_seconds: Optional[int] = Field(None, ge=0, description="출발 여유 시간 (초)")


# 출발 알림 설정
class AlertScheduleRequest(BaseModel):
    client_id: Optional[str] = Field(None, description="알림을 받을 WebSocket 클라이언트 ID")
    stop: StopModel
    arrival: ArrivalRecordModel
    bus_choice: int = Field(default=1, ge=1, le=2)
    origin: CoordinateModel


# 설정 변경 (부분 업데이트)
class SettingsUpdateRequest(BaseModel):
    default_radius: Optional[int] = Field(None, ge=100, le=5000)
    alert_advance_minutes: Optional[int] = Field(None, ge=0, le=30)
    auto_refresh: Optional[bool] = None
    refresh_interval: Optional[int] = Field(None, ge=10, le=300)


# WebSocket: 정류장 선택
class SelectStopRequest(BaseModel):
    stop_id: Optional[str] = Field(None, description="정류장 ID")
    stop_name: Optional[str] = Field(None, description="정류장 이름")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


# 위치 정보 업데이트
class LocationUpdateRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90, description="위도")
    longitude: float = Field(..., ge=-180, le=180, description="경도")
    accuracy: Optional[float] = Field(default=50, description="GPS 정확도 (미터)")
    timestamp: Optional[str] = Field(default=None, description="타임스탬프")
