"""
pydantic models for 요청, 응답, 도메인 객체
"""

from busalert.models.domain import (
    Region,
    Coordinate,
    Stop,
    StopRef,
    BusSighting,
    ArrivalRecord,
    ArrivalResult,
    ArrivalLookup,
    LookupStatus,
    WalkingRoute,
    DepartureOutcome,
    DepartureStatus,
    AlertHistoryItem,
    AppSettings,
)
from busalert.models.requests import (
    CoordinateModel,
    StopModel,
    ArrivalRecordModel,
    DeparturePlanRequest,
    AlertScheduleRequest,
)
from busalert.models.responses import (
    ArrivalsResponse,
    DeparturePlanResponse,
    ErrorResponse,
)

__all__ = [
    "Region",
    "Coordinate",
    "Stop",
    "StopRef",
    "BusSighting",
    "ArrivalRecord",
    "ArrivalResult",
    "ArrivalLookup",
    "LookupStatus",
    "WalkingRoute",
    "DepartureOutcome",
    "DepartureStatus",
    "AlertHistoryItem",
    "AppSettings",
    "CoordinateModel",
    "StopModel",
    "ArrivalRecordModel",
    "DeparturePlanRequest",
    "AlertScheduleRequest",
    "ArrivalsResponse",
    "DeparturePlanResponse",
    "ErrorResponse",
]
