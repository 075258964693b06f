"""
FAST API Websocket endpoint

정류장 선택 => 도착 정보 자동 갱신 push, 출발 알림 전달
"""

import logging
from dataclasses import asdict
from datetime import datetime
from typing import Dict, Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError

from busalert.algorithms.region_classifier import city_code_of, region_name
from busalert.api.deps import (
    get_arrival_aggregator,
    get_distance_estimator,
    get_geo_service,
    get_stop_directory,
    get_store,
)
from busalert.core.config import settings
from busalert.core.exceptions import (
    BusAlertException,
    LocationPermissionException,
    UnsupportedRegionException,
)
from busalert.models.domain import ArrivalResult, Coordinate, StopRef
from busalert.models.requests import (
    AlertScheduleRequest,
    LocationUpdateRequest,
    SelectStopRequest,
)
from busalert.services.alert_service import AlertService, AsyncioNotificationScheduler
from busalert.services.arrival_refresher import ArrivalRefresher

logger = logging.getLogger(__name__)

router = APIRouter()


class ConnectionManager:
    """websocket 연결 관리자 (연결마다 도착 정보 갱신기 / 알림 스케줄러 1개)"""

    MAX_CONNECTIONS = 1000

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}
        self.refreshers: Dict[str, ArrivalRefresher] = {}
        self.schedulers: Dict[str, AsyncioNotificationScheduler] = {}
        self.locations: Dict[str, Coordinate] = {}

    async def connect(self, websocket: WebSocket, client_id: str) -> bool:
        # 기존 연결 정리
        if client_id in self.active_connections:
            logger.warning(f"중복 연결 감지: {client_id}, 기존 연결을 종료합니다.")
            old_ws = self.active_connections[client_id]
            try:
                await old_ws.send_json(
                    {
                        "type": "disconnected",
                        "reason": "다른 기기에서 연결됨",
                        "code": "DUPLICATE_CONNECTION",
                    }
                )
                await old_ws.close()
            except Exception as e:
                logger.error(f"기존 연결 종료에 실패하였습니다: {e}")
            finally:
                await self.disconnect(client_id)

        if len(self.active_connections) >= self.MAX_CONNECTIONS:
            await websocket.close(
                code=status.WS_1008_POLICY_VIOLATION,
                reason="서버 연결 한계에 도달했습니다.",
            )
            logger.warning(f"연결 거부(한계 도달): client={client_id}")
            return False

        await websocket.accept()
        self.active_connections[client_id] = websocket
        self.refreshers[client_id] = ArrivalRefresher(get_arrival_aggregator())
        self.schedulers[client_id] = AsyncioNotificationScheduler(
            deliver=self._notification_sender(client_id)
        )
        logger.info(
            f"클라이언트 연결: {client_id} "
            f"총 {len(self.active_connections)}/{self.MAX_CONNECTIONS} 개 연결"
        )
        return True

    def _notification_sender(self, client_id: str):
        async def deliver(title: str, body: str):
            await self.send_message(
                client_id,
                {
                    "type": "notification",
                    "title": title,
                    "body": body,
                    "timestamp": datetime.now().isoformat(),
                },
            )

        return deliver

    async def disconnect(self, client_id: str, websocket: Optional[WebSocket] = None):
        """
        연결 해제 + 자동 갱신 / 예약 알림 정리

        websocket을 넘기면 그 연결이 현재 연결일 때만 정리 (중복 연결로 교체된 경우 무시)
        """
        if websocket is not None and self.active_connections.get(client_id) is not websocket:
            return

        self.active_connections.pop(client_id, None)
        self.locations.pop(client_id, None)

        refresher = self.refreshers.pop(client_id, None)
        if refresher:
            await refresher.stop()

        scheduler = self.schedulers.pop(client_id, None)
        if scheduler:
            await scheduler.cancel_all()

        logger.info(
            f"클라이언트 연결 해제: {client_id}, 남은 연결: {len(self.active_connections)}개"
        )

    async def disconnect_all(self):
        for client_id in list(self.active_connections):
            await self.disconnect(client_id)

    def get_scheduler(self, client_id: Optional[str]) -> Optional[AsyncioNotificationScheduler]:
        if client_id is None:
            return None
        return self.schedulers.get(client_id)

    async def send_message(self, client_id: str, message: dict):
        """특정 클라이언트에게 메시지 전송"""
        websocket = self.active_connections.get(client_id)
        if websocket is None:
            return
        try:
            await websocket.send_json(message)
        except Exception as e:
            logger.error(f"메시지 전송 실패 (client={client_id}): {e}")

    async def send_error(self, client_id: str, error_message: str, code: str = None):
        await self.send_message(
            client_id,
            {
                "type": "error",
                "message": error_message,
                "code": code,
                "timestamp": datetime.now().isoformat(),
            },
        )

    def get_connection_count(self) -> int:
        return len(self.active_connections)


manager = ConnectionManager()


@router.websocket("/ws/{client_id}")
async def websocket_endpoint(websocket: WebSocket, client_id: str):
    """
    Websocket main endpoint

    /v1/ws/{client_id}

    수신 메시지: select_stop, refresh, location_update, location_error, set_alert, clear, ping
    """
    if not await manager.connect(websocket, client_id):
        return

    try:
        await manager.send_message(
            client_id,
            {
                "type": "connected",
                "client_id": client_id,
                "message": "서버 연결 성공",
                "server_version": settings.VERSION,
            },
        )

        while True:
            data = await websocket.receive_json()
            message_type = data.get("type")

            logger.debug(f"메시지 수신: client={client_id}, type={message_type}")

            if message_type == "select_stop":
                await handle_select_stop(client_id, data)

            elif message_type == "refresh":
                await handle_refresh(client_id)

            elif message_type == "location_update":
                await handle_location_update(client_id, data)

            elif message_type == "location_error":
                await handle_location_error(client_id, data)

            elif message_type == "set_alert":
                await handle_set_alert(client_id, data)

            elif message_type == "clear":
                await handle_clear(client_id)

            elif message_type == "ping":
                await manager.send_message(client_id, {"type": "pong"})

            else:
                await manager.send_error(
                    client_id,
                    f"알 수 없는 메시지 타입: {message_type}",
                    "UNKNOWN_MESSAGE_TYPE",
                )

    except WebSocketDisconnect:
        logger.info(f"WebSocket 정상 종료: {client_id}")
    except Exception as e:
        logger.error(f"WebSocket 오류 (client={client_id}): {e}", exc_info=True)
        await manager.send_error(client_id, "서버 오류가 발생했습니다", "INTERNAL_SERVER_ERROR")
    finally:
        await manager.disconnect(client_id, websocket)


def _arrivals_message(stop_ref: StopRef, result: ArrivalResult) -> dict:
    return {
        "type": "arrivals",
        "stop_id": stop_ref.stop_id,
        "stop_name": stop_ref.name,
        "source": result.source,
        "is_placeholder": result.is_placeholder,
        "arrivals": [arrival.to_dict() for arrival in result.arrivals],
        "timestamp": datetime.now().isoformat(),
    }


async def handle_select_stop(client_id: str, data: dict):
    """
    정류장 선택

    - 지원 지역 확인
    - 이름만 있으면 정류장 ID 조회
    - 도착 정보 즉시 전송 후 설정 주기마다 갱신
    """
    try:
        request = SelectStopRequest(**data)
    except ValidationError as e:
        await manager.send_error(
            client_id, f"입력값이 올바르지 않습니다: {e.errors()}", "INVALID_PARAMETERS"
        )
        return

    if not request.stop_id and not (request.stop_name or "").strip():
        await manager.send_error(client_id, "stop_id 또는 stop_name이 필요합니다", "INVALID_PARAMETERS")
        return

    lat, lon = request.latitude, request.longitude
    if lat is None or lon is None:
        location = manager.locations.get(client_id)
        lat = location.latitude if location else None
        lon = location.longitude if location else None

    geo_service = get_geo_service()
    region = geo_service.classify_region(lat, lon)

    support_message = geo_service.region_support_message(lat, lon)
    if support_message:
        error = UnsupportedRegionException(support_message)
        await manager.send_error(client_id, error.message, error.code)
        return

    if request.stop_id:
        stop_ref = StopRef(stop_id=request.stop_id, name=request.stop_name)
    else:
        stop_ref = await get_stop_directory().find_stop_by_name(request.stop_name, region)
        if stop_ref is None:
            await manager.send_error(
                client_id, f"'{request.stop_name}' 정류장을 찾을 수 없습니다", "STOP_NOT_RESOLVED"
            )
            return

    refresher = manager.refreshers.get(client_id)
    if refresher is None:
        return

    app_settings = get_store().get_settings()
    refresher.interval = app_settings.refresh_interval

    async def publish(selected: StopRef, result: ArrivalResult):
        await manager.send_message(client_id, _arrivals_message(selected, result))

    await manager.send_message(
        client_id,
        {
            "type": "stop_selected",
            "stop_id": stop_ref.stop_id,
            "stop_name": stop_ref.name,
            "region": region.value,
            "city_code": city_code_of(region),
        },
    )
    await refresher.select(stop_ref, region, publish, auto_refresh=app_settings.auto_refresh)


async def handle_refresh(client_id: str):
    refresher = manager.refreshers.get(client_id)
    result = await refresher.refresh_now() if refresher else None
    if result is None:
        await manager.send_error(client_id, "선택된 정류장이 없습니다", "NO_STOP_SELECTED")


async def handle_location_update(client_id: str, data: dict):
    try:
        request = LocationUpdateRequest(**data)
    except ValidationError:
        await manager.send_error(client_id, "위도/경도 정보가 필요합니다", "MISSING_LOCATION")
        return

    coordinate = Coordinate(request.latitude, request.longitude, request.accuracy)
    manager.locations[client_id] = coordinate

    region = get_geo_service().classify_region(coordinate.latitude, coordinate.longitude)
    await manager.send_message(
        client_id,
        {
            "type": "location_updated",
            "region": region.value,
            "region_name": region_name(region),
            "city_code": city_code_of(region),
        },
    )


async def handle_location_error(client_id: str, data: dict):
    """클라이언트 위치 조회 실패 보고"""
    manager.locations.pop(client_id, None)

    if data.get("code") in ("PERMISSION_DENIED", "LOCATION_PERMISSION_DENIED"):
        error = LocationPermissionException()
    else:
        error = BusAlertException("현재 위치를 가져올 수 없습니다", code="LOCATION_UNAVAILABLE")

    logger.info(f"위치 오류 (client={client_id}): {error.code}")
    await manager.send_error(client_id, error.message, error.code)


async def handle_set_alert(client_id: str, data: dict):
    """출발 알림 예약 (origin이 없으면 마지막 위치 사용)"""
    location = manager.locations.get(client_id)
    if data.get("origin") is None and location is not None:
        data = {
            **data,
            "origin": {"latitude": location.latitude, "longitude": location.longitude},
        }

    try:
        request = AlertScheduleRequest(**data)
    except ValidationError as e:
        await manager.send_error(
            client_id, f"입력값이 올바르지 않습니다: {e.errors()}", "INVALID_PARAMETERS"
        )
        return

    scheduler = manager.get_scheduler(client_id)
    if scheduler is None:
        return

    stop = request.stop.to_domain()
    walking = await get_distance_estimator().estimate_walking_route(
        request.origin.to_domain(), stop.coordinate
    )
    outcome = await AlertService(get_store(), scheduler).schedule_departure_alert(
        stop, request.arrival.to_domain(), request.bus_choice, walking
    )

    message = asdict(outcome)
    message["status"] = outcome.status.value
    await manager.send_message(client_id, {"type": "alert_scheduled", **message})


async def handle_clear(client_id: str):
    """선택 정류장 / 예약 알림 초기화"""
    refresher = manager.refreshers.get(client_id)
    if refresher:
        await refresher.stop()

    scheduler = manager.get_scheduler(client_id)
    if scheduler:
        await scheduler.cancel_all()

    await manager.send_message(client_id, {"type": "cleared"})
