"""
provider별 도착 정보 원본 -> ArrivalRecord 정규화

1. provider 전용 parser: 원본 레코드 -> BusSighting (버스 1대 단위)
2. 공통 그룹화: 운행종료 제외 -> 노선별 그룹 -> 도착 시간순 상위 2대 -> ArrivalRecord
3. 공통 정렬: 노선 유형 우선순위 -> 노선 번호
"""

import re
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Optional, Tuple

from busalert.core.config import (
    BIS_ROUTE_TYPES,
    LOW_FLOOR_MARKER,
    LOW_FLOOR_VEHICLE_LABEL,
    ROUTE_TYPE_PRIORITY,
    UNKNOWN_ROUTE_TYPE_PRIORITY,
)
from busalert.models.domain import ArrivalRecord, BusSighting

SERVICE_ENDED = -1  # 운행종료 sentinel => 결과에서 제외

MINUTES_PATTERN = re.compile(r"(\d+)\s*분")
SECONDS_PATTERN = re.compile(r"(\d+)\s*초")
INTEGER_PATTERN = re.compile(r"^\s*-?\d+\s*$")
NATURAL_CHUNK_PATTERN = re.compile(r"(\d+)")


def _to_int(value: Any) -> Optional[int]:
    """"12", 12, "12.0" -> 12 / 빈 값, 숫자가 아닌 값 -> None"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return None


def _to_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


# ========== 도착 메시지 파싱 ==========


def parse_arrival_message(message: Optional[str], arrtime: Any = None) -> int:
    """
    도착 예정 시간(초) 계산

    - 숫자 arrtime(초)이 있으면 우선 사용
    - "운행종료" -> SERVICE_ENDED
    - "곧 도착", "도착" -> 0
    - "3분12초후[2번째 전]" -> 192
    - 해석할 수 없는 메시지 -> 0
    """
    seconds = _to_int(arrtime)
    if seconds is not None and seconds >= 0:
        return seconds

    if not message:
        return 0

    if "운행종료" in message:
        return SERVICE_ENDED
    if "곧 도착" in message or "도착" in message:
        return 0

    minutes_match = MINUTES_PATTERN.search(message)
    seconds_match = SECONDS_PATTERN.search(message)
    if minutes_match or seconds_match:
        total = int(minutes_match.group(1)) * 60 if minutes_match else 0
        if seconds_match:
            total += int(seconds_match.group(1))
        return total

    return 0


# ========== provider별 parser ==========


def parse_bis_items(items: Iterable[Dict[str, Any]]) -> List[BusSighting]:
    """
    서울/경기 BIS 응답 -> BusSighting

    BIS는 노선당 레코드 1개에 첫 번째/두 번째 버스(arrmsg1/arrmsg2)를 함께 담아 보낸다.
    """
    sightings: List[BusSighting] = []

    for item in items:
        route_id = _to_str(item.get("busRouteId") or item.get("routeId")) or ""
        route_name = _to_str(item.get("rtNm") or item.get("routeName")) or ""
        raw_route_type = _to_str(item.get("routeType"))
        route_type = BIS_ROUTE_TYPES.get(raw_route_type, raw_route_type)
        shared_low_plate = _to_str(item.get("lowPlate")) == LOW_FLOOR_MARKER

        for order in (1, 2):
            message = _to_str(item.get(f"arrmsg{order}"))
            arrtime = item.get(f"arrtime{order}")
            if order == 1 and arrtime is None:
                arrtime = item.get("arrtime")

            # 두 번째 버스는 정보가 있을 때만
            if order == 2 and message is None and arrtime is None:
                continue

            sightings.append(
                BusSighting(
                    route_id=route_id,
                    route_name=route_name,
                    route_type=route_type,
                    arrival_time=parse_arrival_message(message, arrtime),
                    stops_away=_to_int(item.get(f"locationNo{order}")),
                    vehicle_type=_to_str(item.get(f"busType{order}")),
                    low_floor=(
                        _to_str(item.get(f"lowPlate{order}")) == LOW_FLOOR_MARKER
                        or shared_low_plate
                    ),
                )
            )

    return sightings


def parse_tago_items(items: Iterable[Dict[str, Any]]) -> List[BusSighting]:
    """
    TAGO 응답 -> BusSighting

    TAGO는 버스 1대당 레코드 1개 (같은 노선의 레코드가 여러 개)
    """
    sightings: List[BusSighting] = []

    for item in items:
        arrtime = _to_int(item.get("arrtime"))
        vehicle_type = _to_str(item.get("vehicletp"))

        sightings.append(
            BusSighting(
                route_id=_to_str(item.get("routeid")) or "",
                route_name=_to_str(item.get("routeno")) or "",
                route_type=_to_str(item.get("routetp")),
                arrival_time=arrtime if arrtime is not None else SERVICE_ENDED,
                stops_away=_to_int(item.get("arrprevstationcnt")),
                vehicle_type=vehicle_type,
                low_floor=vehicle_type in (LOW_FLOOR_VEHICLE_LABEL, LOW_FLOOR_MARKER),
            )
        )

    return sightings


# ========== 공통 그룹화 ==========


def summarize_sightings(sightings: Iterable[BusSighting]) -> List[ArrivalRecord]:
    """노선별로 가장 빨리 도착하는 2대만 남겨 ArrivalRecord 생성 (입력 노선 순서 유지)"""
    groups: Dict[str, List[BusSighting]] = {}

    for sighting in sightings:
        if sighting.arrival_time < 0:
            continue  # 운행종료
        groups.setdefault(sighting.route_id, []).append(sighting)

    records: List[ArrivalRecord] = []
    for route_id, buses in groups.items():
        # 노선 이름/유형은 해당 노선의 첫 원본 레코드 기준
        first_seen = buses[0]
        first, second = _two_soonest(buses)

        records.append(
            ArrivalRecord(
                route_id=route_id,
                route_name=first_seen.route_name,
                route_type=first_seen.route_type,
                arrival_time=first.arrival_time,
                arrival_time2=second.arrival_time if second else None,
                location_no1=first.stops_away,
                location_no2=second.stops_away if second else None,
                vehicle_type1=first.vehicle_type,
                vehicle_type2=second.vehicle_type if second else None,
                low_plate=first.low_floor or bool(second and second.low_floor),
            )
        )

    return records


def _two_soonest(
    buses: List[BusSighting],
) -> Tuple[BusSighting, Optional[BusSighting]]:
    ordered = sorted(buses, key=lambda bus: bus.arrival_time)
    return ordered[0], (ordered[1] if len(ordered) > 1 else None)


# ========== 공통 정렬 ==========


def route_type_priority(route_type: Optional[str]) -> int:
    """"간선버스", "간선" 모두 허용"""
    key = (route_type or "").strip()
    if key in ROUTE_TYPE_PRIORITY:
        return ROUTE_TYPE_PRIORITY[key]
    return ROUTE_TYPE_PRIORITY.get(f"{key}버스", UNKNOWN_ROUTE_TYPE_PRIORITY)


def natural_key(name: str) -> Tuple:
    """숫자 부분은 숫자로 비교하는 정렬 키 ("N26" < "N100", "5-1" < "10")"""
    chunks = []
    for chunk in NATURAL_CHUNK_PATTERN.split(name):
        if not chunk:
            continue
        if chunk.isdigit():
            chunks.append((0, int(chunk), ""))
        else:
            chunks.append((1, 0, chunk.casefold()))
    return (tuple(chunks), name)


def compare_arrivals(a: ArrivalRecord, b: ArrivalRecord) -> int:
    priority_a = route_type_priority(a.route_type)
    priority_b = route_type_priority(b.route_type)
    if priority_a != priority_b:
        return priority_a - priority_b

    # 둘 다 정수 노선 번호 -> 숫자 비교
    if INTEGER_PATTERN.match(a.route_name) and INTEGER_PATTERN.match(b.route_name):
        diff = int(a.route_name) - int(b.route_name)
        if diff:
            return diff

    key_a, key_b = natural_key(a.route_name), natural_key(b.route_name)
    if key_a == key_b:
        return 0
    return -1 if key_a < key_b else 1


def sort_arrivals(records: Iterable[ArrivalRecord]) -> List[ArrivalRecord]:
    return sorted(records, key=cmp_to_key(compare_arrivals))


def normalize_tago_items(items: Iterable[Dict[str, Any]]) -> List[ArrivalRecord]:
    return sort_arrivals(summarize_sightings(parse_tago_items(items)))


def normalize_bis_items(items: Iterable[Dict[str, Any]]) -> List[ArrivalRecord]:
    return sort_arrivals(summarize_sightings(parse_bis_items(items)))
