"""
도착 정보 정규화 테스트 (BIS / TAGO parser, 그룹화, 정렬)
"""

from busalert.algorithms.arrival_normalizer import (
    SERVICE_ENDED,
    normalize_bis_items,
    normalize_tago_items,
    parse_arrival_message,
    parse_bis_items,
    route_type_priority,
    sort_arrivals,
    summarize_sightings,
)
from busalert.models.domain import ArrivalRecord, BusSighting


def _tago_item(route_id, route_no, arrtime, route_type="간선버스", stations=1, vehicle="일반차량"):
    return {
        "routeid": route_id,
        "routeno": route_no,
        "routetp": route_type,
        "arrtime": arrtime,
        "arrprevstationcnt": stations,
        "vehicletp": vehicle,
    }


def _record(route_name, route_type, arrival_time=60):
    return ArrivalRecord(
        route_id=f"R-{route_name}",
        route_name=route_name,
        route_type=route_type,
        arrival_time=arrival_time,
    )


class TestParseArrivalMessage:
    def test_numeric_arrtime_wins(self):
        assert parse_arrival_message("5분후[3번째 전]", arrtime="120") == 120

    def test_negative_arrtime_falls_back_to_message(self):
        assert parse_arrival_message("2분후", arrtime=-1) == 120

    def test_service_ended(self):
        assert parse_arrival_message("운행종료") == SERVICE_ENDED

    def test_arriving_soon(self):
        assert parse_arrival_message("곧 도착") == 0
        assert parse_arrival_message("도착") == 0

    def test_minutes_and_seconds(self):
        assert parse_arrival_message("3분12초후[2번째 전]") == 192

    def test_minutes_only(self):
        assert parse_arrival_message("7분후[5번째 전]") == 420

    def test_unrecognised_message(self):
        assert parse_arrival_message("출발대기") == 0
        assert parse_arrival_message(None) == 0


class TestSummarizeSightings:
    def test_two_soonest_per_route(self):
        """R1 버스 3대 (300, 120, 900) => 120, 300만 남음"""
        records = normalize_tago_items(
            [
                _tago_item("R1", "100", 300, stations=3),
                _tago_item("R1", "100", 120, stations=1),
                _tago_item("R1", "100", 900, stations=7),
            ]
        )

        assert len(records) == 1
        assert records[0].arrival_time == 120
        assert records[0].arrival_time2 == 300
        assert records[0].location_no1 == 1
        assert records[0].location_no2 == 3

    def test_service_ended_excluded(self):
        records = normalize_tago_items(
            [
                _tago_item("R1", "100", -1),
                _tago_item("R2", "200", 60),
            ]
        )

        assert [record.route_id for record in records] == ["R2"]

    def test_route_with_only_ended_buses_disappears(self):
        sightings = [BusSighting(route_id="R1", route_name="100", arrival_time=SERVICE_ENDED)]

        assert summarize_sightings(sightings) == []

    def test_single_bus_has_no_second_arrival(self):
        records = normalize_tago_items([_tago_item("R1", "100", 60)])

        assert records[0].arrival_time2 is None
        assert records[0].location_no2 is None

    def test_missing_arrtime_treated_as_service_ended(self):
        item = _tago_item("R1", "100", None)

        assert normalize_tago_items([item]) == []

    def test_low_floor_from_either_bus(self):
        records = normalize_tago_items(
            [
                _tago_item("R1", "100", 60, vehicle="일반차량"),
                _tago_item("R1", "100", 400, vehicle="저상버스"),
            ]
        )

        assert records[0].low_plate is True
        assert records[0].vehicle_type2 == "저상버스"


class TestOrdering:
    def test_route_type_priority_before_number(self):
        """간선버스 "10"이 마을버스 "5"보다 먼저"""
        records = sort_arrivals([_record("5", "마을버스"), _record("10", "간선버스")])

        assert [record.route_name for record in records] == ["10", "5"]

    def test_numeric_tie_break(self):
        """같은 유형이면 "5" < "10" (문자열 비교가 아닌 숫자 비교)"""
        records = sort_arrivals([_record("10", "지선버스"), _record("5", "지선버스")])

        assert [record.route_name for record in records] == ["5", "10"]

    def test_natural_tie_break_for_non_numeric_names(self):
        records = sort_arrivals(
            [_record("N100", "간선버스"), _record("N26", "간선버스"), _record("M7", "간선버스")]
        )

        assert [record.route_name for record in records] == ["M7", "N26", "N100"]

    def test_unknown_type_last(self):
        records = sort_arrivals([_record("1", None), _record("9", "공영버스")])

        assert [record.route_name for record in records] == ["9", "1"]

    def test_priority_table(self):
        assert route_type_priority("광역급행버스") == 1
        assert route_type_priority("간선") == 2
        assert route_type_priority("순환버스") == 4
        assert route_type_priority("좌석버스") == 5
        assert route_type_priority("공항버스") == 99
        assert route_type_priority(None) == 99


class TestBisParser:
    def test_two_buses_per_item(self):
        item = {
            "busRouteId": "100100118",
            "rtNm": "146",
            "routeType": "3",
            "arrmsg1": "3분12초후[2번째 전]",
            "arrmsg2": "11분후[6번째 전]",
            "locationNo1": "2",
            "locationNo2": "6",
            "busType1": "1",
            "busType2": "0",
            "lowPlate1": "1",
            "lowPlate2": "0",
        }

        sightings = parse_bis_items([item])

        assert len(sightings) == 2
        assert sightings[0].arrival_time == 192
        assert sightings[1].arrival_time == 660
        assert sightings[0].route_type == "간선버스"
        assert sightings[0].low_floor is True
        assert sightings[1].low_floor is False

    def test_second_bus_skipped_when_missing(self):
        sightings = parse_bis_items([{"busRouteId": "1", "rtNm": "7016", "arrmsg1": "곧 도착"}])

        assert len(sightings) == 1
        assert sightings[0].arrival_time == 0

    def test_normalize_bis_orders_by_priority(self):
        items = [
            {"busRouteId": "A", "rtNm": "0411", "routeType": "2", "arrmsg1": "5분후"},
            {"busRouteId": "B", "rtNm": "9401", "routeType": "6", "arrmsg1": "12분후"},
            {"busRouteId": "C", "rtNm": "146", "routeType": "3", "arrmsg1": "운행종료"},
        ]

        records = normalize_bis_items(items)

        assert [record.route_name for record in records] == ["9401", "0411"]
        assert records[0].route_type == "광역버스"
