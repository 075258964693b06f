"""
출발 시간 계산 테스트
"""

from datetime import datetime

import pytest

from busalert.algorithms.departure_planner import leave_by, plan_departure
from busalert.models.domain import ArrivalRecord, DepartureOutcome, DepartureStatus, WalkingRoute


@pytest.fixture
def arrival():
    return ArrivalRecord(route_id="R1", route_name="146", arrival_time=300, arrival_time2=900)


class TestPlanDeparture:
    def test_depart(self, arrival):
        """300 - 180 - 60 = 60초 후 출발"""
        outcome = plan_departure(arrival, 1, WalkingRoute(distance=200, duration=180), 60)

        assert outcome == DepartureOutcome.depart(60)

    def test_depart_with_small_slack(self, arrival):
        """300 - 200 - 60 = 40초 후 출발"""
        outcome = plan_departure(arrival, 1, WalkingRoute(distance=222, duration=200), 60)

        assert outcome.status == DepartureStatus.DEPART
        assert outcome.depart_in_seconds == 40

    def test_too_late_when_walk_exceeds_arrival(self):
        record = ArrivalRecord(route_id="R1", route_name="146", arrival_time=200)

        outcome = plan_departure(record, 1, WalkingRoute(distance=200, duration=180), 60)

        assert outcome.status == DepartureStatus.TOO_LATE
        assert outcome.depart_in_seconds is None

    def test_exactly_zero_is_too_late(self):
        record = ArrivalRecord(route_id="R1", route_name="146", arrival_time=240)

        outcome = plan_departure(record, 1, WalkingRoute(distance=200, duration=180), 60)

        assert outcome.status == DepartureStatus.TOO_LATE

    def test_second_bus(self, arrival):
        outcome = plan_departure(arrival, 2, WalkingRoute(distance=200, duration=180), 60)

        assert outcome == DepartureOutcome.depart(660)

    def test_second_bus_missing_is_unknown(self):
        record = ArrivalRecord(route_id="R1", route_name="146", arrival_time=600)

        outcome = plan_departure(record, 2, WalkingRoute(distance=200, duration=180))

        assert outcome.status == DepartureStatus.UNKNOWN

    def test_no_walking_estimate_is_unknown(self, arrival):
        assert plan_departure(arrival, 1, None).status == DepartureStatus.UNKNOWN

    def test_default_margin(self, arrival):
        outcome = plan_departure(arrival, 1, WalkingRoute(distance=100, duration=100))

        assert outcome.depart_in_seconds == 140

    def test_zero_margin(self, arrival):
        outcome = plan_departure(arrival, 1, WalkingRoute(distance=100, duration=100), 0)

        assert outcome.depart_in_seconds == 200

    @pytest.mark.parametrize("bus_choice", [0, 3, -1])
    def test_invalid_bus_choice(self, arrival, bus_choice):
        with pytest.raises(ValueError):
            plan_departure(arrival, bus_choice, WalkingRoute(distance=100, duration=100))

    def test_negative_margin(self, arrival):
        with pytest.raises(ValueError):
            plan_departure(arrival, 1, WalkingRoute(distance=100, duration=100), -1)


class TestLeaveBy:
    def test_depart_outcome(self):
        now = datetime(2025, 1, 1, 8, 0, 0)

        assert leave_by(DepartureOutcome.depart(90), now) == datetime(2025, 1, 1, 8, 1, 30)

    def test_non_depart_outcome(self):
        assert leave_by(DepartureOutcome.too_late()) is None
        assert leave_by(DepartureOutcome.unknown()) is None
