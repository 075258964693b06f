"""
순수 계산 로직 (네트워크 호출 없음)
"""

from busalert.algorithms.distance_calculator import (
    DistanceCalculator,
    great_circle_distance,
    walking_route_from_distance,
)
from busalert.algorithms.region_classifier import classify_region, city_code_of, region_name
from busalert.algorithms.arrival_normalizer import (
    normalize_bis_items,
    normalize_tago_items,
    sort_arrivals,
    summarize_sightings,
)
from busalert.algorithms.departure_planner import plan_departure, leave_by

__all__ = [
    "DistanceCalculator",
    "great_circle_distance",
    "walking_route_from_distance",
    "classify_region",
    "city_code_of",
    "region_name",
    "normalize_bis_items",
    "normalize_tago_items",
    "sort_arrivals",
    "summarize_sightings",
    "plan_departure",
    "leave_by",
]
