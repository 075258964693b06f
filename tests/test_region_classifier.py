"""
지역 판별 / 도시 코드 테스트
"""

import pytest

from busalert.algorithms.region_classifier import city_code_of, classify_region, region_name
from busalert.models.domain import Region


class TestClassifyRegion:
    @pytest.mark.parametrize(
        "lat, lon, expected",
        [
            (37.4979, 127.0276, Region.SEOUL),  # 강남역
            (37.4563, 126.7052, Region.INCHEON),  # 인천시청
            (37.2636, 127.0286, Region.GYEONGGI),  # 수원시청
            (35.1796, 129.0756, Region.BUSAN),  # 부산시청
            (35.8714, 128.6014, Region.DAEGU),  # 대구시청
            (35.1595, 126.8526, Region.GWANGJU),  # 광주시청
            (36.3504, 127.3845, Region.DAEJEON),  # 대전시청
        ],
    )
    def test_known_cities(self, lat, lon, expected):
        assert classify_region(lat, lon) == expected

    def test_seoul_checked_before_gyeonggi(self):
        """서울 박스는 경기도 박스 안에 있음 => 서울 우선"""
        assert classify_region(37.55, 127.0) == Region.SEOUL

    def test_missing_coordinate_defaults_to_seoul(self):
        assert classify_region() == Region.SEOUL
        assert classify_region(None, 127.0) == Region.SEOUL

    def test_zero_coordinate_defaults_to_seoul(self):
        """0 좌표 = 위치 미수신"""
        assert classify_region(0, 0) == Region.SEOUL
        assert classify_region(35.1796, 0) == Region.SEOUL

    def test_out_of_range_defaults_to_seoul(self):
        assert classify_region(200.0, 127.0) == Region.SEOUL
        assert classify_region(37.5, 200.0) == Region.SEOUL

    def test_unmapped_area_defaults_to_seoul(self):
        """제주 등 경계 박스가 없는 지역"""
        assert classify_region(33.4996, 126.5312) == Region.SEOUL


class TestCityCode:
    def test_city_codes(self):
        assert city_code_of(Region.SEOUL) == "11"
        assert city_code_of(Region.BUSAN) == "26"
        assert city_code_of(Region.GYEONGGI) == "41"
        assert city_code_of(Region.JEJU) == "50"

    def test_unknown_region_defaults_to_seoul_code(self):
        assert city_code_of("atlantis") == "11"

    def test_region_name(self):
        assert region_name(Region.BUSAN) == "부산광역시"
        assert region_name(Region.ULSAN) == "서울특별시"
