"""
BusAlert Backend

버스 도착 정보 + 출발 시간 알림 서비스
"""

__version__ = "1.2.0"
