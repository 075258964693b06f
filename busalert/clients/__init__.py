"""
외부 교통정보 API 클라이언트 (카카오, TAGO, 서울/경기 BIS)
"""

from busalert.clients.base import PublicApiClient
from busalert.clients.bis import BisClient
from busalert.clients.kakao import KakaoClient
from busalert.clients.tago import TagoClient

__all__ = [
    "PublicApiClient",
    "BisClient",
    "KakaoClient",
    "TagoClient",
]
