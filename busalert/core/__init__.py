"""
Core 설정 및 utilities, 커스텀 예외
"""

from busalert.core.config import settings, ApiCredentials

from busalert.core.exceptions import (
    BusAlertException,
    LocationPermissionException,
    ProviderUnavailableException,
    StopNotResolvedException,
    UnsupportedRegionException,
)

__all__ = [
    "settings",
    "ApiCredentials",
    "BusAlertException",
    "LocationPermissionException",
    "ProviderUnavailableException",
    "StopNotResolvedException",
    "UnsupportedRegionException",
]
