from busalert.services.alert_service import (
    AlertOutcome,
    AlertService,
    AsyncioNotificationScheduler,
    NotificationScheduler,
)
from busalert.services.arrival_refresher import ArrivalRefresher
from busalert.services.arrival_service import (
    ArrivalAggregator,
    ArrivalProvider,
    BisArrivalProvider,
    TagoArrivalProvider,
    placeholder_arrivals,
)
from busalert.services.bus_alert_service import BusAlertService
from busalert.services.distance_service import DistanceEstimator
from busalert.services.geo_service import GeoService
from busalert.services.stop_directory_service import SAMPLE_STOPS, StopDirectory

__all__ = [
    "AlertOutcome",
    "AlertService",
    "AsyncioNotificationScheduler",
    "NotificationScheduler",
    "ArrivalRefresher",
    "ArrivalAggregator",
    "ArrivalProvider",
    "BisArrivalProvider",
    "TagoArrivalProvider",
    "placeholder_arrivals",
    "BusAlertService",
    "DistanceEstimator",
    "GeoService",
    "SAMPLE_STOPS",
    "StopDirectory",
]
