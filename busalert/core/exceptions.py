# custom exception 정의 및 관리


class BusAlertException(Exception):  # 예외 구조 정의
    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class LocationPermissionException(BusAlertException):
    def __init__(
        self, message: str = "위치 권한이 거부되었습니다. 설정에서 권한을 허용해주세요."
    ):
        super().__init__(message, code="LOCATION_PERMISSION_DENIED")


class ProviderUnavailableException(BusAlertException):
    """외부 API 실패 (키 없음, non-2xx, 파싱 실패, 타임아웃) => fallback 대상"""

    def __init__(self, message: str = "외부 교통정보 API를 사용할 수 없습니다"):
        super().__init__(message, code="PROVIDER_UNAVAILABLE")


class StopNotResolvedException(BusAlertException):
    def __init__(self, message: str = "정류장을 찾을 수 없습니다"):
        super().__init__(message, code="STOP_NOT_RESOLVED")


class UnsupportedRegionException(BusAlertException):
    def __init__(self, message: str = "현재 지역은 버스 도착 정보를 지원하지 않습니다"):
        super().__init__(message, code="UNSUPPORTED_REGION")
