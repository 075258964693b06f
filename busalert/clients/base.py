import logging
from typing import Any, Dict, Optional

import httpx

from busalert.core.config import settings
from busalert.core.exceptions import ProviderUnavailableException

logger = logging.getLogger(__name__)


class PublicApiClient:
    """
    외부 교통정보 API 공통 클라이언트

    실패(키 없음, 타임아웃, 네트워크 오류, non-2xx, 파싱 실패)는 모두
    ProviderUnavailableException으로 변환 => 서비스 계층에서 fallback 처리
    """

    provider_name = "public"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: Optional[str],
        timeout: float = settings.HTTP_TIMEOUT_SECONDS,
    ):
        self.http_client = http_client
        self.api_key = api_key
        self.timeout = timeout

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    def _require_credential(self) -> str:
        if not self.api_key:
            raise ProviderUnavailableException(
                f"{self.provider_name} API 키가 설정되지 않았습니다"
            )
        return self.api_key

    async def _get(
        self,
        url: str,
        params: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        # None 파라미터는 전송하지 않음
        query = {key: value for key, value in params.items() if value is not None}

        try:
            response = await self.http_client.get(
                url, params=query, headers=headers, timeout=self.timeout
            )
        except httpx.TimeoutException as e:
            raise ProviderUnavailableException(
                f"{self.provider_name} API 타임아웃 ({self.timeout}s): {url}"
            ) from e
        except httpx.HTTPError as e:
            raise ProviderUnavailableException(
                f"{self.provider_name} API 요청 실패: {e}"
            ) from e

        if response.status_code < 200 or response.status_code >= 300:
            raise ProviderUnavailableException(
                f"{self.provider_name} API 오류 ({response.status_code}): {response.text[:200]}"
            )

        return response

    async def _get_json(
        self,
        url: str,
        params: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        response = await self._get(url, params, headers)
        try:
            return response.json()
        except ValueError as e:
            raise ProviderUnavailableException(
                f"{self.provider_name} API 응답 파싱 실패: {e}"
            ) from e
