import json
import logging
from dataclasses import asdict, fields
from typing import Any, Dict, List, Optional

import redis

from busalert.core.config import settings
from busalert.models.domain import AlertHistoryItem, AppSettings, Stop

logger = logging.getLogger(__name__)

KEY_PREFIX = "@busalert"
FAVORITES_KEY = f"{KEY_PREFIX}:favorites"
RECENT_SEARCHES_KEY = f"{KEY_PREFIX}:recent_searches"
ALERT_HISTORY_KEY = f"{KEY_PREFIX}:alert_history"
SETTINGS_KEY = f"{KEY_PREFIX}:settings"

MAX_RECENT_SEARCHES = 10
MAX_ALERT_HISTORY = 50


def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in data.items() if key in names}


class BusAlertStore:
    """
    즐겨찾기 / 최근 검색 / 알림 기록 / 설정 저장소

    값은 모두 JSON 문자열, Redis 오류는 로그 후 빈 값/기본값/False
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None):
        self.redis_client = redis_client or redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            decode_responses=True,
        )

    def _load(self, key: str, default: Any) -> Any:
        try:
            raw = self.redis_client.get(key)
            if raw is None:
                return default
            return json.loads(raw)
        except redis.RedisError as e:
            logger.error(f"저장소 조회 실패: key={key}, 오류: {e}")
            return default
        except json.JSONDecodeError as e:
            logger.error(f"저장된 JSON 파싱 실패: key={key}, 오류: {e}")
            return default

    def _save(self, key: str, value: Any) -> bool:
        try:
            self.redis_client.set(key, json.dumps(value, ensure_ascii=False))
            return True
        except redis.RedisError as e:
            logger.error(f"저장소 저장 실패: key={key}, 오류: {e}")
            return False
        except (TypeError, ValueError) as e:
            logger.error(f"JSON 직렬화 실패: key={key}, 오류: {e}")
            return False

    # 즐겨찾기

    def get_favorites(self) -> List[Stop]:
        favorites = []
        for entry in self._load(FAVORITES_KEY, []):
            try:
                favorites.append(Stop(**_known_fields(Stop, entry)))
            except TypeError as e:
                logger.warning(f"즐겨찾기 항목 무시: {entry}, 오류: {e}")
        return favorites

    def save_favorite(self, stop: Stop) -> bool:
        """같은 ID가 이미 있으면 저장하지 않음"""
        favorites = self._load(FAVORITES_KEY, [])
        if any(entry.get("id") == stop.id for entry in favorites):
            return True
        favorites.append(stop.to_dict())
        return self._save(FAVORITES_KEY, favorites)

    def remove_favorite(self, stop_id: str) -> bool:
        favorites = self._load(FAVORITES_KEY, [])
        return self._save(
            FAVORITES_KEY, [entry for entry in favorites if entry.get("id") != stop_id]
        )

    def is_favorite(self, stop_id: str) -> bool:
        return any(stop.id == stop_id for stop in self.get_favorites())

    # 최근 검색어

    def get_recent_searches(self) -> List[str]:
        return [str(query) for query in self._load(RECENT_SEARCHES_KEY, [])]

    def add_recent_search(self, query: str) -> bool:
        query = (query or "").strip()
        if not query:
            return False
        searches = [entry for entry in self.get_recent_searches() if entry != query]
        searches.insert(0, query)
        return self._save(RECENT_SEARCHES_KEY, searches[:MAX_RECENT_SEARCHES])

    def clear_recent_searches(self) -> bool:
        return self._save(RECENT_SEARCHES_KEY, [])

    # 알림 기록

    def get_alert_history(self) -> List[AlertHistoryItem]:
        history = []
        for entry in self._load(ALERT_HISTORY_KEY, []):
            try:
                history.append(AlertHistoryItem(**_known_fields(AlertHistoryItem, entry)))
            except TypeError as e:
                logger.warning(f"알림 기록 항목 무시: {entry}, 오류: {e}")
        return history

    def add_alert_history(self, item: AlertHistoryItem) -> bool:
        """최신순, 최대 50개"""
        history = self._load(ALERT_HISTORY_KEY, [])
        history.insert(0, asdict(item))
        return self._save(ALERT_HISTORY_KEY, history[:MAX_ALERT_HISTORY])

    def clear_alert_history(self) -> bool:
        return self._save(ALERT_HISTORY_KEY, [])

    # 설정

    def get_settings(self) -> AppSettings:
        stored = self._load(SETTINGS_KEY, {})
        if not isinstance(stored, dict):
            return AppSettings()
        return AppSettings(**_known_fields(AppSettings, stored))

    def save_settings(self, **changes: Any) -> bool:
        """기본값 위에 변경 항목만 덮어씀"""
        merged = asdict(self.get_settings())
        merged.update(_known_fields(AppSettings, changes))
        return self._save(SETTINGS_KEY, merged)

    def ping(self) -> bool:
        try:
            return bool(self.redis_client.ping())
        except redis.RedisError as e:
            logger.warning(f"Redis 연결 실패: {e}")
            return False


def init_store():
    return BusAlertStore()
