"""
앱 설정 REST API 엔드포인트 (/v1/settings)
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from busalert.api.deps import get_store
from busalert.db.redis_client import BusAlertStore
from busalert.models.requests import SettingsUpdateRequest
from busalert.models.responses import SettingsResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=SettingsResponse)
async def get_settings(store: BusAlertStore = Depends(get_store)):
    return asdict(store.get_settings())


@router.patch("", response_model=SettingsResponse)
async def update_settings(request: SettingsUpdateRequest, store: BusAlertStore = Depends(get_store)):
    """변경할 항목만 전달 (나머지는 기존 값 유지)"""
    changes = request.model_dump(exclude_none=True)
    if not store.save_settings(**changes):
        raise HTTPException(status_code=503, detail="설정 저장 실패")

    logger.info(f"설정 변경: {changes}")
    return asdict(store.get_settings())
