"""
즐겨찾기 정류장 REST API 엔드포인트
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from busalert.api.deps import get_store
from busalert.db.redis_client import BusAlertStore
from busalert.models.requests import StopModel
from busalert.models.responses import StopSearchResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=StopSearchResponse)
async def list_favorites(store: BusAlertStore = Depends(get_store)):
    favorites = store.get_favorites()
    return {"count": len(favorites), "results": [stop.to_dict() for stop in favorites]}


@router.post("", response_model=StopSearchResponse)
async def add_favorite(stop: StopModel, store: BusAlertStore = Depends(get_store)):
    """즐겨찾기 추가 (같은 ID는 한 번만 저장)"""
    if not store.save_favorite(stop.to_domain()):
        raise HTTPException(status_code=503, detail="즐겨찾기 저장 실패")

    logger.info(f"즐겨찾기 추가: {stop.id} {stop.name}")
    favorites = store.get_favorites()
    return {"count": len(favorites), "results": [item.to_dict() for item in favorites]}


@router.delete("/{stop_id}", response_model=StopSearchResponse)
async def remove_favorite(stop_id: str, store: BusAlertStore = Depends(get_store)):
    if not store.remove_favorite(stop_id):
        raise HTTPException(status_code=503, detail="즐겨찾기 삭제 실패")

    favorites = store.get_favorites()
    return {"count": len(favorites), "results": [item.to_dict() for item in favorites]}
