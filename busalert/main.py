"""
BusAlert Backend - FastAPI Application

버스 정류장 도착 정보 조회 및 출발 시간 알림
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from busalert.api.deps import get_credentials, get_http_client, get_store
from busalert.api.v1.endpoints.websocket import manager as websocket_manager
from busalert.api.v1.router import api_router
from busalert.core.config import settings
from busalert.core.exceptions import BusAlertException

# 로깅 설정
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    애플리케이션 생명주기 관리

    서버 시작 시 실행:
    - 외부 API 키 확인
    - Redis 저장소 연결 확인

    서버 종료 시 실행:
    - WebSocket 연결별 자동 갱신 / 예약 알림 정리
    - 공유 HTTP 클라이언트 종료
    """
    # ========== Startup ==========
    logger.info("=" * 60)
    logger.info("BusAlert Backend 시작 중...")
    logger.info("=" * 60)

    credentials = get_credentials()
    logger.info(f"카카오 API 키: {'설정됨' if credentials.routing_api_key else '없음'}")
    logger.info(f"공공데이터포털 API 키: {'설정됨' if credentials.national_transit_api_key else '없음'}")
    logger.info(f"BIS API 키: {'설정됨' if credentials.regional_api_key else '없음'}")

    if not get_store().ping():
        # 저장소 없이도 조회 기능은 동작 => 경고만
        logger.warning("Redis 연결 실패: 즐겨찾기/설정/알림 기록은 기본값으로 동작합니다")

    logger.info("=" * 60)
    logger.info("BusAlert Backend 시작 완료!")
    logger.info("=" * 60)

    yield

    # ========== Shutdown ==========
    logger.info("BusAlert Backend 종료 중...")

    try:
        await websocket_manager.disconnect_all()
        await get_http_client().aclose()
        logger.info("✓ BusAlert Backend 종료 완료")
    except Exception as e:
        logger.error(f"❌ 종료 중 오류: {e}", exc_info=True)


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="""
    ## 버스 출발 알림 서비스

    ### 주요 기능
    - 🚏 주변 정류장 / 정류장 검색
    - 🚌 실시간 도착 정보 (서울/경기 BIS, 전국 TAGO)
    - ⏱️ 도보 시간 기반 출발 시간 계산
    - 🔔 출발 알림 (WebSocket)

    ### WebSocket 연결
```
    ws://localhost:8001/v1/ws/{client_id}
```
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# allow_credentials=True일 때는 allow_origins에 ["*"]를 사용할 수 없음
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/v1")


# ========== Health Check Endpoints ==========


@app.get("/")
async def root():
    return {
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "status": "running",
        "features": [
            "주변 정류장 조회",
            "실시간 버스 도착 정보",
            "출발 시간 계산",
            "출발 알림",
        ],
        "docs": "/docs",
        "websocket": f"ws://localhost:{settings.PORT}/v1/ws/{{client_id}}",
    }


@app.get("/health")
async def health_check():
    """
    헬스 체크 엔드포인트

    - Redis 연결 상태
    - 외부 API 키 설정 여부
    """
    redis_status = "healthy" if get_store().ping() else "unhealthy"
    credentials = get_credentials()

    return JSONResponse(
        status_code=200 if redis_status == "healthy" else 503,
        content={
            "status": redis_status,
            "version": settings.VERSION,
            "timestamp": time.time(),
            "components": {"redis": redis_status},
            "providers": {
                "kakao": bool(credentials.routing_api_key),
                "tago": bool(credentials.national_transit_api_key),
                "bis": bool(credentials.regional_api_key),
            },
            "websocket_connections": websocket_manager.get_connection_count(),
        },
    )


# ========== Exception Handlers ==========


@app.exception_handler(BusAlertException)
async def busalert_exception_handler(request, exc: BusAlertException):
    logger.warning(f"요청 처리 실패 [{exc.code}]: {exc.message}")
    return JSONResponse(status_code=400, content={"error": exc.message, "code": exc.code})


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """
    전역 예외 핸들러

    예상치 못한 오류 처리
    """
    logger.error(f"예상치 못한 오류: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "message": "서버 내부 오류가 발생했습니다",
            "detail": str(exc) if settings.DEBUG else "Internal Server Error",
        },
    )


# ========== Development Server ==========

if __name__ == "__main__":
    import uvicorn

    logger.info("개발 서버 시작...")

    uvicorn.run(
        "busalert.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
        access_log=True,
        ws_ping_interval=20.0,
        ws_ping_timeout=20.0,
    )
