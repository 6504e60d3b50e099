"""
健康检查路由 - 系统状态与文档
"""

import time

from fastapi import APIRouter, Depends

from vibetrade.api.schemas import HealthResponse
from vibetrade.api.dependencies import (
    ServiceContainer,
    Settings,
    get_service_container,
    get_settings,
)


router = APIRouter(tags=["Health"])

_STARTED_AT = time.time()


def _now_ms() -> int:
    return int(time.time() * 1000)


def _usdc(amount: int) -> str:
    """最小单位转美元展示"""
    return f"${amount / 1_000_000:.2f}"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="健康检查",
    description="检查服务及其依赖组件的配置状态"
)
async def health_check(
    container: ServiceContainer = Depends(get_service_container),
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    """健康检查"""
    return HealthResponse(
        status="healthy",
        service=settings.APP_NAME,
        version=settings.APP_VERSION,
        timestamp=_now_ms(),
        components=container.components,
    )


@router.get(
    "/api/docs",
    summary="API 文档",
    description="端点列表与 x402 价格说明"
)
async def api_docs(settings: Settings = Depends(get_settings)):
    return {
        "service": f"{settings.APP_NAME} - AI Trading Intelligence API",
        "version": settings.APP_VERSION,
        "description": "Professional trading analysis with x402 micropayments",
        "endpoints": {
            "GET /health": "Health check",
            "GET /api/docs": "API documentation",
            "GET /api/v1/status": "Service status",
            "POST /api/v1/trading-analysis": "Single asset analysis",
            "POST /api/v1/bulk-analysis": "Multiple assets analysis",
            "POST /entrypoints/analyze/invoke": "Analyze entrypoint",
            "GET /metrics/system": "System metrics",
        },
        "payment": {
            "protocol": "x402",
            "network": settings.X402_NETWORK,
            "currency": "USDC",
            "prices": {
                "single_analysis": _usdc(settings.ENTRY_PRICE),
                "bulk_analysis": f"{_usdc(settings.BULK_PRICE_PER_SYMBOL)} per symbol",
            },
        },
    }


@router.get(
    "/api/v1/status",
    summary="服务状态",
    description="运行环境与运行时长"
)
async def service_status(settings: Settings = Depends(get_settings)):
    return {
        "service": settings.APP_NAME,
        "status": "operational",
        "environment": settings.ENVIRONMENT,
        "uptime": round(time.time() - _STARTED_AT, 3),
        "timestamp": _now_ms(),
    }
