"""
Vibe Trade API - 主应用入口

基于 Clean/Hexagonal Architecture 的付费交易分析 API 服务。

特性：
- x402 微支付（缺少 X-Payment 时返回 402）
- LLM 软路由 + 默认兜底
- 数据源限时并行获取，失败静默降级
- 统一 JSON 错误信封
- 可观测性支持
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import time
import uuid

from vibetrade.api.routes import (
    analysis_router,
    entrypoints_router,
    health_router,
    metrics_router,
)
from vibetrade.api.dependencies import get_settings, get_service_container
from vibetrade.domain.models import ErrorCode
from vibetrade.infrastructure.errors import (
    VibeTradeError,
    PaymentRequiredError,
    error_envelope,
)
from vibetrade.infrastructure.logging import setup_logging, get_logger
from vibetrade.infrastructure.metrics import increment_counter, record_histogram
from vibetrade.infrastructure.security import SecurityHeadersMiddleware


logger = get_logger(__name__)


def _validation_details(exc: RequestValidationError) -> str:
    """把 Pydantic 校验错误压缩成一行说明"""
    parts = []
    for error in exc.errors():
        location = ".".join(
            str(part) for part in error.get("loc", ()) if part != "body"
        )
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "symbol and timeframe are required"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info("Vibe Trade API 正在启动...")

    # 预热服务容器
    get_service_container()
    logger.info("服务容器初始化完成")

    yield

    logger.info("Vibe Trade API 正在关闭...")


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    settings = get_settings()
    setup_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    app = FastAPI(
        title=settings.APP_NAME,
        description="""
# Vibe Trade API

AI 交易情报 API：聚合技术指标与市场情绪，返回 BUY / SELL / HOLD 建议，
通过 x402 协议按次收取 USDC 微支付。

## 支付流程

1. 不带 `X-Payment` 头请求，得到 402 与支付描述
2. 完成支付后带上 `X-Payment` 头重试
3. 响应头 `X-Payment-Response` 携带支付回执

## 快速开始

```python
import requests

response = requests.post(
    "http://localhost:3000/api/v1/trading-analysis",
    json={"symbol": "BTC", "timeframe": "1h"},
    headers={"X-Payment": "<base64 payment payload>"},
)
print(response.json()["analysis"]["recommendation"])
```
        """,
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # CORS 中间件
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Payment-Response", "X-Request-ID"],
    )

    # 安全头中间件
    app.add_middleware(SecurityHeadersMiddleware)

    # 请求日志中间件
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()

        # 生成请求 ID
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]

        logger.info(f"[{request_id}] {request.method} {request.url.path}")
        increment_counter("vibetrade_requests_total")

        try:
            response = await call_next(request)

            duration = (time.time() - start_time) * 1000
            logger.info(
                f"[{request_id}] 完成 {response.status_code} - {duration:.2f}ms"
            )
            record_histogram("vibetrade_request_duration_seconds", duration / 1000)

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration:.2f}ms"

            return response

        except Exception as e:
            duration = (time.time() - start_time) * 1000
            logger.error(
                f"[{request_id}] 错误 - {duration:.2f}ms - {str(e)}"
            )
            raise

    # 业务异常
    @app.exception_handler(VibeTradeError)
    async def vibetrade_exception_handler(request: Request, exc: VibeTradeError):
        if isinstance(exc, PaymentRequiredError):
            increment_counter("vibetrade_payment_required_total")
            logger.info(f"{request.url.path} 缺少支付头，返回 402")
        elif exc.status_code >= 500:
            logger.error(f"{request.url.path} 处理失败: {exc.message}")
        else:
            logger.warning(f"{request.url.path} 请求无效: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # 请求体校验失败统一为 400
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = _validation_details(exc)
        logger.warning(f"{request.url.path} 请求体校验失败: {details}")
        return JSONResponse(
            status_code=400,
            content=error_envelope(
                error="Missing required fields",
                code=ErrorCode.INVALID_REQUEST,
                details=details,
            ),
        )

    # 404 / 405 等框架异常
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            content = error_envelope(
                error="Not Found",
                code=ErrorCode.NOT_FOUND,
                details=f"Endpoint {request.method} {request.url.path} not found",
            )
        else:
            content = error_envelope(
                error=str(exc.detail),
                code=ErrorCode.INVALID_REQUEST,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=getattr(exc, "headers", None),
        )

    # 全局异常处理
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"未处理的异常: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_envelope(
                error="Internal Server Error",
                code=ErrorCode.INTERNAL_ERROR,
                details="服务器内部错误，请稍后重试",
            ),
        )

    # 注册路由
    app.include_router(health_router)
    app.include_router(analysis_router)
    app.include_router(entrypoints_router)
    app.include_router(metrics_router)

    return app


# 创建应用实例
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "vibetrade.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
