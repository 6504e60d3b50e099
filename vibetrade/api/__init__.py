"""
API 层 - FastAPI 路由定义

提供 RESTful API 接口，作为系统的统一入口。

包含：
- /api/v1/trading-analysis: 单标的付费分析
- /api/v1/bulk-analysis: 批量付费分析
- /entrypoints/analyze/invoke: analyze 入口
- /health, /api/docs, /api/v1/status: 状态与文档
- /metrics/system: 系统指标
"""

from vibetrade.api.main import app, create_app
from vibetrade.api.schemas import (
    TradingAnalysisRequest,
    EntrypointRequest,
    BulkAnalysisRequest,
    AnalysisOutput,
    EntrypointResponse,
    HealthResponse,
    ErrorResponse,
)
from vibetrade.api.dependencies import (
    get_orchestrator,
    get_payment_gate,
    get_settings,
    Settings,
    ServiceContainer,
)

__all__ = [
    # 应用
    "app",
    "create_app",
    # 请求模型
    "TradingAnalysisRequest",
    "EntrypointRequest",
    "BulkAnalysisRequest",
    # 响应模型
    "AnalysisOutput",
    "EntrypointResponse",
    "HealthResponse",
    "ErrorResponse",
    # 依赖
    "get_orchestrator",
    "get_payment_gate",
    "get_settings",
    "Settings",
    "ServiceContainer",
]
