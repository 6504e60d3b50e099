"""
Vibe Trade - 基于 x402 微支付的 AI 交易情报服务

基于 Clean/Hex 六边形架构构建，提供：
- 技术指标与市场情绪聚合
- BUY / SELL / HOLD 交易建议
- x402 按次付费

架构层次：
- domain: 核心领域模型
- ports: 端口接口定义
- adapters: 数据源与 LLM 适配器
- orchestrator: 路由、并行获取与建议合成
- infrastructure: 基础设施（日志、指标、错误、支付）
- api: FastAPI 路由

快速开始：
```python
import asyncio

from vibetrade.adapters import MockTechnicalAdapter, MockSentimentAdapter
from vibetrade.orchestrator import create_orchestrator
from vibetrade.domain.models import AnalysisRequest

orchestrator = create_orchestrator(MockTechnicalAdapter(), MockSentimentAdapter())
result = asyncio.run(orchestrator.analyze(AnalysisRequest(symbol="BTC")))
```
"""

__version__ = "1.0.0"
__author__ = "Vibe Trade Team"

# 核心领域模型
from vibetrade.domain.models import (
    AnalysisRequest,
    AnalysisResult,
    Recommendation,
    RoutingDecision,
    SourceResult,
    Timeframe,
    TradeAction,
)

# 编排器
from vibetrade.orchestrator import (
    Orchestrator,
    SourceRouter,
    create_orchestrator,
)

# API 应用
from vibetrade.api import app, create_app

__all__ = [
    # 版本信息
    "__version__",
    "__author__",
    # 领域模型
    "AnalysisRequest",
    "AnalysisResult",
    "Recommendation",
    "RoutingDecision",
    "SourceResult",
    "Timeframe",
    "TradeAction",
    # 编排器
    "Orchestrator",
    "SourceRouter",
    "create_orchestrator",
    # API
    "app",
    "create_app",
]
