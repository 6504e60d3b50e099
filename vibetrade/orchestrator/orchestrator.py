"""
请求编排器 - 交易分析的统一处理入口

处理流程：
1. 校验请求（空 symbol 在任何网络调用前拒绝）
2. 计算支付预算
3. 路由决策（LLM 或默认）
4. 并行获取被选中的数据源（各自限时）
5. 合成交易建议
6. 组装分析结果

设计原则：
1. 依赖注入：所有数据源与 LLM 通过构造函数注入
2. 失败降级：单个数据源失败只降低结果质量，不影响请求成功
"""

import asyncio
import json
import time
import uuid
from dataclasses import replace
from typing import Optional, List, Dict, Any

from vibetrade.domain.models import (
    AnalysisRequest,
    AnalysisResult,
    RoutingDecision,
    SOURCE_TECHNICAL,
    SOURCE_SENTIMENT,
    SOURCE_MACRO,
    SOURCE_REASONING,
)
from vibetrade.ports.interfaces import DataSourcePort, LLMPort
from vibetrade.orchestrator.router import SourceRouter
from vibetrade.orchestrator.fetcher import (
    DEFAULT_TIMEOUT_SECONDS,
    FanOutResult,
    call_with_timeout,
    fan_out,
)
from vibetrade.orchestrator.synthesizer import synthesize
from vibetrade.orchestrator.budget import PaymentBudget, ENTRY_PRICE
from vibetrade.infrastructure.errors import ValidationError
from vibetrade.infrastructure.logging import get_logger, LogContext
from vibetrade.infrastructure.metrics import increment_counter
from vibetrade.infrastructure.security import InputSanitizer


logger = get_logger(__name__)


class Orchestrator:
    """
    交易分析编排器

    职责：
    1. 接收 AnalysisRequest
    2. 调用 SourceRouter 决定数据源
    3. 扇出调用数据源并合成建议
    4. 返回 AnalysisResult
    """

    def __init__(
        self,
        technical_source: DataSourcePort,
        sentiment_source: DataSourcePort,
        macro_source: Optional[DataSourcePort] = None,
        llm_port: Optional[LLMPort] = None,
        reasoning_port: Optional[LLMPort] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        entry_price: int = ENTRY_PRICE,
    ):
        """
        初始化编排器

        Args:
            technical_source: 技术指标数据源
            sentiment_source: 市场情绪数据源
            macro_source: 宏观数据源（可选，配置后总是参与扇出）
            llm_port: 路由用 LLM（可选）
            reasoning_port: 市场推理 LLM（可选，配置后在扇出后追加推理）
            timeout_seconds: 单个数据源超时（秒）
            entry_price: 入口价格（USDC 最小单位）
        """
        self.technical = technical_source
        self.sentiment = sentiment_source
        self.macro = macro_source
        self.reasoning = reasoning_port
        self.timeout_seconds = timeout_seconds
        self.entry_price = entry_price

        self.router = SourceRouter(llm_port=llm_port)

    def validate(self, request: AnalysisRequest) -> AnalysisRequest:
        """
        校验并规范化请求

        Raises:
            ValidationError: symbol 为空
        """
        symbol = InputSanitizer.normalize_symbol(request.symbol)
        if not symbol:
            raise ValidationError("Symbol cannot be empty.", field="symbol")

        query = (request.query or "").strip()
        request_id = request.request_id or f"REQ_{uuid.uuid4().hex[:12]}"
        return replace(request, symbol=symbol, query=query, request_id=request_id)

    def _select_sources(self, decision: RoutingDecision) -> List[DataSourcePort]:
        sources: List[DataSourcePort] = []
        if decision.call_technical:
            sources.append(self.technical)
        if decision.call_sentiment:
            sources.append(self.sentiment)
        if self.macro is not None:
            sources.append(self.macro)
        return sources

    async def _reason(
        self,
        request: AnalysisRequest,
        fetched: FanOutResult,
    ) -> Optional[Dict[str, Any]]:
        """扇出之后的可选 LLM 推理，失败与数据源一样静默降级"""
        if self.reasoning is None or not fetched.sources_called:
            return None

        market_data = json.dumps({
            "symbol": request.symbol,
            "timeframe": request.timeframe.value,
            "technical": fetched.data(SOURCE_TECHNICAL),
            "sentiment": fetched.data(SOURCE_SENTIMENT),
            "macro": fetched.data(SOURCE_MACRO),
        }, ensure_ascii=False)

        result = await call_with_timeout(
            SOURCE_REASONING,
            lambda: self.reasoning.analyze_market(market_data),
            timeout=self.timeout_seconds,
        )
        if result.succeeded:
            fetched.sources_called.append(SOURCE_REASONING)
        return result.data

    async def analyze(
        self,
        request: AnalysisRequest,
        price: Optional[int] = None,
    ) -> AnalysisResult:
        """
        处理交易分析请求

        Args:
            request: 分析请求
            price: 本次请求收取的价格，默认入口价格

        Returns:
            AnalysisResult: 分析结果

        Raises:
            ValidationError: 请求无效（在任何网络调用之前抛出）
        """
        start_time = time.time()
        request = self.validate(request)

        with LogContext(logger, f"分析 {request.symbol}", request_id=request.request_id):
            # 1. 预算，单源上限随请求传给数据源
            budget = PaymentBudget.from_price(
                self.entry_price if price is None else price
            )
            request = replace(request, budget_per_source=str(budget.per_source))

            # 2. 路由决策
            decision = await self.router.route(request.symbol, request.query)
            logger.info(
                f"路由决策: taapi={decision.call_technical} aixbt={decision.call_sentiment} "
                f"({decision.source})，单源预算 {budget.per_source}",
                extra={'request_id': request.request_id},
            )

            # 3. 并行获取
            fetched = await fan_out(
                request,
                self._select_sources(decision),
                timeout=self.timeout_seconds,
            )
            technical = fetched.data(SOURCE_TECHNICAL)
            sentiment = fetched.data(SOURCE_SENTIMENT)

            # 4. 合成建议
            recommendation = synthesize(technical, sentiment)
            llm_insight = await self._reason(request, fetched)

        increment_counter("vibetrade_analyses_total")

        return AnalysisResult(
            request_id=request.request_id,
            symbol=request.symbol,
            timeframe=request.timeframe,
            recommendation=recommendation,
            technical=technical,
            sentiment=sentiment,
            macro=fetched.data(SOURCE_MACRO),
            llm_insight=llm_insight,
            portfolio=(
                {"address": request.account_address, "status": "pending"}
                if request.account_address else None
            ),
            sources_called=fetched.sources_called,
            total_cost=str(budget.max_spend),
            budget_per_source=str(budget.per_source),
            routing=decision,
            processing_time_ms=int((time.time() - start_time) * 1000),
        )

    async def analyze_many(
        self,
        requests: List[AnalysisRequest],
        price: Optional[int] = None,
    ) -> List[AnalysisResult]:
        """
        并行处理多个分析请求（批量分析）

        所有请求先统一校验，任一无效则整体拒绝。
        """
        validated = [self.validate(request) for request in requests]
        return list(await asyncio.gather(
            *[self.analyze(request, price=price) for request in validated]
        ))


# 工厂函数：便于创建 Orchestrator 实例
def create_orchestrator(
    technical_source: DataSourcePort,
    sentiment_source: DataSourcePort,
    macro_source: Optional[DataSourcePort] = None,
    llm_port: Optional[LLMPort] = None,
    reasoning_port: Optional[LLMPort] = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    entry_price: int = ENTRY_PRICE,
) -> Orchestrator:
    """
    创建 Orchestrator 实例

    便于依赖注入和测试
    """
    return Orchestrator(
        technical_source=technical_source,
        sentiment_source=sentiment_source,
        macro_source=macro_source,
        llm_port=llm_port,
        reasoning_port=reasoning_port,
        timeout_seconds=timeout_seconds,
        entry_price=entry_price,
    )
