"""
x402 付费数据源适配器 - 实现 DataSourcePort

通过注入的 PaymentClientPort 付费调用真实的上游端点。
SOURCE_MODE=x402 时由服务容器装配。
"""

import asyncio
from typing import Dict, Any

from vibetrade.domain.models import AnalysisRequest
from vibetrade.ports.interfaces import (
    DataSourcePort,
    PaymentClientPort,
    DataUnavailableError,
)


class X402SourceAdapter(DataSourcePort):
    """
    x402 付费数据源

    支付上限取自请求上的 budget_per_source，批量与单次分析各按自己的价格计算。
    requests 为同步客户端，调用放到工作线程执行以免阻塞事件循环。
    超时取消只会丢弃结果，线程中的请求由 HTTP 超时兜底结束。
    """

    def __init__(self, name: str, endpoint: str, client: PaymentClientPort):
        """
        初始化适配器

        Args:
            name: 数据源名称
            endpoint: 上游 x402 端点
            client: 注入的 x402 客户端
        """
        self.name = name
        self.endpoint = endpoint
        self.client = client

    def _build_payload(self, request: AnalysisRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "symbol": request.symbol,
            "timeframe": request.timeframe.value,
        }
        if request.query:
            payload["query"] = request.query
        return payload

    async def fetch(self, request: AnalysisRequest) -> Dict[str, Any]:
        paid = await asyncio.to_thread(
            self.client.call,
            self.endpoint,
            self._build_payload(request),
            request.budget_per_source,
        )
        if not isinstance(paid.data, dict):
            raise DataUnavailableError("上游返回的不是 JSON 对象", source=self.name)
        return paid.data
