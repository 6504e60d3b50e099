"""
端口接口定义 - 依赖倒置的核心

编排层只依赖这些接口，具体实现（mock 数据源、x402 付费数据源、
LiteLLM 等）由适配器层提供，通过配置切换。

设计原则：
1. 能力集多态：任何实现 fetch(request) -> dict 的对象都可作为数据源
2. 依赖倒置：编排层依赖接口，不依赖具体实现
3. 异常抽象：接口定义标准异常类型
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any

from vibetrade.domain.models import AnalysisRequest, PaymentReceipt


# ==================== 异常定义 ====================

class PortError(Exception):
    """端口层基础异常"""
    def __init__(self, message: str, source: str = "unknown"):
        self.message = message
        self.source = source
        super().__init__(f"[{source}] {message}")


class DataUnavailableError(PortError):
    """数据不可用异常"""
    pass


class PaymentFailedError(PortError):
    """下游 x402 支付失败"""
    pass


# ==================== 端口接口 ====================

class DataSourcePort(ABC):
    """上游数据源端口 - 技术指标、市场情绪、宏观等"""

    #: 数据源名称，写入 sources_called
    name: str = "unknown"

    @abstractmethod
    async def fetch(self, request: AnalysisRequest) -> Dict[str, Any]:
        """
        获取数据源结果

        Args:
            request: 分析请求

        Returns:
            Dict: 数据源返回的原始载荷

        Raises:
            DataUnavailableError: 数据不可用
        """
        pass


class LLMPort(ABC):
    """LLM 服务端口"""

    @abstractmethod
    async def classify_route(self, symbol: str, query: str) -> str:
        """
        让 LLM 决定调用哪些数据源

        Args:
            symbol: 交易标的
            query: 用户的自然语言上下文

        Returns:
            str: LLM 原始输出（期望为包含 call_taapi / call_aixbt 的 JSON）
        """
        pass

    @abstractmethod
    async def analyze_market(self, market_data: str) -> Dict[str, Any]:
        """
        基于已聚合的市场数据生成推理结论

        Args:
            market_data: 序列化后的市场数据

        Returns:
            Dict: 结构化推理结果
        """
        pass


class PaymentClientPort(ABC):
    """x402 付费调用端口 - 用收到的 USDC 支付下游服务"""

    @abstractmethod
    def call(
        self,
        endpoint: str,
        payload: Dict[str, Any],
        amount: Optional[str] = None,
    ) -> "PaidResponse":
        """
        调用 x402 端点，遇到 402 时完成支付并重试

        Args:
            endpoint: 下游 URL
            payload: 请求体
            amount: 本次调用的支付预算（可选）

        Returns:
            PaidResponse: 响应数据与支付回执
        """
        pass


class PaidResponse:
    """x402 调用结果"""

    def __init__(self, data: Any, receipt: PaymentReceipt):
        self.data = data
        self.receipt = receipt
