"""
依赖注入 - FastAPI 依赖配置

集中管理所有服务的创建和注入，
确保单一实例和正确的生命周期管理。
"""

from functools import lru_cache
from typing import Optional
import os

from dotenv import load_dotenv

from vibetrade.domain.models import SOURCE_TECHNICAL, SOURCE_SENTIMENT, SOURCE_MACRO
from vibetrade.ports.interfaces import DataSourcePort, LLMPort
from vibetrade.adapters import (
    MockTechnicalAdapter,
    MockSentimentAdapter,
    MockMacroAdapter,
    X402Client,
    X402SourceAdapter,
    LiteLLMAdapter,
    MockReasoningAdapter,
)
from vibetrade.orchestrator import Orchestrator, create_orchestrator
from vibetrade.infrastructure.logging import get_logger
from vibetrade.infrastructure.payment import PaymentGate


load_dotenv()

logger = get_logger(__name__)


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).lower() == 'true'


# 配置类
class Settings:
    """应用配置"""

    # 基本配置
    APP_NAME: str = "Vibe Trade"
    APP_VERSION: str = "1.0.0"
    MODEL_NAME: str = "vibe-trade-v1"
    ENVIRONMENT: str = os.getenv('ENVIRONMENT', 'development')
    DEBUG: bool = _env_flag('DEBUG')

    # 服务配置
    HOST: str = os.getenv('HOST', '0.0.0.0')
    PORT: int = int(os.getenv('PORT', '3000'))

    # 日志配置
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')
    LOG_JSON: bool = _env_flag('LOG_JSON')

    # CORS 配置
    CORS_ORIGINS: list = os.getenv('CORS_ORIGINS', '*').split(',')

    # x402 支付配置
    X402_NETWORK: str = os.getenv('X402_NETWORK') or os.getenv('NETWORK') or 'base-sepolia'
    X402_RECIPIENT_ADDRESS: str = (
        os.getenv('X402_RECIPIENT_ADDRESS')
        or os.getenv('PAY_TO')
        or '0x0000000000000000000000000000000000000000'
    )
    FACILITATOR_URL: Optional[str] = os.getenv('FACILITATOR_URL')

    # 价格（USDC 最小单位）
    ENTRY_PRICE: int = int(os.getenv('ENTRY_PRICE', '100000'))
    BULK_PRICE_PER_SYMBOL: int = int(os.getenv('BULK_PRICE_PER_SYMBOL', '50000'))

    # 数据源配置
    SOURCE_TIMEOUT_MS: int = int(os.getenv('SOURCE_TIMEOUT_MS', '2000'))
    SOURCE_MODE: str = os.getenv('SOURCE_MODE', 'mock').lower()
    TAAPI_ENDPOINT: Optional[str] = os.getenv('TAAPI_ENDPOINT')
    AIXBT_ENDPOINT: Optional[str] = os.getenv('AIXBT_ENDPOINT')
    MACRO_ENDPOINT: Optional[str] = os.getenv('MACRO_ENDPOINT')
    ENABLE_MACRO_SOURCE: bool = _env_flag('ENABLE_MACRO_SOURCE')
    X402_HTTP_TIMEOUT: float = float(os.getenv('X402_HTTP_TIMEOUT', '10'))

    # LLM 配置
    ENABLE_LLM_INSIGHT: bool = _env_flag('ENABLE_LLM_INSIGHT')
    LLM_PROVIDER: str = os.getenv('LLM_PROVIDER', 'openai')
    LLM_MODEL: str = os.getenv('LLM_MODEL', 'gpt-4o-mini')
    OPENAI_API_KEY: Optional[str] = os.getenv('OPENAI_API_KEY')

    @property
    def source_timeout_seconds(self) -> float:
        return self.SOURCE_TIMEOUT_MS / 1000


@lru_cache()
def get_settings() -> Settings:
    """获取应用配置"""
    return Settings()


class ServiceContainer:
    """
    服务容器 - 管理所有服务实例

    每个进程创建一次（见 get_service_container），
    x402 客户端与支付网关都在这里显式构造。
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

        # 入站支付网关
        self._payment_gate = PaymentGate(
            network=self.settings.X402_NETWORK,
            recipient=self.settings.X402_RECIPIENT_ADDRESS,
            facilitator_url=self.settings.FACILITATOR_URL,
        )

        # x402 客户端（仅 x402 模式）
        self._x402_client: Optional[X402Client] = None
        if self.settings.SOURCE_MODE == 'x402':
            self._x402_client = X402Client(
                network=self.settings.X402_NETWORK,
                timeout=self.settings.X402_HTTP_TIMEOUT,
            )

        # 数据源
        self._technical = self._init_source(
            SOURCE_TECHNICAL, self.settings.TAAPI_ENDPOINT, MockTechnicalAdapter
        )
        self._sentiment = self._init_source(
            SOURCE_SENTIMENT, self.settings.AIXBT_ENDPOINT, MockSentimentAdapter
        )
        self._macro: Optional[DataSourcePort] = None
        if self.settings.ENABLE_MACRO_SOURCE:
            self._macro = self._init_source(
                SOURCE_MACRO, self.settings.MACRO_ENDPOINT, MockMacroAdapter
            )

        # LLM 适配器（可选）
        self._llm: Optional[LiteLLMAdapter] = None
        self._init_llm()

        self._reasoning: Optional[LLMPort] = None
        if self.settings.ENABLE_LLM_INSIGHT:
            self._reasoning = self._llm or MockReasoningAdapter()

        # 初始化编排器
        self._orchestrator = create_orchestrator(
            technical_source=self._technical,
            sentiment_source=self._sentiment,
            macro_source=self._macro,
            llm_port=self._llm,
            reasoning_port=self._reasoning,
            timeout_seconds=self.settings.source_timeout_seconds,
            entry_price=self.settings.ENTRY_PRICE,
        )

        logger.info(
            f"服务容器就绪: mode={self.settings.SOURCE_MODE} "
            f"macro={self._macro is not None} llm={self._llm is not None} "
            f"insight={self._reasoning is not None}"
        )

    def _init_source(self, name: str, endpoint: Optional[str], mock_cls) -> DataSourcePort:
        """按 SOURCE_MODE 创建数据源，x402 模式缺少端点时退回 mock"""
        if self._x402_client is None:
            return mock_cls()
        if not endpoint:
            logger.warning(f"{name} 未配置端点，使用 mock 数据源")
            return mock_cls()

        return X402SourceAdapter(name=name, endpoint=endpoint, client=self._x402_client)

    def _init_llm(self):
        """初始化 LLM 适配器"""
        api_key = self.settings.OPENAI_API_KEY
        if api_key:
            self._llm = LiteLLMAdapter(
                provider=self.settings.LLM_PROVIDER,
                model=self.settings.LLM_MODEL,
                api_key=api_key,
                timeout=self.settings.source_timeout_seconds,
            )

    @property
    def orchestrator(self) -> Orchestrator:
        """获取编排器实例"""
        return self._orchestrator

    @property
    def payment_gate(self) -> PaymentGate:
        """获取支付网关"""
        return self._payment_gate

    @property
    def components(self) -> dict:
        """各组件的配置状态"""
        return {
            "technical": type(self._technical).__name__,
            "sentiment": type(self._sentiment).__name__,
            "macro": type(self._macro).__name__ if self._macro else "disabled",
            "router": "llm" if self._llm else "default",
            "llm_insight": type(self._reasoning).__name__ if self._reasoning else "disabled",
        }


@lru_cache()
def get_service_container() -> ServiceContainer:
    """
    获取服务容器

    使用 lru_cache 确保只创建一次
    """
    return ServiceContainer()


def get_orchestrator() -> Orchestrator:
    """FastAPI 依赖：获取编排器"""
    container = get_service_container()
    return container.orchestrator


def get_payment_gate() -> PaymentGate:
    """FastAPI 依赖：获取支付网关"""
    container = get_service_container()
    return container.payment_gate
