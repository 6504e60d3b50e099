"""
基础设施层 - 横切关注点

包含：
- logging: 结构化日志系统
- metrics: 指标收集系统
- errors: 错误定义与错误信封
- security: 安全中间件和输入清理
- payment: x402 入站支付网关
"""

from vibetrade.infrastructure.logging import (
    setup_logging,
    get_logger,
    LogContext,
    StructuredFormatter,
    SimpleFormatter,
)
from vibetrade.infrastructure.metrics import (
    MetricsRegistry,
    Counter,
    Histogram,
    get_metrics_registry,
    increment_counter,
    record_histogram,
    record_source_outcome,
)
from vibetrade.infrastructure.errors import (
    VibeTradeError,
    ValidationError,
    PaymentRequiredError,
    DataUnavailableError,
    LLMError,
    TimeoutError,
    ErrorHandler,
    error_envelope,
)
from vibetrade.infrastructure.security import (
    SecurityHeadersMiddleware,
    InputSanitizer,
)
from vibetrade.infrastructure.payment import (
    PaymentGate,
    PAYMENT_HEADER,
    PAYMENT_RESPONSE_HEADER,
    encode_payment_header,
    decode_payment_header,
    receipt_from_payload,
)

__all__ = [
    # 日志
    "setup_logging",
    "get_logger",
    "LogContext",
    "StructuredFormatter",
    "SimpleFormatter",
    # 指标
    "MetricsRegistry",
    "Counter",
    "Histogram",
    "get_metrics_registry",
    "increment_counter",
    "record_histogram",
    "record_source_outcome",
    # 错误
    "VibeTradeError",
    "ValidationError",
    "PaymentRequiredError",
    "DataUnavailableError",
    "LLMError",
    "TimeoutError",
    "ErrorHandler",
    "error_envelope",
    # 安全
    "SecurityHeadersMiddleware",
    "InputSanitizer",
    # 支付
    "PaymentGate",
    "PAYMENT_HEADER",
    "PAYMENT_RESPONSE_HEADER",
    "encode_payment_header",
    "decode_payment_header",
    "receipt_from_payload",
]
