"""
端口层 - 外部依赖的抽象接口
"""

from vibetrade.ports.interfaces import (
    PortError,
    DataUnavailableError,
    PaymentFailedError,
    DataSourcePort,
    LLMPort,
    PaymentClientPort,
    PaidResponse,
)

__all__ = [
    "PortError",
    "DataUnavailableError",
    "PaymentFailedError",
    "DataSourcePort",
    "LLMPort",
    "PaymentClientPort",
    "PaidResponse",
]
