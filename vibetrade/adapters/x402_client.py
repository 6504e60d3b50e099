"""
x402 客户端 - 实现 PaymentClientPort

Vibe Trade 用收到的 USDC 付费调用其他 x402 端点（TAAPI、AIXBT、Dreams 等）：
1. 首次请求（通常得到 402）
2. 根据 payment_required 生成支付头
3. 带 X-Payment 头重试一次
4. 解码 X-Payment-Response 回执

支付头签名为占位实现，不做真实的钱包签名。
"""

import logging
import time
from typing import Optional, Dict, Any

import requests
from requests.adapters import HTTPAdapter

from vibetrade.ports.interfaces import (
    PaymentClientPort,
    PaidResponse,
    DataUnavailableError,
    PaymentFailedError,
)
from vibetrade.infrastructure.payment import (
    PAYMENT_HEADER,
    PAYMENT_RESPONSE_HEADER,
    encode_payment_header,
    decode_payment_header,
    receipt_from_payload,
)


logger = logging.getLogger(__name__)


class X402Client(PaymentClientPort):
    """
    x402 付费 HTTP 客户端

    由服务容器按进程显式创建一次，注入到需要付费调用的数据源中。
    """

    def __init__(
        self,
        network: str = "base-sepolia",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """
        初始化客户端

        Args:
            network: 支付网络
            timeout: HTTP 超时时间（秒）
            session: 可注入的 requests.Session
        """
        self.network = network
        self.timeout = timeout
        self.session = session or self._build_session()

    @staticmethod
    def _build_session() -> requests.Session:
        adapter = HTTPAdapter(pool_connections=10, pool_maxsize=10)
        session = requests.Session()
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def call(
        self,
        endpoint: str,
        payload: Dict[str, Any],
        amount: Optional[str] = None,
    ) -> PaidResponse:
        """调用 x402 端点，必要时支付并重试一次"""
        try:
            response = self.session.post(endpoint, json=payload, timeout=self.timeout)

            if response.status_code == 402:
                requirement = self._extract_requirement(response)
                if amount is not None and int(requirement.get("amount", 0)) > int(amount):
                    raise PaymentFailedError(
                        f"要价 {requirement.get('amount')} 超出预算 {amount}",
                        source=endpoint,
                    )
                header = self.create_payment_header(requirement)
                logger.info(f"向 {endpoint} 支付 {requirement.get('amount')} 后重试")
                response = self.session.post(
                    endpoint,
                    json=payload,
                    headers={PAYMENT_HEADER: header},
                    timeout=self.timeout,
                )

            response.raise_for_status()
            data = response.json()

        except requests.exceptions.Timeout:
            raise DataUnavailableError("x402 端点请求超时", source=endpoint)
        except requests.exceptions.RequestException as e:
            raise DataUnavailableError(f"x402 端点请求失败: {str(e)}", source=endpoint)
        except ValueError as e:
            raise DataUnavailableError(f"x402 端点响应解析失败: {str(e)}", source=endpoint)

        receipt = receipt_from_payload(
            decode_payment_header(response.headers.get(PAYMENT_RESPONSE_HEADER)),
            network=self.network,
        )
        return PaidResponse(data=data, receipt=receipt)

    @staticmethod
    def _extract_requirement(response: requests.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            body = {}
        requirement = body.get("payment_required") if isinstance(body, dict) else None
        if not isinstance(requirement, dict):
            raise PaymentFailedError("402 响应缺少 payment_required", source=response.url)
        return requirement

    def create_payment_header(self, requirement: Dict[str, Any]) -> str:
        """
        生成 X-Payment 头（占位实现）

        生产环境应使用钱包私钥签名 EIP-3009 授权。
        """
        now = int(time.time() * 1000)
        return encode_payment_header({
            "amount": str(requirement.get("amount", "0")),
            "recipient": requirement.get("recipient"),
            "network": requirement.get("network", self.network),
            "nonce": now,
            "timestamp": now,
        })
