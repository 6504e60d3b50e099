"""
x402 支付网关 - 入站请求的支付检查

x402 约定：请求缺少 X-Payment 头时返回 402 及支付描述，
客户端完成支付后带上 X-Payment 头重试。

注意：这里只做头部存在性检查和占位解码，
不做任何签名或链上校验。
"""

import base64
import binascii
import json
import logging
import time
from typing import Optional, Dict, Any

from vibetrade.domain.models import PaymentRequirement, PaymentReceipt
from vibetrade.infrastructure.errors import PaymentRequiredError


logger = logging.getLogger(__name__)

PAYMENT_HEADER = "X-Payment"
PAYMENT_RESPONSE_HEADER = "X-Payment-Response"


# ==================== 编解码 ====================

def encode_payment_header(payload: Dict[str, Any]) -> str:
    """将支付载荷编码为 base64(JSON)"""
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode_payment_header(header: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    解码 base64(JSON) 支付头

    Args:
        header: 头部值

    Returns:
        解码后的字典；头部缺失或格式错误时返回 None，不抛异常
    """
    if not header:
        return None
    try:
        decoded = base64.b64decode(header, validate=True).decode("utf-8")
        payload = json.loads(decoded)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.warning(f"支付头解码失败: {e}")
        return None
    if not isinstance(payload, dict):
        logger.warning("支付头不是 JSON 对象")
        return None
    return payload


def receipt_from_payload(
    payload: Optional[Dict[str, Any]],
    network: str = "base-sepolia",
) -> PaymentReceipt:
    """从解码后的载荷构建回执，缺失字段使用 pending 默认值"""
    if not payload:
        return PaymentReceipt(network=network, timestamp=int(time.time() * 1000))

    nonce = payload.get("nonce")
    return PaymentReceipt(
        amount=str(payload.get("amount", "0")),
        currency=str(payload.get("currency", "USDC")),
        network=str(payload.get("network", network)),
        status=str(payload.get("status", "pending")),
        transaction_hash=str(payload.get("transaction_hash", "0x")),
        recipient=payload.get("recipient"),
        payer=payload.get("payer") or payload.get("from"),
        nonce=nonce if isinstance(nonce, int) else None,
        timestamp=int(payload.get("timestamp") or time.time() * 1000),
    )


# ==================== 网关 ====================

class PaymentGate:
    """
    入站支付网关

    由服务容器显式构造并注入到路由中。
    """

    def __init__(
        self,
        network: str,
        recipient: str,
        facilitator_url: Optional[str] = None,
    ):
        self.network = network
        self.recipient = recipient
        self.facilitator_url = facilitator_url

    def requirement(
        self,
        amount: int,
        description: str = "Trading analysis request",
    ) -> PaymentRequirement:
        """生成支付描述"""
        return PaymentRequirement(
            amount=str(amount),
            network=self.network,
            recipient=self.recipient,
            description=description,
            facilitator_url=self.facilitator_url,
        )

    def verify(
        self,
        header: Optional[str],
        amount: int,
        description: str = "Trading analysis request",
    ) -> PaymentReceipt:
        """
        检查支付头

        Args:
            header: X-Payment 头部值
            amount: 本次请求价格（USDC 最小单位）
            description: 支付说明

        Returns:
            PaymentReceipt: 占位解码得到的回执

        Raises:
            PaymentRequiredError: 缺少支付头
        """
        if not header or not header.strip():
            raise PaymentRequiredError(self.requirement(amount, description).to_dict())

        payload = decode_payment_header(header.strip())
        receipt = receipt_from_payload(payload, network=self.network)
        if payload is None:
            logger.warning("支付头无法解码，按占位支付处理")
        return PaymentReceipt(
            amount=str(amount),
            currency=receipt.currency,
            network=self.network,
            status="pending",
            transaction_hash=receipt.transaction_hash,
            recipient=self.recipient,
            payer=receipt.payer,
            nonce=receipt.nonce,
            timestamp=receipt.timestamp,
        )

    @staticmethod
    def response_header(receipt: PaymentReceipt) -> str:
        """生成 X-Payment-Response 头部值"""
        return encode_payment_header(receipt.to_dict())
