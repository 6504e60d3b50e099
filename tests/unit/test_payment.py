"""
x402 支付网关测试
"""

import base64
import json
import pytest

from vibetrade.infrastructure.payment import (
    PaymentGate,
    encode_payment_header,
    decode_payment_header,
    receipt_from_payload,
)
from vibetrade.infrastructure.errors import PaymentRequiredError


RECIPIENT = "0x1111111111111111111111111111111111111111"


@pytest.fixture
def gate():
    return PaymentGate(network="base-sepolia", recipient=RECIPIENT)


class TestHeaderCodec:
    """支付头编解码"""

    def test_decode_valid_header(self):
        header = base64.b64encode(json.dumps({"amount": "100000"}).encode()).decode()
        assert decode_payment_header(header) == {"amount": "100000"}

    @pytest.mark.parametrize("header", [
        None,
        "",
        "not-base64!!",
        base64.b64encode(b"not json").decode(),
        base64.b64encode(b"[1, 2]").decode(),
    ])
    def test_decode_invalid_returns_none(self, header):
        """测试格式错误不抛异常"""
        assert decode_payment_header(header) is None

    def test_encode_is_base64_json(self):
        header = encode_payment_header({"status": "pending"})
        assert json.loads(base64.b64decode(header)) == {"status": "pending"}

    def test_receipt_defaults(self):
        """测试缺失载荷时的 pending 默认回执"""
        receipt = receipt_from_payload(None, network="base")
        assert receipt.status == "pending"
        assert receipt.transaction_hash == "0x"
        assert receipt.network == "base"
        assert receipt.timestamp > 0


class TestPaymentGate:
    """PaymentGate 测试类"""

    def test_missing_header_requires_payment(self, gate):
        """测试缺少支付头返回支付描述"""
        with pytest.raises(PaymentRequiredError) as exc_info:
            gate.verify(None, 100000)

        error = exc_info.value
        assert error.status_code == 402
        body = error.to_dict()
        assert body["error"] == "Payment Required"
        assert body["code"] == "PAYMENT_REQUIRED"
        assert body["payment_required"] == {
            "amount": "100000",
            "currency": "USDC",
            "network": "base-sepolia",
            "recipient": RECIPIENT,
            "description": "Trading analysis request",
        }
        assert isinstance(body["timestamp"], int)

    def test_blank_header_requires_payment(self, gate):
        with pytest.raises(PaymentRequiredError):
            gate.verify("   ", 100000)

    def test_valid_header_accepted(self, gate):
        """测试有效支付头生成回执"""
        header = encode_payment_header({
            "amount": "100000",
            "payer": "0xpayer",
            "nonce": 7,
            "timestamp": 1700000000000,
        })

        receipt = gate.verify(header, 100000)

        assert receipt.amount == "100000"
        assert receipt.payer == "0xpayer"
        assert receipt.nonce == 7
        assert receipt.recipient == RECIPIENT
        assert receipt.status == "pending"

    def test_malformed_header_accepted_as_placeholder(self, gate):
        """测试无法解码的支付头按占位支付处理"""
        receipt = gate.verify("opaque-token", 50000)
        assert receipt.amount == "50000"
        assert receipt.status == "pending"

    def test_response_header_round_trip(self, gate):
        receipt = gate.verify("opaque-token", 100000)
        decoded = decode_payment_header(PaymentGate.response_header(receipt))
        assert decoded["status"] == "pending"
        assert decoded["amount"] == "100000"

    def test_facilitator_in_requirement(self):
        gate = PaymentGate("base", RECIPIENT, facilitator_url="https://facilitator.example")
        requirement = gate.requirement(100000).to_dict()
        assert requirement["facilitator_url"] == "https://facilitator.example"
