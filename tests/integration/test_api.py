"""
API 集成测试
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock

from vibetrade.api.main import create_app
from vibetrade.api.dependencies import (
    Settings,
    get_orchestrator,
    get_payment_gate,
    get_service_container,
    get_settings,
)
from vibetrade.domain.models import SOURCE_TECHNICAL, SOURCE_SENTIMENT
from vibetrade.infrastructure.payment import (
    PaymentGate,
    PAYMENT_HEADER,
    PAYMENT_RESPONSE_HEADER,
    encode_payment_header,
    decode_payment_header,
)
from vibetrade.orchestrator import create_orchestrator


RECIPIENT = "0x2222222222222222222222222222222222222222"
PAID = {PAYMENT_HEADER: encode_payment_header({"amount": "100000", "payer": "0xbuyer"})}


@pytest.fixture
def test_settings():
    """固定价格与网络的配置"""
    settings = Settings()
    settings.ENTRY_PRICE = 100000
    settings.BULK_PRICE_PER_SYMBOL = 50000
    settings.X402_NETWORK = "base-sepolia"
    return settings


@pytest.fixture
def payment_gate():
    return PaymentGate(network="base-sepolia", recipient=RECIPIENT)


@pytest.fixture
def orchestrator(technical_source, sentiment_source):
    """使用立即返回的数据源替身"""
    return create_orchestrator(
        technical_source=technical_source,
        sentiment_source=sentiment_source,
        timeout_seconds=0.5,
    )


@pytest.fixture
def mock_container():
    container = Mock()
    container.components = {"technical": "StubSource", "sentiment": "StubSource"}
    return container


def build_client(orchestrator, payment_gate, test_settings, mock_container):
    app = create_app()

    # 覆盖依赖注入
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_payment_gate] = lambda: payment_gate
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_service_container] = lambda: mock_container

    return TestClient(app)


@pytest.fixture
def test_client(orchestrator, payment_gate, test_settings, mock_container):
    """创建测试客户端"""
    return build_client(orchestrator, payment_gate, test_settings, mock_container)


class TestHealthEndpoints:
    """健康检查端点测试"""

    def test_health_check(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "Vibe Trade"
        assert data["version"] == "1.0.0"
        assert data["components"]["technical"] == "StubSource"

    def test_api_docs(self, test_client):
        response = test_client.get("/api/docs")

        assert response.status_code == 200
        data = response.json()
        assert "POST /api/v1/trading-analysis" in data["endpoints"]
        assert data["payment"]["protocol"] == "x402"
        assert data["payment"]["prices"]["single_analysis"] == "$0.10"
        assert data["payment"]["prices"]["bulk_analysis"] == "$0.05 per symbol"

    def test_status(self, test_client):
        response = test_client.get("/api/v1/status")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "operational"
        assert data["uptime"] >= 0

    def test_security_headers(self, test_client):
        response = test_client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "X-Request-ID" in response.headers
        assert response.headers["X-Response-Time"].endswith("ms")

    def test_unknown_route(self, test_client):
        """测试未知路由的 404 信封"""
        response = test_client.get("/api/v1/nope")

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "Not Found"
        assert data["code"] == "NOT_FOUND"
        assert data["details"] == "Endpoint GET /api/v1/nope not found"
        assert isinstance(data["timestamp"], int)


class TestTradingAnalysis:
    """单标的分析端点测试"""

    def test_payment_required(self, test_client, technical_source):
        """测试缺少支付头返回 402 支付描述"""
        response = test_client.post(
            "/api/v1/trading-analysis",
            json={"symbol": "BTC", "timeframe": "1h"},
        )

        assert response.status_code == 402
        data = response.json()
        assert data["error"] == "Payment Required"
        assert data["code"] == "PAYMENT_REQUIRED"
        assert data["payment_required"]["amount"] == "100000"
        assert data["payment_required"]["currency"] == "USDC"
        assert data["payment_required"]["network"] == "base-sepolia"
        assert data["payment_required"]["recipient"] == RECIPIENT
        assert technical_source.calls == []

    @pytest.mark.parametrize("body", [
        {"symbol": "BTC"},
        {"timeframe": "1h"},
        {"symbol": "", "timeframe": "1h"},
        {"symbol": "   ", "timeframe": "1h"},
        {"symbol": "BTC", "timeframe": "2h"},
    ])
    def test_validation_before_payment(self, test_client, technical_source, body):
        """测试请求体无效时先返回 400，而不是 402"""
        response = test_client.post("/api/v1/trading-analysis", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Missing required fields"
        assert data["code"] == "INVALID_REQUEST"
        assert data["details"]
        assert technical_source.calls == []

    def test_paid_analysis(self, test_client):
        """测试带支付头的完整分析"""
        response = test_client.post(
            "/api/v1/trading-analysis",
            json={"symbol": "btc", "timeframe": "1h", "account_address": "0xabc"},
            headers=PAID,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["symbol"] == "BTC"
        assert data["analysis"]["technical"]["trend"] == "uptrend"
        assert data["analysis"]["sentiment"]["market_sentiment"] == "bullish"
        assert data["analysis"]["recommendation"] == {
            "action": "BUY",
            "confidence": 0.78,
            "reasoning": "Technical breakout confirmed by positive sentiment",
        }
        assert data["metadata"]["sources_called"] == [SOURCE_TECHNICAL, SOURCE_SENTIMENT]
        assert data["metadata"]["total_cost"] == "90000"
        assert data["portfolio"] == {"address": "0xabc", "status": "pending"}

        receipt = decode_payment_header(response.headers[PAYMENT_RESPONSE_HEADER])
        assert receipt["status"] == "pending"
        assert receipt["amount"] == "100000"
        assert receipt["payer"] == "0xbuyer"
        assert response.headers["Cache-Control"] == "no-store"

    def test_slow_source_degrades(self, technical_source, slow_sentiment_source,
                                  payment_gate, test_settings, mock_container):
        """测试情绪面超时仍返回 200"""
        orchestrator = create_orchestrator(
            technical_source=technical_source,
            sentiment_source=slow_sentiment_source,
            timeout_seconds=0.05,
        )
        client = build_client(orchestrator, payment_gate, test_settings, mock_container)

        response = client.post(
            "/api/v1/trading-analysis",
            json={"symbol": "ETH", "timeframe": "4h"},
            headers=PAID,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["analysis"]["sentiment"] is None
        assert data["metadata"]["sources_called"] == [SOURCE_TECHNICAL]
        assert data["analysis"]["recommendation"]["reasoning"] == (
            "Technical indicators show strength"
        )


class TestEntrypoint:
    """analyze 入口测试"""

    def test_payment_required(self, test_client):
        response = test_client.post(
            "/entrypoints/analyze/invoke",
            json={"input": {"symbol": "BTC"}},
        )

        assert response.status_code == 402
        assert response.json()["payment_required"]["amount"] == "100000"

    def test_missing_input(self, test_client):
        response = test_client.post("/entrypoints/analyze/invoke", json={})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_REQUEST"

    def test_invoke(self, test_client):
        """测试 timeframe 默认 1h，响应带模型名"""
        response = test_client.post(
            "/entrypoints/analyze/invoke",
            json={"input": {"symbol": "BTC"}},
            headers=PAID,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["model"] == "vibe-trade-v1"
        assert data["output"]["timeframe"] == "1h"
        assert data["output"]["analysis"]["recommendation"]["action"] == "BUY"
        assert PAYMENT_RESPONSE_HEADER in response.headers


class TestBulkAnalysis:
    """批量分析端点测试"""

    def test_price_per_symbol(self, test_client):
        """测试按标的数量计价"""
        response = test_client.post(
            "/api/v1/bulk-analysis",
            json={"symbols": ["BTC", "ETH", "SOL"], "timeframe": "1d"},
        )

        assert response.status_code == 402
        assert response.json()["payment_required"]["amount"] == "150000"

    def test_paid_bulk(self, test_client):
        response = test_client.post(
            "/api/v1/bulk-analysis",
            json={"symbols": ["btc", "ETH", "BTC"], "timeframe": "1d"},
            headers=PAID,
        )

        assert response.status_code == 200
        data = response.json()
        assert [r["symbol"] for r in data["results"]] == ["BTC", "ETH"]
        assert data["total_price"] == "100000"
        assert data["results"][0]["metadata"]["total_cost"] == "45000"

    def test_empty_symbol_list(self, test_client):
        response = test_client.post(
            "/api/v1/bulk-analysis",
            json={"symbols": [], "timeframe": "1h"},
        )
        assert response.status_code == 400


class TestMetricsEndpoint:
    """指标端点测试"""

    def test_system_metrics(self, test_client):
        test_client.post("/api/v1/trading-analysis", json={"symbol": "BTC", "timeframe": "1h"})
        test_client.post(
            "/api/v1/trading-analysis",
            json={"symbol": "BTC", "timeframe": "1h"},
            headers=PAID,
        )

        response = test_client.get("/metrics/system")

        assert response.status_code == 200
        metrics = response.json()["metrics"]
        assert metrics["vibetrade_payment_required_total"]["value"] == 1
        assert metrics["vibetrade_analyses_total"]["value"] == 1
        assert metrics["vibetrade_source_taapi_success_total"]["value"] == 1
        assert metrics["vibetrade_requests_total"]["value"] >= 2
