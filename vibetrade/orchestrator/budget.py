"""
支付预算 - 把收到的付款拆分为下游数据源预算

金额均为 USDC 最小单位（6 位小数）的整数，使用整数除法向下取整。
"""

from dataclasses import dataclass


ENTRY_PRICE = 100000           # $0.10 USDC
BULK_PRICE_PER_SYMBOL = 50000  # $0.05 USDC
SPEND_PERCENT = 90             # 最多花费收入的 90%
CANDIDATE_SOURCES = 3          # TAAPI、AIXBT、Dreams LLM


@dataclass(frozen=True)
class PaymentBudget:
    """单次请求的支付预算"""
    price: int
    max_spend: int
    per_source: int

    @classmethod
    def from_price(
        cls,
        price: int = ENTRY_PRICE,
        spend_percent: int = SPEND_PERCENT,
        source_count: int = CANDIDATE_SOURCES,
    ) -> "PaymentBudget":
        """
        由入口价格计算预算

        Args:
            price: 入口价格
            spend_percent: 可花费的百分比
            source_count: 候选数据源数量

        Returns:
            PaymentBudget: max_spend = price * 90 // 100，per_source = max_spend // 3
        """
        if price < 0:
            raise ValueError("price must be non-negative")
        if source_count <= 0:
            raise ValueError("source_count must be positive")
        max_spend = price * spend_percent // 100
        return cls(
            price=price,
            max_spend=max_spend,
            per_source=max_spend // source_count,
        )
