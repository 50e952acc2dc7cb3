"""
Zakat due on net wealth: 2.5% when net wealth reaches the gold nisab.
"""
from collections import namedtuple
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping, Optional

ZAKAT_RATE = Decimal("0.025")
NISAB_GOLD_GRAMS = Decimal("87.48")

CENTS = Decimal("0.01")

ZakatResult = namedtuple(
    "ZakatResult",
    ["total_assets", "total_liabilities", "net_wealth", "nisab_value", "zakat_due", "eligible"],
)


def _dec(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _total(amounts: Optional[Mapping[str, Any]], kind: str) -> Decimal:
    total = Decimal("0")
    for key, value in (amounts or {}).items():
        amount = _dec(value or 0)
        if amount < 0:
            raise ValueError(f"{kind} '{key}' must not be negative")
        total += amount
    return total


def calculate_zakat(
    assets: Optional[Mapping[str, Any]],
    liabilities: Optional[Mapping[str, Any]],
    gold_price_per_gram: Any,
    nisab_gold_grams: Any = NISAB_GOLD_GRAMS,
    rate: Any = ZAKAT_RATE,
) -> ZakatResult:
    """Amounts in one currency; gold_price_per_gram in that currency. Raises ValueError on negatives."""
    price = _dec(gold_price_per_gram)
    if price < 0:
        raise ValueError("gold_price_per_gram must not be negative")

    total_assets = _total(assets, "asset")
    total_liabilities = _total(liabilities, "liability")
    net = total_assets - total_liabilities
    nisab = (_dec(nisab_gold_grams) * price).quantize(CENTS, ROUND_HALF_UP)
    eligible = net >= nisab and net > 0
    due = (net * _dec(rate)).quantize(CENTS, ROUND_HALF_UP) if eligible else Decimal("0.00")
    return ZakatResult(total_assets, total_liabilities, net, nisab, due, eligible)
