"""
Per-plugin API for the Zakat calculator. Mounted at /api/.
"""
from decimal import Decimal
from typing import Any, Dict, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .calculator import calculate_zakat


class ZakatRequest(BaseModel):
    assets: Dict[str, Decimal] = {}
    liabilities: Dict[str, Decimal] = {}
    gold_price_per_gram: Optional[Decimal] = None


class ZakatResponse(BaseModel):
    total_assets: Decimal
    total_liabilities: Decimal
    net_wealth: Decimal
    nisab_value: Decimal
    zakat_due: Decimal
    eligible: bool


def get_router(companion_app: Any) -> Optional[APIRouter]:
    """Return router for this plugin; mounted with prefix /api."""
    router = APIRouter(tags=["Zakat"])

    @router.post("/zakat", response_model=ZakatResponse)
    def compute_zakat(body: ZakatRequest):
        """Zakat due for the given assets and liabilities; gold price defaults to the configured one."""
        zakat_config = companion_app.config.section("zakat")
        price = body.gold_price_per_gram
        if price is None:
            price = zakat_config["gold_price_per_gram"]
        try:
            result = calculate_zakat(
                body.assets,
                body.liabilities,
                gold_price_per_gram=price,
                nisab_gold_grams=zakat_config["nisab_gold_grams"],
                rate=zakat_config["rate"],
            )
        except ValueError as e:
            return JSONResponse(status_code=400, content={"error": str(e)})
        return ZakatResponse(**result._asdict())

    return router
