"""
Billing calculator endpoints.

Pure computation over cleanerp_shared.billing; no database access and no
authentication, so the calculator works before sign-in.
"""

from __future__ import annotations

import math

from fastapi import APIRouter, Query

from cleanerp_shared.billing import (
    calculate_all_billing_frequencies,
    convert_billing_amount,
    format_currency,
)
from cleanerp_shared.config import settings
from cleanerp_shared.constants import BillingFrequency

from cleanerp_api.responses import wrap_response

router = APIRouter(prefix="/billing", tags=["billing"])


@router.get("/convert")
async def convert(
    amount: float = Query(..., description="Amount quoted in from_frequency"),
    from_frequency: BillingFrequency = Query(..., alias="from"),
    to_frequency: BillingFrequency = Query(..., alias="to"),
):
    converted = convert_billing_amount(amount, from_frequency, to_frequency)
    return wrap_response(
        {
            "amount": amount,
            "from": from_frequency,
            "to": to_frequency,
            "converted": converted if math.isfinite(converted) else None,
        }
    )


@router.get("/breakdown")
async def breakdown(
    amount: float = Query(...),
    frequency: BillingFrequency = Query("weekly"),
    currency: str = Query(settings.default_currency, min_length=3, max_length=3),
):
    values = calculate_all_billing_frequencies(amount, frequency)
    return wrap_response(
        {
            "amount": amount,
            "frequency": frequency,
            **values.to_dict(),
            "formatted": {k: format_currency(v, currency) for k, v in values.to_dict().items()},
        }
    )
