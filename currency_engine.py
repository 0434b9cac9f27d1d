"""Conversion of USD/EUR/ZAR amounts into rand."""
from __future__ import annotations

import logging

from models import ExchangeRates, norm_currency
from values import to_number

logger = logging.getLogger(__name__)


def to_zar(amount: object, currency: str | None, rates: ExchangeRates) -> float:
    """Convert ``amount`` to ZAR; a missing rate or unknown currency contributes 0."""
    value = to_number(amount)
    code = norm_currency(currency)
    if code == "ZAR":
        return value
    if code == "USD":
        rate = to_number(rates.roe_origin)
    elif code == "EUR":
        rate = to_number(rates.roe_eur)
    else:
        logger.debug("Unsupported currency %r converted as 0", currency)
        return 0.0
    if not rate:
        if value:
            logger.debug("No %s/ZAR rate; %s %.2f contributes 0", code, code, value)
        return 0.0
    return value * rate


def customs_rate_for(currency: str | None, rates: ExchangeRates) -> float:
    """Rate applied to a product line's invoice value for customs purposes.

    USD lines use the customs override when one is set; EUR lines fall back to
    the customs USD rate when no EUR rate was captured.
    """
    code = norm_currency(currency)
    customs_usd = to_number(rates.customs_usd_rate)
    if code == "ZAR":
        return 1.0
    if code == "EUR":
        return to_number(rates.roe_eur) or customs_usd
    if code == "USD":
        return customs_usd
    return 0.0
