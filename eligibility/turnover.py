"""
Turnover extractor — pulls the minimum-turnover requirement out of free text.

Amounts are returned in Lakhs. Lakh-denominated phrasings are tried before
Crore-denominated ones; inside each family the patterns go from tightest
(currency marker after "turnover") to loosest (a bare "<n> crore").
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from eligibility.patterns import TURNOVER_FAMILIES

logger = logging.getLogger(__name__)


def _to_decimal(raw: str) -> Optional[Decimal]:
    try:
        value = Decimal(raw.replace(",", ""))
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def extract_turnover_lakhs(text: Optional[str]) -> Optional[Decimal]:
    """
    Return the turnover requirement in Lakhs, or None when no known
    phrasing is present.

    The first pattern whose first match parses to a usable figure wins.
    Zero, unparsable, or (for bounded patterns) out-of-range figures are
    skipped and the search moves on to the next pattern.
    """
    if not text:
        return None
    text = text.lower()

    for unit, multiplier, patterns in TURNOVER_FAMILIES:
        for pattern, upper_bound in patterns:
            match = pattern.search(text)
            if not match:
                continue
            amount = _to_decimal(match.group(1))
            if amount is None or amount <= 0:
                continue
            if upper_bound is not None and amount >= upper_bound:
                logger.debug("Ignoring out-of-range %s figure %s", unit, amount)
                continue
            lakhs = amount * multiplier
            logger.debug("Turnover requirement %s %s -> %s Lakh", amount, unit, lakhs)
            return lakhs

    return None
