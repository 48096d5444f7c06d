"""
Numeric and currency helpers shared by the cell engine and the totals layer.

Amounts arrive as free-form strings typed into the template editor. Parsing
never raises: anything unreadable counts as zero, and zero (or a negative
figure) is shown as a blank cell rather than "0.00".
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from budget_template.document import BudgetMeta


LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
CENT = Decimal("0.01")


def parse_optional(raw) -> Optional[float]:
    """Read the leading decimal of ``raw``. Return None if there is none."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        m = LEADING_NUMBER_RE.match(str(raw))
        if not m:
            return None
        value = float(m.group(1))
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def parse_number(raw) -> float:
    """Like ``parse_optional`` but unreadable input counts as 0."""
    value = parse_optional(raw)
    return value if value is not None else 0.0


def format_amount(v: float) -> str:
    """Two decimals, halves rounded away from zero, thousands grouped."""
    if v == 0:
        return ""
    cents = Decimal(repr(float(v))).quantize(CENT, rounding=ROUND_HALF_UP)
    return f"{cents:,.2f}"


def plain_number(v: float) -> str:
    """
    Unformatted number: integral values drop the trailing '.0'.

    Matches JavaScript String(n) for everyday magnitudes only; very large or
    very small values keep Python's notation (1e+21 prints in full, 1e-7 as 1e-07).
    """
    if float(v).is_integer():
        return str(int(v))
    return repr(float(v))


def display_amount(v: Optional[float]) -> str:
    if v is None or v <= 0:
        return ""
    return format_amount(v)


def secondary_amount(v: Optional[float], fx: float) -> Optional[float]:
    """Convert a primary-currency amount with ``fx`` (primary units per secondary unit)."""
    if v is None or fx <= 0 or v <= 0:
        return None
    return v / fx


def fx_rate_of(meta: BudgetMeta) -> float:
    return parse_number(meta.fx_rate)


def multiplier_of(meta: BudgetMeta) -> float:
    return parse_number(meta.multiplier_value)
