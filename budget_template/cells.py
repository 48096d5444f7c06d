"""
Cell computation for budget buckets.

Computed columns do not name the columns they read from. Instead they refer
to them by position in the bucket schema:

- quantity column: first ``number`` column without a compute directive
- price column:    first ``currency`` column without a compute directive

A computed cell whose reference column is missing renders blank. Nothing in
here raises; bad or partial data always degrades to an empty string.
"""

from __future__ import annotations

from typing import Optional, Sequence

from budget_template import settings
from budget_template.amounts import (
    display_amount,
    fx_rate_of,
    multiplier_of,
    parse_number,
    plain_number,
    secondary_amount,
)
from budget_template.document import BucketColumn, BudgetMeta, Row


# -----------------------------
# Reference column discovery
# -----------------------------
def _plain_columns(columns: Sequence[BucketColumn], col_type: str) -> list[BucketColumn]:
    return [c for c in columns if c.type == col_type and not c.compute]


def find_quantity_column(columns: Sequence[BucketColumn]) -> Optional[BucketColumn]:
    found = _plain_columns(columns, "number")
    return found[0] if found else None


def find_price_column(columns: Sequence[BucketColumn]) -> Optional[BucketColumn]:
    found = _plain_columns(columns, "currency")
    return found[0] if found else None


def find_last_currency_column(columns: Sequence[BucketColumn]) -> Optional[BucketColumn]:
    found = _plain_columns(columns, "currency")
    return found[-1] if found else None


def find_approved_column(columns: Sequence[BucketColumn]) -> Optional[BucketColumn]:
    for c in _plain_columns(columns, "currency"):
        if settings.APPROVED_KEY_HINT in c.key.lower():
            return c
    return None


# -----------------------------
# Row arithmetic
# -----------------------------
def _field(row: Row, column: BucketColumn) -> float:
    return parse_number(row.get(column.key))


def total_quantity(row: Row, columns: Sequence[BucketColumn], meta: BudgetMeta) -> Optional[float]:
    """Quantity times the document multiplier, or None without a quantity column or multiplier."""
    qty_col = find_quantity_column(columns)
    if qty_col is None:
        return None
    qty = _field(row, qty_col)
    m = multiplier_of(meta)
    if m > 0 and qty > 0:
        return qty * m
    return None


def row_total(row: Row, columns: Sequence[BucketColumn], meta: BudgetMeta) -> Optional[float]:
    """Primary-currency line total. None when the quantity or price column is missing."""
    qty_col = find_quantity_column(columns)
    price_col = find_price_column(columns)
    if qty_col is None or price_col is None:
        return None

    qty = _field(row, qty_col)
    m = multiplier_of(meta)
    total_qty = qty * m if m > 0 else qty
    return total_qty * _field(row, price_col)


def secondary_source(
    row: Row,
    columns: Sequence[BucketColumn],
    meta: BudgetMeta,
    prefer_approved: bool = False,
) -> Optional[float]:
    """
    Primary-currency amount a secondary-currency cell converts.

    Tried in order, first applicable wins:
    1. approved column (only when ``prefer_approved``)
    2. row total (quantity x multiplier x price)
    3. last plain currency column
    """
    if prefer_approved:
        approved = find_approved_column(columns)
        if approved is not None:
            return _field(row, approved)

    total = row_total(row, columns, meta)
    if total is not None:
        return total

    last = find_last_currency_column(columns)
    if last is not None:
        return _field(row, last)
    return None


# -----------------------------
# Public API
# -----------------------------
def compute_cell(
    column: BucketColumn,
    row: Row,
    all_columns: Sequence[BucketColumn],
    meta: BudgetMeta,
) -> str:
    """Display string for one cell of a bucket table."""
    if not column.compute:
        return row.get(column.key) or ""

    if column.compute == "qty_total":
        # Left unformatted (no grouping, no fixed decimals).
        qty = total_quantity(row, all_columns, meta)
        return plain_number(qty) if qty is not None else ""

    if column.compute == "row_total":
        return display_amount(row_total(row, all_columns, meta))

    if column.compute in ("usd_equiv", "usd_approved"):
        source = secondary_source(
            row, all_columns, meta, prefer_approved=column.compute == "usd_approved"
        )
        return display_amount(secondary_amount(source, fx_rate_of(meta)))

    return row.get(column.key) or ""


def compute_row(row: Row, columns: Sequence[BucketColumn], meta: BudgetMeta) -> list[str]:
    return [compute_cell(c, row, columns, meta) for c in columns]
