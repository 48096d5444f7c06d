"""
Bucket subtotals and the document grand total, in both currencies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from budget_template.amounts import display_amount, fx_rate_of, parse_number, secondary_amount
from budget_template.cells import find_last_currency_column
from budget_template.document import Bucket, BudgetDocument, BudgetMeta

logger = logging.getLogger(__name__)


def _sum_key(bucket: Bucket, key: str) -> float:
    return sum(parse_number(r.get(key)) for r in bucket.rows)


def bucket_subtotal(bucket: Bucket, meta: BudgetMeta) -> float:
    """
    Primary-currency subtotal of a bucket.

    An explicit ``approved_key`` (then ``total_key``) names the column to sum.
    Without one, the last plain currency column is summed; a bucket with no
    currency column totals 0.
    """
    key = bucket.approved_key or bucket.total_key
    if key:
        return _sum_key(bucket, key)

    last = find_last_currency_column(bucket.columns)
    if last is None:
        return 0.0
    return _sum_key(bucket, last.key)


@dataclass(frozen=True)
class BucketTotal:
    bucket_id: str
    name: str
    primary: float
    secondary: Optional[float]

    @property
    def primary_display(self) -> str:
        return display_amount(self.primary)

    @property
    def secondary_display(self) -> str:
        return display_amount(self.secondary)


@dataclass(frozen=True)
class DocumentTotals:
    buckets: tuple[BucketTotal, ...]
    grand_total: float
    grand_total_secondary: Optional[float]

    @property
    def grand_total_display(self) -> str:
        return display_amount(self.grand_total)

    @property
    def grand_total_secondary_display(self) -> str:
        return display_amount(self.grand_total_secondary)


def document_totals(document: BudgetDocument) -> DocumentTotals:
    fx = fx_rate_of(document.meta)
    rows = []
    for bucket in document.buckets:
        subtotal = bucket_subtotal(bucket, document.meta)
        rows.append(BucketTotal(
            bucket_id=bucket.id,
            name=bucket.name,
            primary=subtotal,
            secondary=secondary_amount(subtotal, fx),
        ))

    grand = sum(t.primary for t in rows)
    logger.debug("Grand total %.2f across %d bucket(s) (fx=%s)", grand, len(rows), fx)
    return DocumentTotals(
        buckets=tuple(rows),
        grand_total=grand,
        grand_total_secondary=secondary_amount(grand, fx),
    )
