"""
Tabular and text exports of a computed budget document.
"""

from __future__ import annotations

import logging
import re

import pandas as pd

from budget_template import settings
from budget_template.amounts import display_amount
from budget_template.cells import compute_row
from budget_template.document import Bucket, BudgetDocument, BudgetMeta
from budget_template.totals import DocumentTotals, document_totals

logger = logging.getLogger(__name__)


def bucket_frame(bucket: Bucket, meta: BudgetMeta) -> pd.DataFrame:
    """Display table of one bucket: one column per bucket column, headed by its label."""
    headers = [c.label or c.key for c in bucket.columns]
    data = [compute_row(r, bucket.columns, meta) for r in bucket.rows]
    logger.debug("Bucket %s: %d row(s) x %d column(s)", bucket.id, len(data), len(headers))
    return pd.DataFrame(data, columns=headers)


def summary_headers(meta: BudgetMeta) -> tuple[str, str]:
    primary = f"Total ({meta.primary_currency})" if meta.primary_currency else "Total"
    secondary = f"{meta.secondary_currency} Equivalent" if meta.secondary_currency else "Converted"
    return primary, secondary


def summary_frame(document: BudgetDocument, totals: DocumentTotals | None = None) -> pd.DataFrame:
    totals = totals or document_totals(document)
    primary_col, secondary_col = summary_headers(document.meta)

    rows = [
        {"Bucket": t.name, primary_col: t.primary_display, secondary_col: t.secondary_display}
        for t in totals.buckets
    ]
    rows.append({
        "Bucket": "GRAND TOTAL",
        primary_col: totals.grand_total_display,
        secondary_col: totals.grand_total_secondary_display,
    })
    return pd.DataFrame(rows, columns=["Bucket", primary_col, secondary_col])


def df_to_csv_bytes(df: pd.DataFrame) -> bytes:
    return df.to_csv(index=False).encode(settings.CSV_ENCODING)


def _marked(value: float | None, symbol: str) -> str:
    text = display_amount(value)
    return f"{symbol}{text}" if text else settings.EMPTY_MARK


def summary_text(document: BudgetDocument, totals: DocumentTotals | None = None) -> str:
    """Plain-text budget summary suitable for pasting into a message or email."""
    totals = totals or document_totals(document)
    meta = document.meta
    p, s = meta.primary_mark, meta.secondary_mark
    title = meta.template_subtitle or meta.template_title or "Untitled"

    lines = [
        f"Budget Summary — {title}",
        f"FX: {p}{meta.fx_rate or settings.EMPTY_MARK}/{s}1",
    ]
    if meta.multiplier_value:
        label = meta.multiplier_label or "multiplier"
        lines.append(f"{label.title()}: {meta.multiplier_value}")
    for t in totals.buckets:
        lines.append(f"{t.name}: {_marked(t.primary, p)} ({_marked(t.secondary, s)})")
    lines.append(
        f"GRAND TOTAL: {_marked(totals.grand_total, p)} ({_marked(totals.grand_total_secondary, s)})"
    )
    return "\n".join(lines)


def pdf_filename(document: BudgetDocument) -> str:
    meta = document.meta
    base = meta.template_subtitle or meta.template_title or settings.PDF_FILENAME_FALLBACK
    slug = re.sub(r"\s+", "-", base.strip()).lower()
    return f"{settings.PDF_FILENAME_PREFIX}-{slug}.pdf"
