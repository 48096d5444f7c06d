"""
Budget document data model.

A document is a metadata record plus an ordered list of buckets. Each bucket
owns its column schema and its rows; rows are plain string mappings keyed by
column key. Everything here is read-only once built: the engine derives
computed cells and totals fresh on every render.

Payloads coming from the template editor use camelCase keys (``fxRate``,
``approvedKey`` ...). ``from_dict`` accepts those as well as snake_case keys.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from budget_template import settings

logger = logging.getLogger(__name__)

Row = Mapping[str, str]

COMPUTE_KINDS = ("qty_total", "row_total", "usd_equiv", "usd_approved")


@dataclass(frozen=True)
class MetaField:
    label: str
    value: str = ""


@dataclass(frozen=True)
class Guardrail:
    bucket: str
    purpose: str = ""
    cap: str = ""
    notes: str = ""


@dataclass(frozen=True)
class BudgetMeta:
    fx_rate: str = ""
    multiplier_value: str = ""
    multiplier_label: str = ""

    primary_currency: str = ""
    primary_symbol: str = ""
    secondary_currency: str = ""
    secondary_symbol: str = ""

    org_name: str = ""
    template_title: str = ""
    template_subtitle: str = ""
    tagline: str = ""
    meta_fields: tuple[MetaField, ...] = ()

    show_guardrails: bool = False
    guardrails: tuple[Guardrail, ...] = ()

    prepared_by: str = ""
    prepared_date: str = ""
    approved_by: str = ""
    approved_date: str = ""
    footer_note: str = ""

    @property
    def primary_mark(self) -> str:
        return currency_symbol(self.primary_symbol, self.primary_currency)

    @property
    def secondary_mark(self) -> str:
        return currency_symbol(self.secondary_symbol, self.secondary_currency)


@dataclass(frozen=True)
class BucketColumn:
    key: str
    label: str = ""
    type: str = "text"
    width: str = ""
    align: str = "left"
    compute: Optional[str] = None

    @property
    def is_computed(self) -> bool:
        return bool(self.compute)


@dataclass(frozen=True)
class Bucket:
    id: str
    name: str
    columns: tuple[BucketColumn, ...] = ()
    rows: tuple[Row, ...] = ()
    subtitle: str = ""
    total_key: Optional[str] = None
    approved_key: Optional[str] = None


@dataclass(frozen=True)
class BudgetDocument:
    meta: BudgetMeta = field(default_factory=BudgetMeta)
    buckets: tuple[Bucket, ...] = ()


def currency_symbol(symbol: str | None, code: str | None) -> str:
    return symbol or code or ""


def new_row_id() -> str:
    return uuid.uuid4().hex[: settings.ROW_ID_LENGTH]


# -----------------------------
# Payload conversion
# -----------------------------
META_KEYS = {
    "fxRate": "fx_rate",
    "multiplierValue": "multiplier_value",
    "multiplierLabel": "multiplier_label",
    "primaryCurrency": "primary_currency",
    "primarySymbol": "primary_symbol",
    "secondaryCurrency": "secondary_currency",
    "secondarySymbol": "secondary_symbol",
    "orgName": "org_name",
    "templateTitle": "template_title",
    "templateSubtitle": "template_subtitle",
    "tagline": "tagline",
    "preparedBy": "prepared_by",
    "preparedDate": "prepared_date",
    "approvedBy": "approved_by",
    "approvedDate": "approved_date",
    "footerNote": "footer_note",
}


def _pick(data: Mapping[str, Any], camel: str, snake: str, default=None):
    if camel in data:
        return data[camel]
    return data.get(snake, default)


def _text(value) -> str:
    if value is None:
        return ""
    return str(value)


def _optional_key(value) -> Optional[str]:
    value = _text(value).strip()
    return value or None


def meta_from_dict(data: Mapping[str, Any]) -> BudgetMeta:
    kwargs: dict[str, Any] = {}
    for camel, snake in META_KEYS.items():
        if camel in data or snake in data:
            kwargs[snake] = _text(_pick(data, camel, snake))

    kwargs["meta_fields"] = tuple(
        MetaField(label=_text(f.get("label")), value=_text(f.get("value")))
        for f in _pick(data, "metaFields", "meta_fields", None) or []
    )
    kwargs["guardrails"] = tuple(
        Guardrail(
            bucket=_text(g.get("bucket")),
            purpose=_text(g.get("purpose")),
            cap=_text(g.get("cap")),
            notes=_text(g.get("notes")),
        )
        for g in data.get("guardrails") or []
    )
    kwargs["show_guardrails"] = bool(_pick(data, "showGuardrails", "show_guardrails", False))
    return BudgetMeta(**kwargs)


def column_from_dict(data: Mapping[str, Any]) -> BucketColumn:
    compute = _optional_key(data.get("compute"))
    return BucketColumn(
        key=_text(data.get("key")),
        label=_text(data.get("label")),
        type=_text(data.get("type")) or "text",
        width=_text(data.get("width")),
        align=_text(data.get("align")) or "left",
        compute=compute,
    )


def bucket_from_dict(data: Mapping[str, Any]) -> Bucket:
    rows = tuple(
        {k: _text(v) for k, v in row.items()}
        for row in data.get("rows") or []
    )
    return Bucket(
        id=_text(data.get("id")) or new_row_id(),
        name=_text(data.get("name")),
        subtitle=_text(data.get("subtitle")),
        columns=tuple(column_from_dict(c) for c in data.get("columns") or []),
        rows=rows,
        total_key=_optional_key(_pick(data, "totalKey", "total_key")),
        approved_key=_optional_key(_pick(data, "approvedKey", "approved_key")),
    )


def from_dict(data: Mapping[str, Any]) -> BudgetDocument:
    """Build a document from an editor payload (``{"meta": {...}, "buckets": [...]}``)."""
    if not isinstance(data, Mapping):
        raise TypeError(f"budget document payload must be a mapping, got {type(data).__name__}")

    meta = meta_from_dict(data.get("meta") or {})
    buckets = tuple(bucket_from_dict(b) for b in data.get("buckets") or [])
    logger.debug("Loaded budget document with %d bucket(s)", len(buckets))
    return BudgetDocument(meta=meta, buckets=buckets)


def meta_to_dict(meta: BudgetMeta) -> dict[str, Any]:
    out: dict[str, Any] = {camel: getattr(meta, snake) for camel, snake in META_KEYS.items()}
    out["metaFields"] = [{"label": f.label, "value": f.value} for f in meta.meta_fields]
    out["showGuardrails"] = meta.show_guardrails
    out["guardrails"] = [
        {"bucket": g.bucket, "purpose": g.purpose, "cap": g.cap, "notes": g.notes}
        for g in meta.guardrails
    ]
    return out


def bucket_to_dict(bucket: Bucket) -> dict[str, Any]:
    columns = []
    for c in bucket.columns:
        col = {"key": c.key, "label": c.label, "type": c.type, "width": c.width, "align": c.align}
        if c.compute:
            col["compute"] = c.compute
        columns.append(col)

    out: dict[str, Any] = {
        "id": bucket.id,
        "name": bucket.name,
        "subtitle": bucket.subtitle,
        "columns": columns,
        "rows": [dict(r) for r in bucket.rows],
    }
    if bucket.total_key:
        out["totalKey"] = bucket.total_key
    if bucket.approved_key:
        out["approvedKey"] = bucket.approved_key
    return out


def to_dict(document: BudgetDocument) -> dict[str, Any]:
    return {
        "meta": meta_to_dict(document.meta),
        "buckets": [bucket_to_dict(b) for b in document.buckets],
    }
