"""
Stock "Vulnerable Homes Outreach" template used when the editor starts or is reset.
"""

from __future__ import annotations

from budget_template import settings
from budget_template.document import (
    Bucket,
    BucketColumn,
    BudgetDocument,
    BudgetMeta,
    Guardrail,
    MetaField,
    new_row_id,
)


def _rows(*rows: dict) -> tuple[dict, ...]:
    return tuple({"id": new_row_id(), **r} for r in rows)


CORE_PACK_ITEMS = [
    "Rice (kg)",
    "Garri (kg)",
    "Beans (kg)",
    "Pasta/Noodles (unit)",
    "Cooking Oil (ml)",
    "Seasoning + Salt (set)",
    "Bath Soap (unit)",
    "Detergent (sachet/pack)",
    "Tissue (roll/pack)",
    "Sanitary Pads (pack)",
    "Packaging Bags/Labels",
]

CASEWORK_NEEDS = [
    ("School Fees / Tuition", "Invoice / Call school / receipt"),
    ("School Supplies / Uniform", "Photo / school list / receipt"),
    ("Transport Support (time-bound)", "Agreement / follow-up plan"),
    ("Rent-at-risk Buffer", "Landlord/agent confirmation"),
    ("Micro-income Restart (in-kind)", "Plan + item list + receipt"),
]

BUFFER_LINES = [
    ("Transport (delivery + distribution)", "Fuel, vehicle hire, driver"),
    ("Packaging (bags, labels, markers)", "Polythene bags, stickers, markers"),
    ("Volunteer logistics (water, small support)", "Water, snacks for volunteers"),
    ("Contingency / Price Volatility Buffer", "Recommended 15–25% of (A+B)"),
]


def core_packs_bucket() -> Bucket:
    return Bucket(
        id="bucket-a",
        name="Bucket A — Core Packs (Raw Food + Hygiene)",
        subtitle="Tip: list items first, then market-research unit costs to stay within the per-home cap.",
        columns=(
            BucketColumn("item", "Item", "text", "22%"),
            BucketColumn("qtyPerHome", "Qty / Home", "number", "10%", "right"),
            BucketColumn("totalQty", "Total Qty (All Homes)", "computed", "13%", "right", "qty_total"),
            BucketColumn("unitCost", "Unit Cost (NGN)", "currency", "16%", "right"),
            BucketColumn("total", "Total (NGN)", "computed", "20%", "right", "row_total"),
            BucketColumn("usd", "USD Equivalent", "computed", "19%", "right", "usd_equiv"),
        ),
        rows=_rows(*({"item": item, "qtyPerHome": "", "unitCost": ""} for item in CORE_PACK_ITEMS)),
    )


def casework_bucket() -> Bucket:
    return Bucket(
        id="bucket-b",
        name="Bucket B — Casework Fund (Capped, Limited Slots)",
        subtitle="Use for a limited number of homes only. Keep a per-household cap and require evidence.",
        columns=(
            BucketColumn("homeId", "Home ID", "text", "10%"),
            BucketColumn("needType", "Need Type", "text", "18%"),
            BucketColumn("evidence", "Evidence / Verification", "text", "20%"),
            BucketColumn("cap", "Cap (NGN)", "currency", "13%", "right"),
            BucketColumn("approved", "Approved (NGN)", "currency", "13%", "right"),
            BucketColumn("usd", "USD Equivalent", "computed", "13%", "right", "usd_approved"),
            BucketColumn("notes", "Notes", "text", "13%"),
        ),
        rows=_rows(*(
            {"homeId": f"VH-{i:03d}", "needType": need, "evidence": evidence,
             "cap": "", "approved": "", "notes": ""}
            for i, (need, evidence) in enumerate(CASEWORK_NEEDS, start=1)
        )),
        approved_key="approved",
    )


def buffer_bucket() -> Bucket:
    return Bucket(
        id="bucket-c",
        name="Bucket C — Buffer + Logistics",
        columns=(
            BucketColumn("lineItem", "Line Item", "text", "28%"),
            BucketColumn("description", "Description", "text", "32%"),
            BucketColumn("amount", "Amount (NGN)", "currency", "22%", "right"),
            BucketColumn("usd", "USD Equivalent", "computed", "18%", "right", "usd_equiv"),
        ),
        rows=_rows(*(
            {"lineItem": line, "description": desc, "amount": ""}
            for line, desc in BUFFER_LINES
        )),
        total_key="amount",
    )


def default_meta() -> BudgetMeta:
    return BudgetMeta(
        fx_rate=settings.DEFAULT_FX_RATE,
        multiplier_label=settings.DEFAULT_MULTIPLIER_LABEL,
        primary_currency=settings.DEFAULT_PRIMARY_CURRENCY,
        primary_symbol=settings.DEFAULT_PRIMARY_SYMBOL,
        secondary_currency=settings.DEFAULT_SECONDARY_CURRENCY,
        secondary_symbol=settings.DEFAULT_SECONDARY_SYMBOL,
        org_name=settings.DEFAULT_ORG_NAME,
        template_title=settings.DEFAULT_TEMPLATE_TITLE,
        template_subtitle=settings.DEFAULT_TEMPLATE_SUBTITLE,
        tagline=settings.DEFAULT_TAGLINE,
        meta_fields=(
            MetaField("Outreach Cycle Name / Code:"),
            MetaField("Prepared By:"),
            MetaField("Implementation Start (Week):"),
            MetaField("Date Prepared:"),
            MetaField("Target Homes (Count):"),
            MetaField("Per-Home Core Pack Cap (NGN):"),
            MetaField("FX Rate Used (NGN per $1):", settings.DEFAULT_FX_RATE),
            MetaField("Location / LGA:"),
        ),
        show_guardrails=True,
        guardrails=(
            Guardrail("A. Core Packs (Fixed)", "Raw food + hygiene for all homes",
                      "", "Keep this predictable and scalable."),
            Guardrail("B. Casework Fund (Capped)",
                      "School fees, cash support, rent buffer, micro-restart (limited slots)",
                      "", "Evidence-based; pay direct where possible."),
            Guardrail("C. Buffer + Logistics", "Price swings, transport, packaging, misc",
                      f"{settings.DEFAULT_BUFFER_PERCENT}% of (A+B)",
                      "Prevents derailment when market prices swing."),
        ),
        footer_note=settings.DEFAULT_FOOTER_NOTE,
    )


def default_document() -> BudgetDocument:
    return BudgetDocument(
        meta=default_meta(),
        buckets=(core_packs_bucket(), casework_bucket(), buffer_bucket()),
    )
