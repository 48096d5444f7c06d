import json
import logging
from dataclasses import replace
from datetime import datetime

import pandas as pd
import streamlit as st

from budget_template.defaults import default_document
from budget_template.document import Bucket, BudgetDocument, from_dict, new_row_id, to_dict
from budget_template.export import (
    bucket_frame,
    df_to_csv_bytes,
    pdf_filename,
    summary_frame,
    summary_text,
)
from budget_template.pdf import HAS_REPORTLAB, make_budget_pdf
from budget_template.totals import document_totals

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger("budget_template.app")


# -----------------------------
# Session helpers
# -----------------------------
def load_document() -> BudgetDocument:
    if "budget_doc" not in st.session_state:
        st.session_state["budget_doc"] = to_dict(default_document())
    return from_dict(st.session_state["budget_doc"])


def store_document(doc: BudgetDocument) -> None:
    """Replace the base template the editors start from and drop pending edits."""
    st.session_state["budget_doc"] = to_dict(doc)
    for k in list(st.session_state.keys()):
        if k.startswith("rows_") or k in ("meta_fields_editor", "guardrails_editor"):
            del st.session_state[k]


def stored_columns(bucket: Bucket) -> list[str]:
    return [c.key for c in bucket.columns if not c.compute]


def rows_to_frame(bucket: Bucket) -> pd.DataFrame:
    keys = stored_columns(bucket)
    df = pd.DataFrame([dict(r) for r in bucket.rows], columns=["id"] + keys)
    return df.fillna("").astype(str)


def frame_to_rows(df: pd.DataFrame, keys: list[str]) -> tuple[dict, ...]:
    rows = []
    for rec in df.fillna("").to_dict(orient="records"):
        row = {k: str(rec.get(k, "") or "") for k in keys}
        row["id"] = str(rec.get("id") or "") or new_row_id()
        rows.append(row)
    return tuple(rows)


# -----------------------------
# UI
# -----------------------------
st.set_page_config(page_title="Budget Template Generator", page_icon="📊", layout="wide")

st.markdown(
    """
    <div style="padding: 1.8rem; border-radius: 16px;
         background: linear-gradient(135deg, #1e3a5f 0%, #2d5a8e 100%); color: white;">
      <h1 style="margin:0;">Budget Template Generator</h1>
      <p style="margin-top:.4rem; opacity:.95;">Build bucket budgets with computed totals in two currencies and export them as PDF</p>
    </div>
    """,
    unsafe_allow_html=True,
)

st.write("")

doc = load_document()
meta = doc.meta

with st.expander("📎 Load / Reset Template"):
    colL1, colL2 = st.columns([2, 1])
    with colL1:
        uploaded = st.file_uploader("Template JSON", type=["json"])
        if uploaded is not None and st.button("Load template"):
            try:
                doc = from_dict(json.load(uploaded))
                store_document(doc)
                meta = doc.meta
                st.success("Template loaded.")
            except (ValueError, TypeError) as e:
                logger.warning("Could not load template %s: %s", uploaded.name, e)
                st.error(f"Could not load template: {e}")
    with colL2:
        if st.button("🔄 Reset to defaults", use_container_width=True):
            doc = default_document()
            store_document(doc)
            meta = doc.meta

# --- Branding / meta ---
st.subheader("🏷️ Template Information")
c1, c2, c3 = st.columns([1.3, 1.3, 1.4])
with c1:
    org_name = st.text_input("Organization", value=meta.org_name)
    template_title = st.text_input("Title", value=meta.template_title)
with c2:
    template_subtitle = st.text_input("Subtitle", value=meta.template_subtitle)
    tagline = st.text_input("Tagline", value=meta.tagline)
with c3:
    footer_note = st.text_area("Footer Note", value=meta.footer_note, height=110)

meta_fields_df = st.data_editor(
    pd.DataFrame([{"Label": f.label, "Value": f.value} for f in meta.meta_fields], columns=["Label", "Value"]),
    num_rows="dynamic",
    use_container_width=True,
    key="meta_fields_editor",
)

# --- Currency & multiplier ---
st.subheader("💱 Currency & Multiplier")
m1, m2, m3, m4, m5 = st.columns(5)
with m1:
    primary_currency = st.text_input("Primary Currency", value=meta.primary_currency)
    primary_symbol = st.text_input("Primary Symbol", value=meta.primary_symbol)
with m2:
    secondary_currency = st.text_input("Secondary Currency", value=meta.secondary_currency)
    secondary_symbol = st.text_input("Secondary Symbol", value=meta.secondary_symbol)
with m3:
    fx_rate = st.text_input(f"FX Rate ({primary_currency or 'primary'} per 1 {secondary_currency or 'secondary'})",
                            value=meta.fx_rate)
with m4:
    multiplier_label = st.text_input("Multiplier Label", value=meta.multiplier_label)
with m5:
    multiplier_value = st.text_input(f"Multiplier ({multiplier_label or 'count'})", value=meta.multiplier_value)
st.caption(
    "Quantities are multiplied by the multiplier before pricing; every secondary-currency figure "
    "is the primary amount divided by the FX rate. Zero or blank values leave those cells empty."
)

# --- Guardrails ---
st.subheader("🛡️ Guardrails")
show_guardrails = st.checkbox("Show guardrails table", value=meta.show_guardrails)
guardrails_df = st.data_editor(
    pd.DataFrame(
        [{"Bucket": g.bucket, "Purpose": g.purpose, "Cap": g.cap, "Notes": g.notes} for g in meta.guardrails],
        columns=["Bucket", "Purpose", "Cap", "Notes"],
    ),
    num_rows="dynamic",
    use_container_width=True,
    key="guardrails_editor",
)

# --- Signatures ---
st.subheader("✍️ Signatures")
s1, s2, s3, s4 = st.columns(4)
with s1:
    prepared_by = st.text_input("Prepared By", value=meta.prepared_by)
with s2:
    prepared_date = st.text_input("Prepared Date", value=meta.prepared_date)
with s3:
    approved_by = st.text_input("Approved By", value=meta.approved_by)
with s4:
    approved_date = st.text_input("Approved Date", value=meta.approved_date)

meta = from_dict({
    "meta": {
        "orgName": org_name, "templateTitle": template_title, "templateSubtitle": template_subtitle,
        "tagline": tagline, "footerNote": footer_note,
        "primaryCurrency": primary_currency, "primarySymbol": primary_symbol,
        "secondaryCurrency": secondary_currency, "secondarySymbol": secondary_symbol,
        "fxRate": fx_rate, "multiplierLabel": multiplier_label, "multiplierValue": multiplier_value,
        "showGuardrails": show_guardrails,
        "preparedBy": prepared_by, "preparedDate": prepared_date,
        "approvedBy": approved_by, "approvedDate": approved_date,
        "metaFields": [{"label": r["Label"], "value": r["Value"]}
                       for r in meta_fields_df.fillna("").to_dict(orient="records")],
        "guardrails": [{"bucket": r["Bucket"], "purpose": r["Purpose"], "cap": r["Cap"], "notes": r["Notes"]}
                       for r in guardrails_df.fillna("").to_dict(orient="records")],
    },
}).meta

# --- Buckets ---
st.write("---")
st.subheader("📊 Buckets")

buckets = []
tabs = st.tabs([b.name for b in doc.buckets]) if doc.buckets else []
for i, (tab, bucket) in enumerate(zip(tabs, doc.buckets)):
    with tab:
        if bucket.subtitle:
            st.caption(bucket.subtitle)
        keys = stored_columns(bucket)
        edited = st.data_editor(
            rows_to_frame(bucket),
            num_rows="dynamic",
            use_container_width=True,
            column_config={"id": None, **{c.key: c.label for c in bucket.columns if not c.compute}},
            key=f"rows_{i}",
        )
        bucket = replace(bucket, rows=frame_to_rows(edited, keys))
        buckets.append(bucket)

        st.caption("Computed view (as printed)")
        preview = bucket_frame(bucket, meta)
        st.dataframe(preview, use_container_width=True, hide_index=True)

        st.download_button(
            f"⬇️ Download {bucket.name.split('—')[0].strip()} (CSV)",
            data=df_to_csv_bytes(preview),
            file_name=f"{bucket.id}.csv",
            mime="text/csv",
            key=f"csv_{i}",
        )

doc = BudgetDocument(meta=meta, buckets=tuple(buckets))
totals = document_totals(doc)

# --- Summary ---
st.write("")
st.subheader("📌 Budget Summary")
cols = st.columns(max(len(totals.buckets), 1) + 1)
for col, t in zip(cols, totals.buckets):
    with col:
        st.metric(t.name.split("—")[0].strip(), f"{meta.primary_mark}{t.primary_display or '0.00'}",
                  f"{meta.secondary_mark}{t.secondary_display}" if t.secondary_display else None,
                  delta_color="off")
with cols[-1]:
    st.markdown(
        f"<div style='text-align:center;padding:16px;border-radius:12px;background:#eff6ff;'>"
        f"<div style='font-size:1.6rem;font-weight:700;color:#1e3a5f;'>"
        f"{meta.primary_mark}{totals.grand_total_display or '0.00'}</div>"
        f"<div style='color:#1f2937;'>Grand Total"
        f"{' • ' + meta.secondary_mark + totals.grand_total_secondary_display if totals.grand_total_secondary_display else ''}"
        f"</div></div>", unsafe_allow_html=True
    )

summary_df = summary_frame(doc, totals)
st.dataframe(summary_df, use_container_width=True, hide_index=True)
st.code(summary_text(doc, totals), language=None)

colPDF, colCSV, colJSON = st.columns(3)
with colCSV:
    st.download_button(
        "⬇️ Download Summary (CSV)",
        data=df_to_csv_bytes(summary_df),
        file_name="budget_summary.csv",
        mime="text/csv",
        use_container_width=True
    )
with colJSON:
    st.download_button(
        "💾 Download Template (JSON)",
        data=json.dumps(to_dict(doc), indent=2, ensure_ascii=False).encode("utf-8"),
        file_name="budget_template.json",
        mime="application/json",
        use_container_width=True
    )
with colPDF:
    if HAS_REPORTLAB:
        st.download_button(
            "🧾 Download Budget (PDF)",
            data=make_budget_pdf(doc, totals),
            file_name=pdf_filename(doc),
            mime="application/pdf",
            use_container_width=True
        )
    else:
        st.info("Install `reportlab` to enable PDF export (listed in the project dependencies).")

# Footer
st.write("")
st.caption(f"Generated on {datetime.now().strftime('%Y-%m-%d %H:%M')} • Budget Template Generator")
