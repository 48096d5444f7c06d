from budget_template.defaults import default_document
from budget_template.document import BudgetDocument
from budget_template.export import (
    bucket_frame,
    df_to_csv_bytes,
    pdf_filename,
    summary_frame,
    summary_text,
)
from conftest import make_meta


def test_bucket_frame_holds_display_strings(sample_document):
    packs = sample_document.buckets[0]
    df = bucket_frame(packs, sample_document.meta)
    assert list(df.columns) == ["Item", "Qty", "Unit Price", "Amount", "USD"]
    # quantity and price present: usd converts qty x multiplier x price
    assert df.iloc[0].tolist() == ["Rice", "5", "10", "1000", "1.00"]
    assert df.iloc[1]["USD"] == "0.80"


def test_bucket_frame_empty_bucket(sample_document):
    packs = sample_document.buckets[0]
    empty = packs.__class__(id="e", name="Empty", columns=packs.columns)
    df = bucket_frame(empty, sample_document.meta)
    assert df.empty
    assert len(df.columns) == 5


def test_summary_frame(sample_document):
    df = summary_frame(sample_document)
    assert list(df.columns) == ["Bucket", "Total (NGN)", "USD Equivalent"]
    assert df.iloc[-1].tolist() == ["GRAND TOTAL", "2,500.00", "25.00"]
    assert df.iloc[0]["Bucket"] == "Bucket A — Packs"


def test_csv_bytes(sample_document):
    data = df_to_csv_bytes(summary_frame(sample_document))
    text = data.decode("utf-8")
    assert text.splitlines()[0] == "Bucket,Total (NGN),USD Equivalent"
    assert 'GRAND TOTAL,"2,500.00",25.00' in text


def test_summary_text(sample_document):
    text = summary_text(sample_document)
    lines = text.splitlines()
    assert lines[0] == "Budget Summary — Spring Outreach"
    assert lines[1] == "FX: NGN100/USD1"
    assert lines[2] == "Multiplier: 2"
    assert "Bucket B — Casework: NGN1,000.00 (USD10.00)" in lines
    assert lines[-1] == "GRAND TOTAL: NGN2,500.00 (USD25.00)"


def test_summary_text_marks_blank_amounts():
    doc = default_document()
    text = summary_text(doc)
    assert text.splitlines()[-1] == "GRAND TOTAL: — (—)"
    assert "FX: ₦1600/$1" in text


def test_pdf_filename():
    doc = BudgetDocument(meta=make_meta(template_subtitle="Vulnerable Homes  Outreach"))
    assert pdf_filename(doc) == "budget-template-vulnerable-homes-outreach.pdf"
    assert pdf_filename(BudgetDocument(meta=make_meta())) == "budget-template-scci.pdf"


def test_summary_frame_without_currency_codes(sample_document):
    doc = BudgetDocument(meta=make_meta(fx="100"), buckets=sample_document.buckets)
    df = summary_frame(doc)
    assert list(df.columns) == ["Bucket", "Total", "Converted"]
    assert df.iloc[-1].tolist() == ["GRAND TOTAL", "2,500.00", "25.00"]
