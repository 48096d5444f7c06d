from budget_template.document import Bucket, BucketColumn, BudgetDocument
from budget_template.totals import bucket_subtotal, document_totals
from conftest import ITEM, PRICE, QTY, make_meta


FINAL = BucketColumn("finalAmount", "Final Amount", "currency")


def bucket(columns, rows, **kwargs):
    return Bucket(id="x", name="X", columns=columns, rows=rows, **kwargs)


def test_total_key_takes_priority_over_auto_detection():
    b = bucket(
        (ITEM, BucketColumn("total", "Total", "text"), FINAL),
        ({"id": "1", "total": "100", "finalAmount": "9999"},
         {"id": "2", "total": "50", "finalAmount": "9999"}),
        total_key="total",
    )
    assert bucket_subtotal(b, make_meta()) == 150


def test_approved_key_beats_total_key():
    b = bucket(
        (BucketColumn("approved", "Approved", "currency"), BucketColumn("total", "Total", "currency")),
        ({"id": "1", "approved": "10", "total": "100"},
         {"id": "2", "approved": "15", "total": "100"}),
        total_key="total",
        approved_key="approved",
    )
    assert bucket_subtotal(b, make_meta()) == 25


def test_auto_detect_sums_last_currency_column():
    b = bucket(
        (ITEM, QTY, PRICE, FINAL),
        ({"id": "1", "unitPrice": "10", "finalAmount": "300"},
         {"id": "2", "unitPrice": "20", "finalAmount": "200.5"}),
    )
    assert bucket_subtotal(b, make_meta()) == 500.5


def test_auto_detect_ignores_computed_currency_columns():
    b = bucket(
        (PRICE, BucketColumn("rt", "Row Total", "currency", compute="row_total")),
        ({"id": "1", "unitPrice": "10", "rt": "500"},),
    )
    assert bucket_subtotal(b, make_meta()) == 10


def test_no_currency_column_totals_zero():
    b = bucket((ITEM, QTY), ({"id": "1", "qty": "4"},))
    assert bucket_subtotal(b, make_meta()) == 0


def test_unparsable_values_count_as_zero():
    b = bucket((FINAL,), ({"id": "1", "finalAmount": "tbd"}, {"id": "2", "finalAmount": "40"}))
    assert bucket_subtotal(b, make_meta()) == 40


def test_subtotal_is_repeatable():
    b = bucket((FINAL,), ({"id": "1", "finalAmount": "12.25"},))
    meta = make_meta()
    assert bucket_subtotal(b, meta) == bucket_subtotal(b, meta)


def test_document_totals(sample_document):
    totals = document_totals(sample_document)
    a, b = totals.buckets
    assert a.primary == 1500
    assert a.primary_display == "1,500.00"
    assert a.secondary_display == "15.00"
    assert b.primary == 1000
    assert totals.grand_total == 2500
    assert totals.grand_total_display == "2,500.00"
    assert totals.grand_total_secondary == 25
    assert [t.bucket_id for t in totals.buckets] == ["a", "b"]


def test_document_totals_without_fx_rate_leave_secondary_blank(sample_document):
    doc = BudgetDocument(meta=make_meta(fx=""), buckets=sample_document.buckets)
    totals = document_totals(doc)
    assert totals.grand_total == 2500
    assert totals.grand_total_secondary is None
    assert totals.grand_total_secondary_display == ""


def test_empty_document_totals_blank():
    totals = document_totals(BudgetDocument(meta=make_meta(fx="100")))
    assert totals.buckets == ()
    assert totals.grand_total == 0
    assert totals.grand_total_display == ""
    assert totals.grand_total_secondary_display == ""
