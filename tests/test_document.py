import pytest

from budget_template.defaults import default_document
from budget_template.document import BudgetMeta, currency_symbol, from_dict, to_dict
from budget_template.totals import document_totals


PAYLOAD = {
    "meta": {
        "orgName": "Helping Hands",
        "templateTitle": "Budget Template",
        "fxRate": "1600",
        "multiplierValue": "40",
        "multiplierLabel": "homes",
        "primaryCurrency": "NGN",
        "primarySymbol": "",
        "secondaryCurrency": "USD",
        "secondarySymbol": "$",
        "metaFields": [{"label": "Location:", "value": "Ikeja"}],
        "showGuardrails": True,
        "guardrails": [{"bucket": "A", "purpose": "Food", "cap": "NGN 1m", "notes": ""}],
    },
    "buckets": [
        {
            "id": "b1",
            "name": "Casework",
            "columns": [
                {"key": "home", "label": "Home", "type": "text", "width": "20%"},
                {"key": "approved", "label": "Approved", "type": "currency", "width": "40%", "align": "right"},
                {"key": "usd", "label": "USD", "type": "computed", "width": "40%", "compute": "usd_approved"},
            ],
            "rows": [{"id": "r1", "home": "VH-001", "approved": 3200}],
            "approvedKey": "approved",
        }
    ],
}


def test_from_dict_reads_camel_case_payload():
    doc = from_dict(PAYLOAD)
    assert doc.meta.fx_rate == "1600"
    assert doc.meta.multiplier_value == "40"
    assert doc.meta.meta_fields[0].value == "Ikeja"
    assert doc.meta.show_guardrails is True
    bucket = doc.buckets[0]
    assert bucket.approved_key == "approved"
    assert bucket.total_key is None
    assert bucket.columns[2].compute == "usd_approved"
    assert bucket.columns[0].align == "left"
    assert bucket.rows[0]["approved"] == "3200"


def test_from_dict_accepts_snake_case_keys():
    doc = from_dict({"meta": {"fx_rate": "2"}, "buckets": [{"id": "x", "name": "X", "total_key": "amount"}]})
    assert doc.meta.fx_rate == "2"
    assert doc.buckets[0].total_key == "amount"


def test_from_dict_blank_compute_is_none():
    doc = from_dict({"buckets": [{"id": "x", "name": "X", "columns": [{"key": "a", "compute": ""}]}]})
    assert doc.buckets[0].columns[0].compute is None


def test_from_dict_rejects_non_mapping():
    with pytest.raises(TypeError):
        from_dict(["not", "a", "document"])


def test_round_trip_preserves_totals():
    doc = from_dict(PAYLOAD)
    again = from_dict(to_dict(doc))
    assert again == doc
    assert document_totals(again).grand_total == 3200


def test_currency_symbol_falls_back_to_code():
    assert currency_symbol("", "NGN") == "NGN"
    assert currency_symbol("$", "USD") == "$"
    meta = BudgetMeta(primary_currency="NGN", secondary_symbol="$")
    assert meta.primary_mark == "NGN"
    assert meta.secondary_mark == "$"


def test_default_document_shape():
    doc = default_document()
    a, b, c = doc.buckets
    assert doc.meta.fx_rate == "1600"
    assert [col.compute for col in a.columns if col.compute] == ["qty_total", "row_total", "usd_equiv"]
    assert b.approved_key == "approved"
    assert c.total_key == "amount"
    assert b.rows[0]["homeId"] == "VH-001"
    assert len({r["id"] for bucket in doc.buckets for r in bucket.rows}) == sum(len(bk.rows) for bk in doc.buckets)


def test_default_document_renders_blank_totals():
    totals = document_totals(default_document())
    assert totals.grand_total == 0
    assert all(t.primary_display == "" for t in totals.buckets)


def test_generic_meta_has_no_currency_codes():
    meta = from_dict({"meta": {"fxRate": "2"}}).meta
    assert meta.primary_currency == ""
    assert meta.secondary_currency == ""
    assert meta.primary_mark == ""


def test_from_dict_gives_buckets_without_ids_distinct_ids():
    doc = from_dict({"buckets": [{"name": "First"}, {"name": "Second", "id": ""}, {"name": "Third", "id": "c"}]})
    ids = [b.id for b in doc.buckets]
    assert all(ids)
    assert len(set(ids)) == 3
    assert ids[2] == "c"
