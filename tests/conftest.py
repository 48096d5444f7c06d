import pytest

from budget_template.document import Bucket, BucketColumn, BudgetDocument, BudgetMeta


QTY = BucketColumn("qty", "Qty", "number")
PRICE = BucketColumn("unitPrice", "Unit Price", "currency")
ITEM = BucketColumn("item", "Item", "text")


def make_meta(fx: str = "", multiplier: str = "", **kwargs) -> BudgetMeta:
    return BudgetMeta(fx_rate=fx, multiplier_value=multiplier, **kwargs)


@pytest.fixture
def line_item_columns():
    return (
        ITEM,
        QTY,
        BucketColumn("totalQty", "Total Qty", "computed", compute="qty_total"),
        PRICE,
        BucketColumn("total", "Total", "computed", compute="row_total"),
        BucketColumn("usd", "USD", "computed", compute="usd_equiv"),
    )


@pytest.fixture
def sample_document():
    meta = make_meta(fx="100", multiplier="2", template_title="Budget Template",
                     template_subtitle="Spring Outreach", org_name="Helping Hands / HH",
                     primary_currency="NGN", secondary_currency="USD")
    packs = Bucket(
        id="a",
        name="Bucket A — Packs",
        columns=(ITEM, QTY, PRICE, BucketColumn("amount", "Amount", "currency"),
                 BucketColumn("usd", "USD", "computed", compute="usd_equiv")),
        rows=(
            {"id": "1", "item": "Rice", "qty": "5", "unitPrice": "10", "amount": "1000"},
            {"id": "2", "item": "Oil", "qty": "2", "unitPrice": "20", "amount": "500"},
        ),
    )
    casework = Bucket(
        id="b",
        name="Bucket B — Casework",
        columns=(BucketColumn("home", "Home", "text"),
                 BucketColumn("cap", "Cap", "currency"),
                 BucketColumn("approved", "Approved", "currency"),
                 BucketColumn("usd", "USD", "computed", compute="usd_approved")),
        rows=(
            {"id": "1", "home": "VH-001", "cap": "900", "approved": "800"},
            {"id": "2", "home": "VH-002", "cap": "900", "approved": "200"},
        ),
        approved_key="approved",
    )
    return BudgetDocument(meta=meta, buckets=(packs, casework))
