"""Budget template generator: computed bucket tables, totals and printable exports."""

from budget_template.amounts import format_amount, parse_number
from budget_template.cells import compute_cell, compute_row
from budget_template.document import Bucket, BucketColumn, BudgetDocument, BudgetMeta, from_dict, to_dict
from budget_template.totals import bucket_subtotal, document_totals

__all__ = [
    "Bucket",
    "BucketColumn",
    "BudgetDocument",
    "BudgetMeta",
    "bucket_subtotal",
    "compute_cell",
    "compute_row",
    "document_totals",
    "format_amount",
    "from_dict",
    "parse_number",
    "to_dict",
]
