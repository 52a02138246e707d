from .order import Order, Label, LabelForm, split_csv_field
from .yarn import YarnRequest, YarnReceipt

__all__ = [
    "Order", "Label", "LabelForm", "split_csv_field",
    "YarnRequest", "YarnReceipt",
]
