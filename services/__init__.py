"""
Page controllers and the backend client.
"""
from .api_client import ApiError, OrderApiClient
from .order_form import OrderFormPage, OrderFormState, initial_state, validate, build_payload
from .po_export import PurchaseOrderExporter, PurchaseOrderPdf, render_purchase_order
from .records import RecordParseError, parse_order_record
from .yarn_actions import YarnPage, YarnPageState

__all__ = [
    "ApiError", "OrderApiClient",
    "OrderFormPage", "OrderFormState", "initial_state", "validate", "build_payload",
    "PurchaseOrderExporter", "PurchaseOrderPdf", "render_purchase_order",
    "RecordParseError", "parse_order_record",
    "YarnPage", "YarnPageState",
]
