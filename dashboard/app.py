"""
Order Desk dashboard: FastAPI backend for the browser pages.

Each request opens a fresh page view-model, applies the posted form and
runs the page's single action against the order backend.

Endpoints
---------
  GET  /api/health                          → liveness probe
  POST /api/orders/validate                 → first validation error, if any
  POST /api/orders                          → validate + send an order form
  GET  /api/purchase-orders/{po_number}/pdf → PO rendered as a PDF download
  POST /api/yarn/{action}                   → request | view | receive | viewAll
"""
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from config import Config
from dashboard.models import YarnActionRequest
from services.api_client import OrderApiClient
from services.order_form import FAILURE_MESSAGE, OrderFormPage, OrderFormState, validate
from services.po_export import (
    ERROR_MESSAGE,
    NO_DATA_MESSAGE,
    PurchaseOrderExporter,
    pdf_filename,
)
from services.yarn_actions import ACTIONS, YarnPage, YarnPageState

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Backend client, built on first request so the environment can be
# set after import.
# ---------------------------------------------------------------------------
_client: Optional[OrderApiClient] = None


def get_client() -> OrderApiClient:
    global _client
    if _client is None:
        _client = OrderApiClient(Config())
    return _client


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------
app = FastAPI(title="Order Desk Dashboard", docs_url=None, redoc_url=None)


@app.get("/api/health")
def health():
    return {"status": "ok", "api_base_url": Config().api_base_url}


# ── Orders ───────────────────────────────────────────────────────────────────

@app.post("/api/orders/validate")
def validate_order(form: OrderFormState):
    return {"error": validate(form, form.labels)}


@app.post("/api/orders", status_code=201)
def submit_order(form: OrderFormState):
    page = OrderFormPage(get_client(), form)
    if not page.submit():
        # anything other than the backend failure message is a validation error
        status = 502 if page.message == FAILURE_MESSAGE else 422
        raise HTTPException(status_code=status, detail=page.message)

    # The reset form is returned so the browser can clear its inputs
    return {"message": page.message, "form": page.state.model_dump()}


# ── Purchase order export ────────────────────────────────────────────────────

@app.get("/api/purchase-orders/{po_number}/pdf")
def download_purchase_order(po_number: str):
    po_number = po_number.strip()
    exporter = PurchaseOrderExporter(get_client())
    try:
        record = exporter.fetch_record(po_number)
        if not record:
            raise HTTPException(status_code=404, detail=NO_DATA_MESSAGE)
        data = exporter.render(record, po_number)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("PDF export failed for %s: %s", po_number, e)
        raise HTTPException(status_code=502, detail=ERROR_MESSAGE)

    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{pdf_filename(po_number)}"'},
    )


# ── Yarn ─────────────────────────────────────────────────────────────────────

@app.post("/api/yarn/{action}")
def yarn_action(action: str, body: Optional[YarnActionRequest] = None):
    if action not in ACTIONS:
        raise HTTPException(status_code=404, detail=f"Unknown yarn action: {action}")

    body = body or YarnActionRequest()
    page = YarnPage(get_client(), YarnPageState(
        selected_action=action,
        request_form=body.request_form,
        receipt_form=body.receipt_form,
        status=body.status,
    ))
    state = page.handle_action()
    if state.error:
        raise HTTPException(status_code=400, detail=state.error)
    return {
        "action": action,
        "result": state.result,
        "records": state.all_yarn,
        "notice": state.notice,
    }
