"""
Integration tests for the dashboard API.
"""
import pytest
from fastapi.testclient import TestClient

import dashboard.app as dashboard_app
from services import order_form
from services.api_client import ApiError
from services.order_form import FAILURE_MESSAGE, SUCCESS_MESSAGE, initial_state
from services.po_export import ERROR_MESSAGE, NO_DATA_MESSAGE


@pytest.fixture
def backend(monkeypatch, fake_client):
    monkeypatch.setattr(dashboard_app, "_client", fake_client)
    return fake_client


@pytest.fixture
def http():
    return TestClient(dashboard_app.app)


@pytest.mark.api
@pytest.mark.integration
class TestOrderEndpoints:

    def test_validate_reports_first_error(self, http, backend, filled_form):
        """Test the validate endpoint returns the first error."""
        filled_form["labels"][0]["quality"] = ""
        resp = http.post("/api/orders/validate", json=filled_form)

        assert resp.status_code == 200
        assert resp.json() == {"error": 'Please fill mandatory label field "quality" for label #1'}
        assert backend.calls == []

    def test_submit_sends_normalised_order(self, http, backend, filled_form):
        """Test a submitted form is sent normalised and returned reset."""
        resp = http.post("/api/orders", json=filled_form)

        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == SUCCESS_MESSAGE
        assert body["form"] == initial_state().model_dump()
        _, (order,) = backend.calls[0]
        assert order.sizes == ["S", "M"]
        assert order.labels[0].trims == ["a", "b", "c"]

    def test_submit_invalid_form(self, http, backend, filled_form):
        """Test an invalid form is rejected with 422."""
        filled_form["bags"] = 0
        resp = http.post("/api/orders", json=filled_form)

        assert resp.status_code == 422
        assert resp.json()["detail"] == "Please fill the mandatory order field: bags"
        assert backend.calls == []

    def test_submit_backend_failure(self, http, backend, filled_form):
        """Test a backend failure is reported with 502."""
        backend.raises["receive_order"] = ApiError("HTTP 500", 500)
        resp = http.post("/api/orders", json=filled_form)

        assert resp.status_code == 502
        assert resp.json()["detail"] == FAILURE_MESSAGE

    @pytest.mark.parametrize("bags,status", [(0, 422), (12, 201)])
    def test_submit_validates_once(self, http, backend, filled_form, monkeypatch, bags, status):
        """Test a submitted form is validated exactly once."""
        calls = []
        real_validate = order_form.validate

        def counting_validate(order, labels):
            calls.append(order.po_number)
            return real_validate(order, labels)

        monkeypatch.setattr(order_form, "validate", counting_validate)
        filled_form["bags"] = bags
        resp = http.post("/api/orders", json=filled_form)

        assert resp.status_code == status
        assert calls == ["PO-1001"]


@pytest.mark.api
@pytest.mark.integration
class TestPurchaseOrderPdfEndpoint:

    def test_pdf_download(self, http, backend, sample_record):
        """Test the PDF is returned as an attachment."""
        backend.responses["download_purchase_order"] = sample_record
        resp = http.get("/api/purchase-orders/PO-1001/pdf")

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/pdf"
        assert 'filename="PO-1001_PurchaseOrder.pdf"' in resp.headers["content-disposition"]
        assert resp.content.startswith(b"%PDF")

    def test_pdf_not_found(self, http, backend):
        """Test a missing PO returns 404."""
        backend.responses["download_purchase_order"] = None
        resp = http.get("/api/purchase-orders/PO-404/pdf")

        assert resp.status_code == 404
        assert resp.json()["detail"] == NO_DATA_MESSAGE

    def test_pdf_backend_error(self, http, backend):
        """Test a backend error returns 502."""
        backend.raises["download_purchase_order"] = ApiError("refused")
        resp = http.get("/api/purchase-orders/PO-1/pdf")

        assert resp.status_code == 502
        assert resp.json()["detail"] == ERROR_MESSAGE


@pytest.mark.api
@pytest.mark.integration
class TestYarnEndpoint:

    def test_view_all_empty(self, http, backend):
        """Test an empty yarn list returns the notice."""
        backend.responses["view_all_yarn"] = []
        resp = http.post("/api/yarn/viewAll")

        assert resp.status_code == 200
        assert resp.json()["notice"] == "No records to display."
        assert backend.calls == [("view_all_yarn", ())]

    def test_view_with_status(self, http, backend):
        """Test the status filter is passed through."""
        backend.responses["view_yarn"] = [{"_id": "y1"}]
        resp = http.post("/api/yarn/view", json={"status": "pending"})

        assert resp.status_code == 200
        assert resp.json()["result"] == [{"_id": "y1"}]
        assert backend.calls == [("view_yarn", ("pending",))]

    def test_request_validation_error(self, http, backend):
        """Test an incomplete yarn request returns 400."""
        resp = http.post("/api/yarn/request", json={"request_form": {"content": "Cotton"}})

        assert resp.status_code == 400
        assert backend.calls == []

    def test_unknown_action(self, http, backend):
        """Test an unknown yarn action returns 404."""
        assert http.post("/api/yarn/delete").status_code == 404

    def test_health(self, http, backend):
        """Test the health endpoint answers."""
        resp = http.get("/api/health")
        assert resp.json()["status"] == "ok"
