"""
Pytest configuration and shared fixtures for the Order Desk test suite.
"""
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Generator

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
os.chdir(PROJECT_ROOT)


class FakeApiClient:
    """
    Stand-in for OrderApiClient.

    responses maps a method name to its return value; raises maps a method
    name to an exception instance. Every call is appended to .calls.
    """

    def __init__(self, responses: dict | None = None, raises: dict | None = None):
        self.responses = responses or {}
        self.raises = raises or {}
        self.calls: list[tuple[str, tuple]] = []

    def _handle(self, name: str, *args: Any) -> Any:
        self.calls.append((name, args))
        if name in self.raises:
            raise self.raises[name]
        return self.responses.get(name)

    def receive_order(self, order):
        return self._handle("receive_order", order)

    def download_purchase_order(self, po_number):
        return self._handle("download_purchase_order", po_number)

    def request_yarn(self, request):
        return self._handle("request_yarn", request)

    def view_yarn(self, status=None):
        return self._handle("view_yarn", status)

    def receive_yarn(self, receipt):
        return self._handle("receive_yarn", receipt)

    def view_all_yarn(self):
        return self._handle("view_all_yarn")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files."""
    tmp_path = tempfile.mkdtemp(prefix="orderdesk_test_")
    yield Path(tmp_path)
    shutil.rmtree(tmp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> "Config":
    """Provide a test configuration writing PDFs into a temp directory."""
    from config import Config

    config = Config()
    config.api_base_url = "http://backend.test"
    config.output_dir = temp_dir / "output"
    return config


@pytest.fixture
def fake_client() -> FakeApiClient:
    return FakeApiClient()


@pytest.fixture
def client_factory():
    """Build a FakeApiClient with canned responses or errors."""
    return FakeApiClient


@pytest.fixture
def filled_form() -> dict:
    """An order form that passes validation, as a browser would post it."""
    return {
        "customer_name": "Acme Apparel",
        "order_number": "ORD-77",
        "bags": 12,
        "company_order_number": "CO-5",
        "yarn_count": 30,
        "content": "100% Cotton",
        "spun": "Combed",
        "sizes": ["S", " ", "M"],
        "knitting_type": "Single Jersey",
        "dyeing_type": "Reactive",
        "dyeing_color": "Navy",
        "finishing_type": "Compacted",
        "po_number": "PO-1001",
        "additional_info": "",
        "labels": [
            {
                "vendor_id": "V-1",
                "quality": "Premium",
                "printed_woven": "Woven",
                "elastic_type": "Flat",
                "elastic_vendor_id": "",
                "trims": "a, b ,c",
                "sizes": "S,, M",
                "additional_info": "",
            }
        ],
    }


@pytest.fixture
def sample_record() -> dict:
    """A stored order as returned by the download endpoint (JSON)."""
    return {
        "customer_name": "Acme Apparel",
        "order_number": "ORD-77",
        "company_order_number": "CO-5",
        "po_number": "PO-1001",
        "bags": 12,
        "yarn_count": 30,
        "content": "100% Cotton",
        "spun": "Combed",
        "knitting_type": "Single Jersey",
        "dyeing_type": "Reactive",
        "dyeing_color": "Navy",
        "finishing_type": "Compacted",
        "sizes": ["S", "M"],
        "labels": [
            {
                "vendor_id": "V-1",
                "quality": "Premium",
                "printed_woven": "Woven",
                "elastic_type": "Flat",
                "elastic_vendor_id": None,
                "trims": ["a", "b"],
                "sizes": ["S"],
            },
            {
                "vendor_id": "V-2",
                "quality": "Standard",
                "printed_woven": "Printed",
                "elastic_type": "Knitted",
                "trims": [],
                "sizes": ["M", "L"],
            },
        ],
    }


# Configure pytest markers
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "api: API tests")
