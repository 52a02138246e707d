"""
HTTP client for the order/yarn backend.

A thin wrapper over urllib: one request per call, no retries. JSON
responses are decoded; anything else (the CSV purchase-order export) is
returned as text.

Endpoints
---------
  POST /receive_order/                        → create an order
  GET  /download_purchase_order/{po_number}   → order record (JSON or CSV)
  POST /request_yarn/                         → create a yarn request
  GET  /view_yarn/?status=                    → yarn requests, optionally filtered
  POST /receive_yarn/                         → record a yarn receipt
  GET  /view_all_yarn/                        → every yarn record
"""
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Optional

from config import Config
from models.order import Order
from models.yarn import YarnReceipt, YarnRequest

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    A failed backend call.

    status_code is None for transport failures (DNS, refused, timeout).
    detail carries the backend's {"detail": ...} message when it sent one.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


def _decode_body(raw: bytes, content_type: str) -> Any:
    text = raw.decode("utf-8", errors="replace")
    if "json" in (content_type or "").lower():
        return json.loads(text) if text.strip() else None
    return text


def _error_detail(body: str) -> Any:
    try:
        data = json.loads(body)
    except (TypeError, ValueError):
        return None
    return data.get("detail") if isinstance(data, dict) else None


class OrderApiClient:
    """
    Talks to the backend configured by Config.api_base_url.

    Usage:
        client = OrderApiClient(Config())
        client.receive_order(order)
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or Config()

    def _url(self, path: str, params: Optional[dict] = None) -> str:
        if not path.startswith("/"):
            path = "/" + path
        url = f"{self.config.api_base_url}{path}"
        if params:
            query = {k: v for k, v in params.items() if v not in (None, "")}
            if query:
                url += "?" + urllib.parse.urlencode(query)
        return url

    def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        url = self._url(path, params)
        data = json.dumps(body).encode("utf-8") if body is not None else None
        req = urllib.request.Request(url, data=data, method=method.upper())
        req.add_header("Accept", "application/json, text/csv")
        if data is not None:
            req.add_header("Content-Type", "application/json; charset=utf-8")

        try:
            with urllib.request.urlopen(req, timeout=self.config.request_timeout) as response:
                status_code = response.getcode()
                content_type = response.headers.get("Content-Type", "")
                raw = response.read()
        except urllib.error.HTTPError as e:
            resp_body = e.read().decode("utf-8", errors="replace") if e.fp else ""
            logger.error("%s %s failed: HTTP %d - %s", method, url, e.code, resp_body[:500])
            raise ApiError(
                f"HTTP {e.code} for {url}",
                status_code=e.code,
                detail=_error_detail(resp_body),
            ) from e
        except urllib.error.URLError as e:
            logger.error("%s %s failed: %s", method, url, e.reason)
            raise ApiError(f"Could not reach {url}: {e.reason}") from e

        logger.debug("%s %s: HTTP %d", method, url, status_code)
        try:
            return _decode_body(raw, content_type)
        except ValueError as e:
            raise ApiError(f"Invalid JSON from {url}", status_code=status_code) from e

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def receive_order(self, order: Order) -> Any:
        """Create (receive) a new order. Returns the backend's record or echo."""
        return self._request("POST", "/receive_order/", body=order.model_dump())

    def download_purchase_order(self, po_number: str) -> Any:
        """Fetch a stored order by PO number; dict for JSON, str for CSV."""
        path = "/download_purchase_order/" + urllib.parse.quote(po_number, safe="")
        return self._request("GET", path)

    # ------------------------------------------------------------------
    # Yarn
    # ------------------------------------------------------------------

    def request_yarn(self, request: YarnRequest) -> Any:
        return self._request("POST", "/request_yarn/", body=request.model_dump())

    def view_yarn(self, status: Optional[str] = None) -> Any:
        return self._request("GET", "/view_yarn/", params={"status": status})

    def receive_yarn(self, receipt: YarnReceipt) -> Any:
        return self._request("POST", "/receive_yarn/", body=receipt.model_dump())

    def view_all_yarn(self) -> Any:
        return self._request("GET", "/view_all_yarn/")
