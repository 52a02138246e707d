"""
Yarn page: one selector, four actions.

  request  -> request_yarn(YarnRequest)
  view     -> view_yarn(status or None)
  receive  -> receive_yarn(YarnReceipt)
  viewAll  -> view_all_yarn()

Each action keeps its own sub-form; loading/error/result are shared and
cleared whenever the selection changes or an action starts.
"""
import logging
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError

from models.yarn import YarnReceipt, YarnRequest

logger = logging.getLogger(__name__)

ACTIONS = ("request", "view", "receive", "viewAll")

FALLBACK_ERROR = "Something went wrong."
EMPTY_LIST_NOTICE = "No records to display."
NO_ACTION_ERROR = "Select an action first."


class YarnRequestForm(BaseModel):
    count: str = ""
    content: str = ""
    spun_type: str = ""
    bags: str = ""
    kgs: str = ""

    def to_request(self) -> YarnRequest:
        return YarnRequest(**{k: v.strip() for k, v in self.model_dump().items()})


class YarnReceiptForm(BaseModel):
    spun_type: str = ""
    kgs_received: str = ""
    bags_recevied: str = ""
    received_date: str = ""
    vendor_id: str = ""

    def to_receipt(self) -> YarnReceipt:
        return YarnReceipt(**{k: v.strip() for k, v in self.model_dump().items()})


class YarnPageState(BaseModel):
    selected_action: Optional[str] = None
    request_form: YarnRequestForm = Field(default_factory=YarnRequestForm)
    receipt_form: YarnReceiptForm = Field(default_factory=YarnReceiptForm)
    status: str = ""
    loading: bool = False
    error: Optional[str] = None
    result: Any = None
    all_yarn: List[Any] = Field(default_factory=list)
    notice: Optional[str] = None


def _clear_outputs(state: YarnPageState, **update: Any) -> YarnPageState:
    return state.model_copy(update={"error": None, "result": None, "all_yarn": [], "notice": None, **update})


def select_action(state: YarnPageState, action: str) -> YarnPageState:
    if action not in ACTIONS:
        raise ValueError(f"Unknown yarn action: {action}")
    return _clear_outputs(state, selected_action=action)


def update_request(state: YarnPageState, field: str, value: str) -> YarnPageState:
    if field not in YarnRequestForm.model_fields:
        raise ValueError(f"Unknown yarn request field: {field}")
    form = state.request_form.model_copy(update={field: str(value)})
    return state.model_copy(update={"request_form": form})


def update_receipt(state: YarnPageState, field: str, value: str) -> YarnPageState:
    if field not in YarnReceiptForm.model_fields:
        raise ValueError(f"Unknown yarn receipt field: {field}")
    form = state.receipt_form.model_copy(update={field: str(value)})
    return state.model_copy(update={"receipt_form": form})


def set_status(state: YarnPageState, status: str) -> YarnPageState:
    return state.model_copy(update={"status": status or ""})


def error_message(err: Exception) -> str:
    """Backend detail if present, else the error text, else a fixed fallback."""
    detail = getattr(err, "detail", None)
    if detail:
        return detail if isinstance(detail, str) else str(detail)
    return str(err) or FALLBACK_ERROR


def _validation_message(err: ValidationError) -> str:
    first = err.errors()[0]
    field = ".".join(str(p) for p in first.get("loc", ())) or "input"
    return f"{field.replace('_', ' ')}: {first.get('msg', 'invalid value')}"


class YarnPage:
    """
    Usage:
        page = YarnPage(client)
        page.apply(select_action, "view")
        page.apply(set_status, "pending")
        page.handle_action()
        page.state.result
    """

    def __init__(self, client: Any, state: Optional[YarnPageState] = None) -> None:
        self.client = client
        self.state = state if state is not None else YarnPageState()

    def apply(self, transition, *args: Any) -> YarnPageState:
        self.state = transition(self.state, *args)
        return self.state

    def _call(self, action: str) -> Any:
        if action == "request":
            return self.client.request_yarn(self.state.request_form.to_request())
        if action == "view":
            return self.client.view_yarn(self.state.status.strip() or None)
        if action == "receive":
            return self.client.receive_yarn(self.state.receipt_form.to_receipt())
        return self.client.view_all_yarn()

    def handle_action(self) -> YarnPageState:
        """Run the selected action once and record its outcome in the page state."""
        action = self.state.selected_action
        self.state = _clear_outputs(self.state)
        if action not in ACTIONS:
            self.state = self.state.model_copy(update={"error": NO_ACTION_ERROR})
            return self.state

        self.state = self.state.model_copy(update={"loading": True})
        update: dict = {}
        try:
            response = self._call(action)
            if action == "viewAll":
                records = response if isinstance(response, list) else ([response] if response else [])
                update["all_yarn"] = records
                if not records:
                    update["notice"] = EMPTY_LIST_NOTICE
            else:
                update["result"] = response
        except ValidationError as e:
            update["error"] = _validation_message(e)
        except Exception as e:
            logger.error("Yarn %s failed: %s", action, e)
            update["error"] = error_message(e)
        finally:
            update["loading"] = False
            self.state = self.state.model_copy(update=update)

        return self.state
