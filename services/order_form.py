"""
Order form page: view-model, transitions, validation and submission.

The page owns one OrderFormState, built fresh by initial_state() each time
the page is opened. Every user action is a pure function
(state, ...) -> new state; OrderFormPage strings them together and owns the
single network call made on submit.

Submission flow:
  1. validate()       -- first missing mandatory field wins, no network call
  2. build_payload()  -- numbers coerced, sizes cleaned, labels mapped
  3. receive_order()  -- one POST, no retry
  4. reset            -- state back to initial_state() on success only
"""
import logging
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from models.order import LabelForm, Order

logger = logging.getLogger(__name__)

MANDATORY_ORDER_FIELDS = [
    "customer_name",
    "order_number",
    "bags",
    "company_order_number",
    "yarn_count",
    "content",
    "spun",
    "sizes",
    "knitting_type",
    "dyeing_type",
    "finishing_type",
    "po_number",
]
MANDATORY_LABEL_FIELDS = ["vendor_id", "quality", "printed_woven", "elastic_type"]
NUMERIC_FIELDS = ("bags", "yarn_count")

SUCCESS_MESSAGE = "Order received successfully!"
FAILURE_MESSAGE = "Failed to receive order. Check the logs for details."


class OrderFormState(BaseModel):
    """Everything the operator has typed into the order form."""
    customer_name: str = ""
    order_number: str = ""
    bags: int = 0
    company_order_number: str = ""
    yarn_count: int = 0
    content: str = ""
    spun: str = ""
    sizes: List[str] = Field(default_factory=list)
    knitting_type: str = ""
    dyeing_type: str = ""
    dyeing_color: str = ""
    finishing_type: str = ""
    po_number: str = ""
    additional_info: str = ""
    labels: List[LabelForm] = Field(default_factory=lambda: [LabelForm()])


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def initial_state() -> OrderFormState:
    return OrderFormState()


def to_number(value: Any) -> int:
    """Coerce numeric text input; blank or unparseable text becomes 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    text = str(value).strip() if value is not None else ""
    if not text:
        return 0
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        logger.debug("Non-numeric input %r coerced to 0", value)
        return 0


def set_field(state: OrderFormState, field: str, value: Any) -> OrderFormState:
    """Set one scalar order field. sizes and labels have their own transitions."""
    if field in ("sizes", "labels") or field not in OrderFormState.model_fields:
        raise ValueError(f"Not a scalar order field: {field}")
    if field in NUMERIC_FIELDS:
        value = to_number(value)
    else:
        value = "" if value is None else str(value)
    return state.model_copy(update={field: value})


def add_size(state: OrderFormState) -> OrderFormState:
    return state.model_copy(update={"sizes": [*state.sizes, ""]})


def update_size(state: OrderFormState, index: int, value: str) -> OrderFormState:
    sizes = list(state.sizes)
    sizes[index] = value
    return state.model_copy(update={"sizes": sizes})


def remove_size(state: OrderFormState, index: int) -> OrderFormState:
    sizes = [s for i, s in enumerate(state.sizes) if i != index]
    return state.model_copy(update={"sizes": sizes})


def add_label(state: OrderFormState) -> OrderFormState:
    return state.model_copy(update={"labels": [*state.labels, LabelForm()]})


def update_label(state: OrderFormState, index: int, field: str, value: str) -> OrderFormState:
    if field not in LabelForm.model_fields:
        raise ValueError(f"Unknown label field: {field}")
    labels = list(state.labels)
    labels[index] = labels[index].model_copy(update={field: "" if value is None else str(value)})
    return state.model_copy(update={"labels": labels})


def remove_label(state: OrderFormState, index: int) -> OrderFormState:
    labels = [label for i, label in enumerate(state.labels) if i != index]
    return state.model_copy(update={"labels": labels})


def reset(state: OrderFormState) -> OrderFormState:
    return initial_state()


# ---------------------------------------------------------------------------
# Validation and payload
# ---------------------------------------------------------------------------

def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return not any(str(v).strip() for v in value)
    return value == 0


def validate(order: OrderFormState, labels: List[LabelForm]) -> Optional[str]:
    """Return the first validation error as a sentence, or None."""
    for field in MANDATORY_ORDER_FIELDS:
        if _is_missing(getattr(order, field)):
            return f"Please fill the mandatory order field: {field.replace('_', ' ')}"

    for i, label in enumerate(labels):
        for field in MANDATORY_LABEL_FIELDS:
            if _is_missing(getattr(label, field)):
                return f'Please fill mandatory label field "{field}" for label #{i + 1}'

    return None


def build_payload(state: OrderFormState) -> Order:
    """Normalise the form into the Order sent to the backend."""
    return Order(
        customer_name=state.customer_name,
        order_number=state.order_number,
        bags=to_number(state.bags),
        company_order_number=state.company_order_number,
        yarn_count=to_number(state.yarn_count),
        content=state.content,
        spun=state.spun,
        sizes=[s.strip() for s in state.sizes if s.strip()],
        knitting_type=state.knitting_type,
        dyeing_type=state.dyeing_type,
        dyeing_color=state.dyeing_color,
        finishing_type=state.finishing_type,
        po_number=state.po_number,
        labels=[label.to_label() for label in state.labels],
        additional_info=state.additional_info.strip() or None,
    )


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

class OrderFormPage:
    """
    One order form, as opened by an operator.

    Usage:
        page = OrderFormPage(client)
        page.apply(set_field, "customer_name", "Acme")
        page.apply(add_size)
        ...
        page.submit()
        print(page.message)
    """

    def __init__(self, client: Any, state: Optional[OrderFormState] = None) -> None:
        self.client = client
        self.state = state if state is not None else initial_state()
        self.message: Optional[str] = None
        self.loading = False

    def apply(self, transition, *args: Any) -> OrderFormState:
        self.state = transition(self.state, *args)
        return self.state

    def submit(self) -> bool:
        """Validate, send and reset. Returns True when the backend accepted the order."""
        self.message = None

        error = validate(self.state, self.state.labels)
        if error:
            self.message = error
            return False

        self.loading = True
        try:
            payload = build_payload(self.state)
            self.client.receive_order(payload)
        except Exception as e:
            logger.error("Failed to receive order %s: %s", self.state.po_number, e)
            self.message = FAILURE_MESSAGE
            return False
        finally:
            self.loading = False

        logger.info("Order %s received", payload.po_number)
        self.state = reset(self.state)
        self.message = SUCCESS_MESSAGE
        return True
