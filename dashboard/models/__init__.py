"""
Pydantic models for dashboard API requests.
"""
from pydantic import BaseModel, Field

from services.yarn_actions import YarnReceiptForm, YarnRequestForm


class YarnActionRequest(BaseModel):
    request_form: YarnRequestForm = Field(default_factory=YarnRequestForm)
    receipt_form: YarnReceiptForm = Field(default_factory=YarnReceiptForm)
    status: str = ""   # filter for the "view" action only
