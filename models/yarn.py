from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class YarnRequest(BaseModel):
    """Yarn ordered from a vendor. Numbers arrive as text from the form."""
    count: int
    content: str = Field(min_length=1)
    spun_type: str = Field(min_length=1)
    bags: int
    kgs: float


class YarnReceipt(BaseModel):
    """
    Yarn received from a vendor.

    bags_recevied keeps the backend's spelling; it is the wire name.
    received_date is the datetime-local string from the form
    (e.g. "2024-05-01T09:30").
    """
    spun_type: str = Field(min_length=1)
    kgs_received: float
    bags_recevied: int
    received_date: str = Field(min_length=1)
    vendor_id: str = Field(min_length=1)

    @field_validator("received_date")
    @classmethod
    def _check_received_date(cls, value: str) -> str:
        datetime.fromisoformat(value)
        return value
