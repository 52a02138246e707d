from pydantic import BaseModel, Field
from typing import Optional, List


def split_csv_field(value: Optional[str]) -> List[str]:
    """Split a comma-delimited form value into trimmed, non-blank entries."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


class Label(BaseModel):
    """A per-garment specification line attached to an order."""
    vendor_id: str
    quality: str
    printed_woven: str
    elastic_type: str
    elastic_vendor_id: Optional[str] = None
    trims: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    additional_info: Optional[str] = None   # UI-only, echoed to the PDF


class LabelForm(BaseModel):
    """
    A label as typed into the order form.

    trims and sizes are single strings so the operator can type commas
    freely; to_label() is the only place they become sequences.
    """
    vendor_id: str = ""
    quality: str = ""
    printed_woven: str = ""
    elastic_type: str = ""
    elastic_vendor_id: str = ""
    trims: str = ""
    sizes: str = ""
    additional_info: str = ""

    def to_label(self) -> Label:
        return Label(
            vendor_id=self.vendor_id.strip(),
            quality=self.quality.strip(),
            printed_woven=self.printed_woven.strip(),
            elastic_type=self.elastic_type.strip(),
            elastic_vendor_id=self.elastic_vendor_id.strip() or None,
            trims=split_csv_field(self.trims),
            sizes=split_csv_field(self.sizes),
            additional_info=self.additional_info.strip() or None,
        )


class Order(BaseModel):
    """
    A purchase order as sent to POST /receive_order/.
    po_number is the key used to download the order again later.
    """
    customer_name: str
    order_number: str
    bags: int
    company_order_number: str
    yarn_count: int
    content: str
    spun: str
    sizes: List[str] = Field(default_factory=list)
    knitting_type: str
    dyeing_type: str
    dyeing_color: str = ""
    finishing_type: str
    po_number: str
    labels: Optional[List[Label]] = None
    additional_info: Optional[str] = None
