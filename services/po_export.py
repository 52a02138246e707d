"""
Purchase order PDF export.

Fetches a stored order by PO number, reads the record (JSON or CSV) and
lays it out top-down on A4 pages with reportlab:

  Purchase Order #<po>            bold 18
  Generated on: <timestamp>       regular 12
  <order fields>                  bold key, plain value at +150pt
  Labels                          bold 14
    Label #1 ... Label #N         one block per label, 10pt apart

The cursor is the top of the next line, measured from the top of the page,
and starts at the top margin; text baselines sit one font size below it.
Every line goes through reserve(), which starts a new page when the line
would cross the bottom margin. A label header reserves its whole block so
a label is not split when it can fit on the next page.

Helvetica only covers Latin-1. Set Config.pdf_font_path to a TrueType font
to render other scripts; without one, text the font cannot encode is
logged as a warning.
"""
import io
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from config import Config
from .records import RecordParseError, parse_order_record

logger = logging.getLogger(__name__)

MARGIN = 40
LINE_HEIGHT = 18
VALUE_OFFSET = 150
LABEL_GAP = 10

STANDARD_FONTS = ("Helvetica", "Helvetica-Bold")
# Helvetica is written with WinAnsiEncoding
STANDARD_ENCODING = "cp1252"

MISSING_PO_MESSAGE = "Please enter PO number to download."
NO_DATA_MESSAGE = "No data found for this PO."
ERROR_MESSAGE = "Error generating PDF from PO data."

ORDER_FIELDS = [
    ("Customer Name", "customer_name"),
    ("Order Number", "order_number"),
    ("Company Order No", "company_order_number"),
    ("PO Number", "po_number"),
    ("Bags", "bags"),
    ("Yarn Count", "yarn_count"),
    ("Content", "content"),
    ("Spun", "spun"),
    ("Knitting Type", "knitting_type"),
    ("Dyeing Type", "dyeing_type"),
    ("Dyeing Color", "dyeing_color"),
    ("Finishing Type", "finishing_type"),
    ("Sizes", "sizes"),
    ("Additional Info", "additional_info"),
]

LABEL_FIELDS = [
    ("Vendor ID", "vendor_id"),
    ("Quality", "quality"),
    ("Printed/Woven", "printed_woven"),
    ("Elastic Type", "elastic_type"),
    ("Elastic Vendor ID", "elastic_vendor_id"),
    ("Sizes", "sizes"),
    ("Trims", "trims"),
    ("Additional Info", "additional_info"),
]


def display_value(value: Any) -> str:
    """Sequences joined with ", "; None and blanks become "-"."""
    if value is None:
        return "-"
    if isinstance(value, (list, tuple)):
        text = ", ".join(str(v) for v in value if str(v).strip())
    else:
        text = str(value)
    return text if text.strip() else "-"


def pdf_filename(po_number: str) -> str:
    safe = po_number.replace("/", "_").replace("\\", "_")
    return f"{safe}_PurchaseOrder.pdf"


def register_font(font_path: Optional[Path]) -> tuple[str, str]:
    """
    Return the (regular, bold) font names to draw with.

    A configured TrueType file is registered once under a name derived from
    its file stem and used for both weights. Raises when the file cannot be
    read as a font.
    """
    if not font_path:
        return STANDARD_FONTS
    name = f"OrderDesk-{Path(font_path).stem}"
    if name not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(name, str(font_path)))
        logger.debug("Registered PDF font %s from %s", name, font_path)
    return name, name


def unencodable_chars(text: str) -> set[str]:
    """Characters of *text* the built-in Helvetica cannot show."""
    missing = set()
    for ch in text:
        try:
            ch.encode(STANDARD_ENCODING)
        except UnicodeEncodeError:
            missing.add(ch)
    return missing


class PurchaseOrderPdf:
    """
    Single-use renderer for one purchase order.

    Usage:
        pdf = PurchaseOrderPdf("PO-1001")
        data = pdf.render(record)
        pdf.page_count
        pdf.replaced_chars    # set when Helvetica could not show some text
    """

    def __init__(
        self,
        po_number: str,
        generated_at: Optional[datetime] = None,
        font_path: Optional[Path] = None,
    ) -> None:
        self.po_number = po_number
        self.generated_at = generated_at or datetime.now()
        self.regular_font, self.bold_font = register_font(font_path)
        self.page_width, self.page_height = A4
        self.page_count = 0
        self.y = MARGIN
        self.replaced_chars: set[str] = set()
        self._buffer = io.BytesIO()
        self.c = canvas.Canvas(self._buffer, pagesize=A4)
        self.c.setTitle(f"Purchase Order #{po_number}")
        self._font = (self.regular_font, 12)

    # ─── PAGE INFRASTRUCTURE ───

    @property
    def bottom_limit(self) -> float:
        return self.page_height - MARGIN

    def set_font(self, name: str, size: int) -> None:
        self._font = (name, size)
        self.c.setFont(name, size)

    def reserve(self, height: float) -> None:
        """Start a new page if *height* more points would cross the bottom margin."""
        if self.y + height > self.bottom_limit:
            self.c.showPage()
            self.page_count += 1
            self.y = MARGIN
            # showPage() resets the graphics state
            self.c.setFont(*self._font)

    def draw_text(self, text: str, x: float) -> None:
        name, size = self._font
        if name in STANDARD_FONTS:
            self.replaced_chars |= unencodable_chars(text)
        self.c.drawString(x, self.page_height - (self.y + size), text)

    def draw_line(self, text: str, advance: float, bold: bool = False, size: int = 12) -> None:
        self.set_font(self.bold_font if bold else self.regular_font, size)
        self.reserve(advance)
        self.draw_text(text, MARGIN)
        self.y += advance

    def draw_field(self, key: str, value: Any) -> None:
        """Bold key at the margin, value wrapped into the remaining width."""
        max_width = self.page_width - 2 * MARGIN - VALUE_OFFSET
        lines = simpleSplit(display_value(value), self.regular_font, 12, max_width) or ["-"]
        for i, line in enumerate(lines):
            self.set_font(self.regular_font, 12)
            self.reserve(LINE_HEIGHT)
            if i == 0:
                self.set_font(self.bold_font, 12)
                self.draw_text(f"{key}:", MARGIN)
                self.set_font(self.regular_font, 12)
            self.draw_text(line, MARGIN + VALUE_OFFSET)
            self.y += LINE_HEIGHT

    # ─── SECTIONS ───

    def _header(self) -> None:
        self.draw_line(f"Purchase Order #{self.po_number}", 25, bold=True, size=18)
        stamp = self.generated_at.strftime("%Y-%m-%d %H:%M:%S")
        self.draw_line(f"Generated on: {stamp}", 25)

    def _order_fields(self, record: dict) -> None:
        for key, name in ORDER_FIELDS:
            self.draw_field(key, record.get(name))

    def _labels(self, record: dict) -> None:
        labels = record.get("labels")
        labels = labels if isinstance(labels, list) else []

        self.y += 15
        self.draw_line("Labels", 20, bold=True, size=14)

        for idx, label in enumerate(labels):
            if not isinstance(label, dict):
                label = {}
            self.set_font(self.bold_font, 12)
            self.reserve(LINE_HEIGHT * (1 + len(LABEL_FIELDS)))
            self.draw_line(f"Label #{idx + 1}", LINE_HEIGHT, bold=True)
            for key, name in LABEL_FIELDS:
                self.draw_field(key, label.get(name))
            self.y += LABEL_GAP

    def render(self, record: dict) -> bytes:
        self.page_count = 1
        self.y = MARGIN
        self._header()
        self._order_fields(record)
        self._labels(record)
        self.c.save()
        if self.replaced_chars:
            logger.warning(
                "PO %s: characters not covered by Helvetica were replaced: %s "
                "(set PDF_FONT_PATH to a font that covers them)",
                self.po_number, "".join(sorted(self.replaced_chars)),
            )
        return self._buffer.getvalue()


def render_purchase_order(
    record: dict,
    po_number: str,
    generated_at: Optional[datetime] = None,
    font_path: Optional[Path] = None,
) -> bytes:
    return PurchaseOrderPdf(po_number, generated_at, font_path).render(record)


def write_pdf(path: Path, data: bytes) -> None:
    """Write *data* to *path* through a temp file so a failed write leaves nothing behind."""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    finally:
        Path(tmp_name).unlink(missing_ok=True)


@dataclass
class ExportOutcome:
    message: str
    path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.path is not None


class PurchaseOrderExporter:
    """Download page: fetch a PO and save it as {po_number}_PurchaseOrder.pdf."""

    def __init__(self, client: Any, config: Optional[Config] = None) -> None:
        self.client = client
        self.config = config or Config()
        self.loading = False

    def fetch_record(self, po_number: str) -> Optional[dict]:
        response = self.client.download_purchase_order(po_number)
        return parse_order_record(response, po_number)

    def render(self, record: dict, po_number: str) -> bytes:
        return render_purchase_order(record, po_number, font_path=self.config.pdf_font_path)

    def download_as_pdf(self, po_number: str) -> ExportOutcome:
        po_number = (po_number or "").strip()
        if not po_number:
            return ExportOutcome(MISSING_PO_MESSAGE)

        self.loading = True
        try:
            record = self.fetch_record(po_number)
            if not record:
                logger.info("No data found for PO %s", po_number)
                return ExportOutcome(NO_DATA_MESSAGE)

            data = self.render(record, po_number)
            self.config.ensure_output_dir()
            out_path = self.config.output_dir / pdf_filename(po_number)
            write_pdf(out_path, data)
        except Exception as e:
            kind = "Unreadable PO data" if isinstance(e, RecordParseError) else "PDF export failed"
            logger.error("%s for %s: %s", kind, po_number, e)
            return ExportOutcome(ERROR_MESSAGE)
        finally:
            self.loading = False

        logger.info("Purchase order %s written to %s", po_number, out_path)
        return ExportOutcome(f"Purchase Order #{po_number} downloaded successfully!", out_path)
