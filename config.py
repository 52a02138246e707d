"""
Central configuration for the order desk.

Environment-driven settings:

  API_BASE_URL=http://orders.internal:8000
  PDF_FONT_PATH=/usr/share/fonts/truetype/noto/NotoSansCJK-Regular.ttf   # optional

PDF_FONT_PATH points at a TrueType font used for purchase order PDFs, so
names outside Latin-1 render as written. Without it the built-in Helvetica
is used.

Everything else is a hardcoded default; override by passing a Config
instance with different values.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


# Project root (directory containing this file)
PROJECT_ROOT = Path(__file__).parent

DEFAULT_API_BASE_URL = "http://localhost:8000"
DEFAULT_OUTPUT_DIR   = PROJECT_ROOT / "output"


@dataclass
class Config:
    # --- Backend API ---
    api_base_url: str = field(
        default_factory=lambda: os.getenv("API_BASE_URL", DEFAULT_API_BASE_URL).strip().rstrip("/")
    )
    request_timeout: int = 30       # seconds, passed straight to urlopen

    # --- PDF export ---
    output_dir: Path = field(default_factory=lambda: DEFAULT_OUTPUT_DIR)
    pdf_font_path: Optional[Path] = field(
        default_factory=lambda: Path(os.environ["PDF_FONT_PATH"]) if os.getenv("PDF_FONT_PATH") else None
    )

    def ensure_output_dir(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)
