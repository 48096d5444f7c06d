"""
Central configuration for the budget template generator.

This module defines:
- Default template values (FX rate, currencies, buffer guardrail).
- PDF layout constants (page size, margins, fonts, row heights, colours).
- Export settings (CSV encoding, PDF filename prefix).

All values are constants and should be imported where needed (no runtime logic here).
"""

from __future__ import annotations


DEFAULT_FX_RATE = "1600"
DEFAULT_PRIMARY_CURRENCY = "NGN"
DEFAULT_PRIMARY_SYMBOL = "₦"
DEFAULT_SECONDARY_CURRENCY = "USD"
DEFAULT_SECONDARY_SYMBOL = "$"
DEFAULT_BUFFER_PERCENT = "20"

DEFAULT_ORG_NAME = "Saintlammy Foundation / Saintlammy Community Care Initiative (SCCI)"
DEFAULT_TEMPLATE_TITLE = "Budget Template"
DEFAULT_TEMPLATE_SUBTITLE = "Vulnerable Homes Outreach"
DEFAULT_TAGLINE = (
    "Use this template to budget with 3 buckets: Core Packs (fixed), "
    "Casework Fund (capped), and Buffer/Logistics (volatility protection)."
)
DEFAULT_FOOTER_NOTE = (
    "Note: Record NGN and USD equivalents for transparency. Keep evidence "
    "(quotes, receipts, confirmations) archived with the final outreach report."
)
DEFAULT_MULTIPLIER_LABEL = "homes"

# Marker used in plain-text summaries for blank amounts
EMPTY_MARK = "—"

# Substring identifying the "approved amount" column of a bucket
APPROVED_KEY_HINT = "approv"

ROW_ID_LENGTH = 7

# -----------------------------
# PDF layout
# -----------------------------
PAGE_MARGIN_INCH = 0.4
FOOTER_HEIGHT_INCH = 0.45
FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"
TITLE_FONT_SIZE = 16
SUBTITLE_FONT_SIZE = 9
SECTION_FONT_SIZE = 9
BODY_FONT_SIZE = 7
SMALL_FONT_SIZE = 6.5
ROW_HEIGHT = 13
CELL_PADDING = 3

COLOR_TEXT = "#1a1a1a"
COLOR_HEADER_BG = "#1e3a5f"
COLOR_SECTION_BG = "#2d5a8e"
COLOR_SECTION_TIP = "#b0cce8"
COLOR_ROW_EVEN = "#f0f4f8"
COLOR_SUBTOTAL_BG = "#d4e4f5"
COLOR_BORDER = "#a0b8d0"
COLOR_MUTED = "#666666"

# -----------------------------
# Export
# -----------------------------
CSV_ENCODING = "utf-8"
PDF_FILENAME_PREFIX = "budget-template"
PDF_FILENAME_FALLBACK = "scci"
