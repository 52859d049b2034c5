"""Deterministic, filesystem-safe names for tax pack contents."""

import re
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

MAX_FILENAME_LENGTH = 50
UNKNOWN_VENDOR = "Unknown"

# English names regardless of process locale
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_\-\s]")
_WHITESPACE = re.compile(r"\s+")


def extract_vendor(description: Optional[str]) -> str:
    """Return the text before the first '-' of a description, or Unknown."""
    if not description:
        return UNKNOWN_VENDOR
    vendor = description.split("-", 1)[0].strip()
    return vendor or UNKNOWN_VENDOR


def sanitize_filename(name: str) -> str:
    """
    Make a string safe for use as a file or folder name.

    Drops characters outside [A-Za-z0-9_- ], turns whitespace runs into a
    single underscore and truncates to 50 characters.
    """
    cleaned = _UNSAFE_CHARS.sub("", name)
    cleaned = _WHITESPACE.sub("_", cleaned)
    return cleaned[:MAX_FILENAME_LENGTH]


def file_extension(file_type: Optional[str]) -> str:
    """Map a receipt file type (MIME type or short name) to an extension."""
    kind = (file_type or "").lower()
    if "pdf" in kind:
        return "pdf"
    if "png" in kind:
        return "png"
    return "jpg"


def month_folder_name(value: Union[date, datetime]) -> str:
    """Folder name for a month of receipts, e.g. 2025-04-April."""
    return f"{value.year}-{value.month:02d}-{MONTH_NAMES[value.month - 1]}"


def whole_amount(amount: Decimal) -> str:
    """Absolute amount rounded half-up to a whole unit."""
    return str(abs(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def receipt_filename(
    sequence: str,
    vendor: str,
    amount: Decimal,
    file_type: Optional[str],
) -> str:
    """Build receipt_{NNN}_{Vendor}_{Amount}.{ext}."""
    return (
        f"receipt_{sequence}_{sanitize_filename(vendor)}_"
        f"{whole_amount(amount)}.{file_extension(file_type)}"
    )


class ReceiptSequence:
    """
    Receipt numbering for one export run.

    Numbers start at 1 and only advance once a receipt has been written,
    so a failed receipt does not leave a gap.
    """

    def __init__(self, start: int = 1):
        self._next = start

    def peek(self) -> str:
        """Return the next number, zero-padded to three digits."""
        return f"{self._next:03d}"

    def advance(self) -> None:
        self._next += 1

    @property
    def position(self) -> int:
        """The next number to be handed out."""
        return self._next

    def reset_to(self, position: int) -> None:
        """Roll back to an earlier position when a property is abandoned."""
        self._next = position
