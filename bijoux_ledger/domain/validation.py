"""Input normalization for free-text fields"""

from typing import Optional

from bijoux_ledger.domain.exceptions import InvalidRecordError


def require_text(value: Optional[str], what: str = "customer name") -> str:
    """Trimmed non-empty text"""
    cleaned = (value or "").strip()
    if not cleaned:
        raise InvalidRecordError(f"{what} is required")
    return cleaned


def optional_text(value: Optional[str]) -> Optional[str]:
    """Trimmed text, with blanks collapsed to None"""
    cleaned = (value or "").strip()
    return cleaned or None
