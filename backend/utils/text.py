from __future__ import annotations

from typing import Optional


def clean_text(text: Optional[str]) -> str:
    """Feedback is measured without surrounding whitespace; whitespace-only counts as empty."""
    if not text:
        return ""
    return text.strip()
