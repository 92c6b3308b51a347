"""
Text helpers shared by the matcher and the extractors: title normalization
and locale-tolerant price parsing.
"""

from typing import Optional
import math
import re
import unicodedata


_NON_WORD_RE = re.compile(r"[^\w\s]|_")
_SPACES_RE = re.compile(r"\s+")
_NBSP_RE = re.compile(r"&nbsp;|[\u00a0\u202f\u2007]")
_CURRENCY_AND_SPACE_RE = re.compile(r"[€$£¥\s]+")
_NOT_NUMERIC_RE = re.compile(r"[^\d,.]")
_FLOAT_PREFIX_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def normalize(title: Optional[str]) -> str:
    """Lower-case, strip diacritics, turn punctuation into spaces.

    Token order is preserved: "rtx 3060" must stay adjacent for the
    bigram matcher.
    """
    if not title:
        return ""
    text = unicodedata.normalize("NFD", title.lower())
    text = "".join(c for c in text if not unicodedata.combining(c))
    text = _NON_WORD_RE.sub(" ", text)
    return _SPACES_RE.sub(" ", text).strip()


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace (including non-breaking spaces) of a DOM text."""
    if not text:
        return ""
    return " ".join(text.split())


def parse_number(raw: Optional[str]) -> Optional[float]:
    """Parse "1 362,66 €", "1.362,66", "$1,234.56" or "194.99" to a float.

    When both separators occur, the later one is the decimal mark. A lone
    separator is always read as decimal, so "1.234" gives 1.234.
    """
    if not raw:
        return None
    s = _NBSP_RE.sub(" ", raw)
    s = _CURRENCY_AND_SPACE_RE.sub("", s)
    s = _NOT_NUMERIC_RE.sub("", s)

    last_comma = s.rfind(",")
    last_dot = s.rfind(".")
    if last_comma > -1 and last_dot > -1:
        if last_comma > last_dot:
            s = s.replace(".", "").replace(",", ".", 1)
        else:
            s = s.replace(",", "")
    elif last_comma > -1:
        s = s.replace(",", ".", 1)

    m = _FLOAT_PREFIX_RE.match(s)
    if not m:
        return None
    value = float(m.group(0))
    return value if math.isfinite(value) else None


def format_price(value: float, currency: str = "€") -> str:
    """Format like the site does: two decimals, decimal comma."""
    return f"{value:.2f}".replace(".", ",") + f" {currency}"
