"""
"Info produit" extraction.

The datasheet is read from one HTML snapshot of the rendered page:

    root
      section[role=list]          one per group, optionally titled by an h3
        div[role=listitem]        one per attribute
          div.Column > span.PropertyName     key
          div.Column > span.PropertyValue    value (or a link, icon labels...)

Rows become flat ``Specification(section, key, value)`` tuples.
"""

from typing import Optional, Sequence
import logging

import soupsieve as sv
from bs4 import BeautifulSoup, Tag
from playwright.async_api import Page

from .cascade import first_non_empty
from .models import ProductDetails, Specification
from .site_selectors import (
    PAGE_TITLE,
    PRODUCT_INFO_TITLES,
    PRODUCT_INFO_WRAPPERS,
    SPECIFICATION_KEY_COLUMN,
    SPECIFICATION_KEY_TEXT,
    SPECIFICATION_ROOTS,
    SPECIFICATION_ROW,
    SPECIFICATION_SECTION,
    SPECIFICATION_SECTION_TITLE,
    SPECIFICATION_SECTION_WRAPPER,
    SPECIFICATION_VALUE_COLUMN,
    SPECIFICATION_VALUE_ICON_TEXT,
    SPECIFICATION_VALUE_LINKS,
    SPECIFICATION_VALUE_SIMPLE,
)
from .text import clean_text

logger = logging.getLogger(__name__)

PLACEHOLDER_SECTION = "Général (Section {})"


def _text(node: Optional[Tag]) -> str:
    return clean_text(node.get_text(" ")) if node is not None else ""


def _select_first(node: Tag, selectors: Sequence[str]) -> Optional[Tag]:
    for sel in selectors:
        found = node.select_one(sel)
        if found is not None:
            return found
    return None


# ============================================================================
# SECTIONS
# ============================================================================

def _heading_before(node: Optional[Tag]) -> str:
    if node is None:
        return ""
    prev = node.find_previous_sibling()
    if prev is not None and sv.match(SPECIFICATION_SECTION_TITLE, prev):
        return _text(prev)
    return ""


def _heading_in_wrapper(section: Tag) -> str:
    parent = section.parent
    if parent is not None and sv.match(SPECIFICATION_SECTION_WRAPPER, parent):
        return _text(parent.select_one(SPECIFICATION_SECTION_TITLE))
    return ""


def section_title(section: Tag) -> Optional[str]:
    """Title of a section, or None when the page gives it none."""
    return first_non_empty([
        lambda: _text(section.select_one(SPECIFICATION_SECTION_TITLE)),
        lambda: _heading_before(section),
        lambda: _heading_before(section.parent),
        lambda: _heading_in_wrapper(section),
    ])


# ============================================================================
# ROWS
# ============================================================================

def _row_key(row: Tag, key_column: Optional[Tag]) -> str:
    return first_non_empty([
        lambda: (_text(key_column.select_one(SPECIFICATION_KEY_TEXT))
                 if key_column is not None else ""),
        lambda: _text(key_column),
        lambda: _text(row.select_one(SPECIFICATION_KEY_TEXT)),
    ]) or ""


def _icon_labels(scope: Tag) -> str:
    return clean_text(" ".join(
        _text(el) for el in scope.select(SPECIFICATION_VALUE_ICON_TEXT)))


def _remaining_text(scope: Tag, key: str) -> str:
    text = _text(scope)
    if key and text.startswith(key):
        text = text[len(key):].strip()
    return text


def _row_value(row: Tag, value_column: Optional[Tag], key: str) -> str:
    scope = value_column if value_column is not None else row
    return first_non_empty([
        lambda: _text(scope.select_one(SPECIFICATION_VALUE_SIMPLE)),
        lambda: _text(_select_first(scope, SPECIFICATION_VALUE_LINKS)),
        lambda: _icon_labels(scope),
        # without a value column the first span is the key itself
        lambda: (_text(scope.select_one("span"))
                 if value_column is not None else ""),
        lambda: _remaining_text(scope, key if value_column is None else ""),
    ]) or ""


def parse_row(row: Tag) -> Optional[tuple[str, str]]:
    """``(key, value)`` of one datasheet row, or None if it is not one.

    A blank value is kept as ``""``: the attribute exists on the page, it is
    just empty. A value equal to its key means the cascade fell back onto the
    key cell and the row is dropped.
    """
    key_column = row.select_one(SPECIFICATION_KEY_COLUMN)
    value_column = row.select_one(SPECIFICATION_VALUE_COLUMN)

    key = _row_key(row, key_column)
    if not key:
        return None
    value = _row_value(row, value_column, key)
    if value and value == key:
        logger.debug(f"Row value repeats its key, skipped: {key!r}")
        return None
    return key, value


# ============================================================================
# PAGE
# ============================================================================

def parse_specifications(soup: BeautifulSoup,
                         url: str) -> Optional[ProductDetails]:
    """Build ``ProductDetails`` (without images or prices) from a snapshot.

    Returns None when the datasheet root is missing, or when neither a row
    nor a title could be read.
    """
    root = _select_first(soup, SPECIFICATION_ROOTS)
    if root is None:
        logger.warning(f"Specifications root not found on {url}")
        return None

    info_wrapper = _select_first(soup, PRODUCT_INFO_WRAPPERS)
    info_title = (_text(_select_first(info_wrapper, PRODUCT_INFO_TITLES))
                  if info_wrapper is not None else "")
    page_title = _text(soup.select_one(PAGE_TITLE))

    sections = root.select(SPECIFICATION_SECTION)
    if not sections:
        logger.warning(f"No specification section under the root on {url}")

    specs = []
    for idx, section in enumerate(sections, start=1):
        name = section_title(section) or PLACEHOLDER_SECTION.format(idx)
        for row in section.select(SPECIFICATION_ROW):
            pair = parse_row(row)
            if pair is not None:
                specs.append(Specification(name, *pair))

    if not specs and not info_title and not page_title:
        logger.warning(f"Nothing usable in the datasheet of {url}")
        return None

    logger.info(f"{len(specs)} specifications extracted from {url}")
    return ProductDetails(
        url=url,
        page_title=page_title or None,
        section_title=info_title or None,
        specifications=specs,
    )


async def extract_specifications(page: Page) -> Optional[ProductDetails]:
    soup = BeautifulSoup(await page.content(), "html.parser")
    return parse_specifications(soup, page.url)
