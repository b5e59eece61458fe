"""Order review helpers — selected products, gifts, and the sheet row.

These helpers turn a finished answer set into what the respondent sees on
the review screen and what the submission sink writes out:

  - :func:`selected_products`: priced line items (text questions and every gift
    question excluded)
  - :func:`selected_gifts`: free gift choices grouped by gift section
  - :func:`build_sheet_row`: one spreadsheet row matching a header list

Header matching follows the response-sheet conventions: a timestamp column,
an email column, basic respondent info matched by keyword, the total
column, one column per gift section, and one column per product item.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import TYPE_CHECKING, Any, Sequence

from giftform_rules.constants import (
    BASIC_INFO_FIELDS,
    EMAIL_ADDRESS_HEADER,
    TIMESTAMP_HEADER,
    TOTAL_HEADER_KEYWORDS,
)
from giftform_rules.gifts import current_selections
from giftform_rules.models.order import AnswerSet, Product
from giftform_rules.pricing import is_selected_value, parse_field_id

if TYPE_CHECKING:
    from giftform_rules.forms import FormIndex

_NORMALISE_RE = re.compile(r"[^\w\u4e00-\u9fff]")


def _answer_values(value: Any) -> list[str]:
    """Selected string values of one answer field, in order."""
    if isinstance(value, list):
        return [str(v) for v in value if is_selected_value(str(v))]
    if value is None or value is False:
        return []
    text = str(value)
    return [text] if is_selected_value(text) else []


def selected_products(answers: AnswerSet, index: FormIndex) -> list[Product]:
    """Priced items the respondent selected, in answer-set order.

    Values without any price (neither option nor question price) are not
    products and are left out.  A truthy boolean or numeric answer on a
    priced question becomes one product named after its item, so the list
    always agrees with :func:`~giftform_rules.pricing.calculate_total`.
    """
    products: list[Product] = []
    for field_id, value in answers.items():
        question_id = parse_field_id(field_id)
        if question_id is None:
            continue
        if question_id in index.text_question_ids or question_id in index.gift_question_ids:
            continue
        if question_id not in index.prices.question_ids:
            continue

        if isinstance(value, (bool, int, float)):
            price = index.prices.question_prices.get(question_id)
            item = index.item_for_question(question_id)
            if value and price is not None and item is not None:
                image = index.image_for(item.title, question_id)
                products.append(Product(name=item.title, price=price, image=image))
            continue
        if not isinstance(value, (str, list)):
            continue

        for name in _answer_values(value):
            price = index.prices.option_prices.get(name)
            if price is None:
                price = index.prices.question_prices.get(question_id)
            if price is None:
                continue
            products.append(
                Product(name=name, price=price, image=index.image_for(name, question_id))
            )
    return products


def selected_gifts(answers: AnswerSet, index: FormIndex) -> dict[str, list[Product]]:
    """Free gift choices per gift section, keyed by the section's question id.

    Choices made on any sub-question of a group gift item are collected
    under the owning section.
    """
    gifts: dict[str, list[Product]] = {qid: [] for qid in index.gift_sections}
    for field_id, value in answers.items():
        question_id = parse_field_id(field_id)
        section = index.gift_section_for(question_id) if question_id else None
        if section is None:
            continue
        gifts[section.question_id].extend(
            Product(name=name, price=0, image=index.image_for(name, question_id))
            for name in current_selections(value)
        )
    return gifts


# ---------------------------------------------------------------------------
# Sheet row mapping
# ---------------------------------------------------------------------------

def _normalise(text: str) -> str:
    return _NORMALISE_RE.sub("", text)


def _titles_match(header: str, title: str) -> bool:
    """Exact, containment, or punctuation-insensitive match."""
    if not title:
        return False
    return (
        header == title
        or title in header
        or header in title
        or _normalise(header) == _normalise(title)
    )


def basic_info_key(title: str) -> str | None:
    """Map an item title or sheet header to a basic-info field key."""
    for key, keywords, prefix in BASIC_INFO_FIELDS:
        if any(kw in title for kw in keywords) or title.startswith(prefix):
            return key
    return None


def format_timestamp(moment: datetime) -> str:
    """Format like the response sheet: ``2026/10/17 下午03:04:05``."""
    meridiem = "上午" if moment.hour < 12 else "下午"
    hour = moment.hour % 12 or 12
    return f"{moment:%Y/%m/%d} {meridiem}{hour:02d}:{moment:%M:%S}"


def build_sheet_row(
    answers: AnswerSet,
    index: FormIndex,
    headers: Sequence[str],
    total: int,
    email: str | None = None,
    *,
    now: datetime | None = None,
) -> list[str | int]:
    """Build one spreadsheet row for a submission, aligned to *headers*.

    Args:
        answers: the enforced answer set
        index: the form's lookups
        headers: the sheet's header row, left to right
        total: the aggregator's final total
        email: respondent email supplied outside the form, if any
        now: timestamp override (defaults to the current local time)

    Returns:
        One cell per header; unmatched headers get an empty string.
    """
    basic: dict[str, str] = {}
    gifts: dict[str, list[str]] = {qid: [] for qid in index.gift_sections}
    products_by_title: dict[str, list[str]] = {}

    for field_id, value in answers.items():
        if value is None or value is False or value == "":
            continue
        question_id = parse_field_id(field_id)
        if question_id is None:
            continue
        item = index.item_for_question(question_id)
        if item is None:
            continue

        values = _answer_values(value)
        key = basic_info_key(item.title)
        if key is not None:
            if isinstance(value, list):
                basic[key] = ", ".join(str(v) for v in value)
            else:
                basic[key] = str(value)
            continue

        section = index.gift_section_for(question_id)
        if section is not None:
            gifts[section.question_id].extend(values)
            continue

        if values:
            products_by_title.setdefault(item.title, []).extend(values)

    total_header = next(
        (h for h in headers if any(kw in h for kw in TOTAL_HEADER_KEYWORDS)), None
    )
    timestamp = format_timestamp(now or datetime.now())

    row: list[str | int] = []
    for header in headers:
        if not header:
            row.append("")
            continue
        if header == TIMESTAMP_HEADER:
            row.append(timestamp)
            continue
        if header == EMAIL_ADDRESS_HEADER:
            row.append(email or basic.get("email", ""))
            continue

        key = basic_info_key(header)
        if key == "email":
            # "Email" column from the form itself, distinct from the address header
            if EMAIL_ADDRESS_HEADER not in header:
                row.append(basic.get("email") or email or "")
                continue
        elif key is not None:
            row.append(basic.get(key, ""))
            continue

        if header == total_header or TOTAL_HEADER_KEYWORDS[0] in header:
            row.append(total)
            continue

        gift_cell = _match_gift_column(header, index, gifts)
        if gift_cell is not None:
            row.append(gift_cell)
            continue

        row.append(_match_product_column(header, products_by_title))

    return row


def _match_gift_column(
    header: str, index: FormIndex, gifts: dict[str, list[str]]
) -> str | None:
    for question_id, section in index.gift_sections.items():
        if _titles_match(header, section.title) or _titles_match(header, section.display_title):
            return ", ".join(gifts.get(question_id, []))
    return None


def _match_product_column(header: str, products_by_title: dict[str, list[str]]) -> str:
    if header in products_by_title:
        return ", ".join(products_by_title[header])
    for title, values in products_by_title.items():
        if _titles_match(header, title):
            return ", ".join(values)
    return ""
