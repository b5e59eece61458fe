"""Price extraction, price index, and the order total aggregator.

Prices are not a schema field: form authors embed them in text, e.g.
``"$380 紫水晶金屬纏繞墜"``.  Two places can carry a price:

  - the item title, which prices every question the item owns
  - a choice option's own label, which overrides the item price for that
    choice (variant pricing)

``calculate_total`` is a pure function of the answer set and the static
indices, so callers can re-run it after every answer mutation.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from giftform_rules.constants import FIELD_PREFIX, UNSELECTED_VALUES
from giftform_rules.models.form import FormItem
from giftform_rules.models.order import AnswerSet, AnswerValue

logger = logging.getLogger(__name__)

_PRICE_RE = re.compile(r"\$(\d+)")
_FIELD_RE = re.compile(rf"^{re.escape(FIELD_PREFIX)}(.+?)(?:_row_\d+_col_\d+)?$")


def extract_price(label: str | None) -> int | None:
    """Return the first ``$<digits>`` price in *label*, or None.

    Only the first match counts: ``"$380 item $500"`` is 380.
    """
    if not label:
        return None
    match = _PRICE_RE.search(label)
    return int(match.group(1)) if match else None


def parse_field_id(field_id: str) -> str | None:
    """Extract the question id from an answer field identifier.

    ``question_abc`` and ``question_abc_row_0_col_2`` both yield ``"abc"``.
    Returns None for identifiers that do not follow the convention.
    """
    match = _FIELD_RE.match(field_id)
    return match.group(1) if match else None


def is_selected_value(value: object) -> bool:
    """True for a non-blank string that is not an "unselected" marker."""
    return (
        isinstance(value, str)
        and value.strip() != ""
        and value not in UNSELECTED_VALUES
    )


@dataclass(frozen=True)
class PriceIndex:
    """Question-id and option-label price lookups for one loaded form.

    Built once per schema load via :meth:`from_items`; read-only afterwards.
    """

    question_prices: Mapping[str, int] = field(default_factory=dict)
    option_prices: Mapping[str, int] = field(default_factory=dict)
    question_ids: frozenset[str] = frozenset()

    @classmethod
    def from_items(
        cls,
        items: Iterable[FormItem],
        gift_question_ids: Iterable[str] = (),
    ) -> PriceIndex:
        """Build both price maps from the form items.

        Gift-section question ids never get a question price, even if their
        title happens to contain a ``$<digits>`` substring.
        """
        excluded = set(gift_question_ids)
        question_prices: dict[str, int] = {}
        option_prices: dict[str, int] = {}
        question_ids: set[str] = set()

        for item in items:
            item_price = extract_price(item.title)
            for question in item.questions:
                question_ids.add(question.question_id)
                if item_price is not None and question.question_id not in excluded:
                    # Group items price every sub-question the same
                    question_prices[question.question_id] = item_price
                for option in question.options:
                    option_price = extract_price(option.value)
                    if option_price is not None:
                        option_prices[option.value] = option_price

        return cls(
            question_prices=question_prices,
            option_prices=option_prices,
            question_ids=frozenset(question_ids),
        )

    def unit_price(self, value: str, question_id: str) -> int:
        """Price of one selected *value*: option price, else question price, else 0."""
        option_price = self.option_prices.get(value)
        if option_price is not None:
            return option_price
        return self.question_prices.get(question_id, 0)


def price_answer(value: AnswerValue, question_id: str, index: PriceIndex) -> int:
    """Price a single answer field's value.

    - list: each selected entry is priced with :meth:`PriceIndex.unit_price`
    - string: priced once (blank and "false" contribute nothing)
    - bool/number: only the question price applies, never an option price
    """
    if isinstance(value, list):
        return sum(
            index.unit_price(entry, question_id)
            for entry in value
            if is_selected_value(entry)
        )
    if isinstance(value, str):
        if not is_selected_value(value):
            return 0
        return index.unit_price(value, question_id)
    if isinstance(value, (bool, int, float)):
        # False / 0 mean "not answered"
        if not value:
            return 0
        return index.question_prices.get(question_id, 0)
    return 0


def calculate_total(
    answers: AnswerSet,
    index: PriceIndex,
    gift_question_ids: Iterable[str] = (),
) -> int:
    """Sum the prices of every answered field, skipping gift sections.

    Fields whose identifier does not parse, or whose question is unknown to
    the index, simply contribute nothing.
    """
    excluded = set(gift_question_ids)
    total = 0
    for field_id, value in answers.items():
        question_id = parse_field_id(field_id)
        if question_id is None:
            logger.debug("Ignoring malformed field id: %r", field_id)
            continue
        if question_id in excluded:
            continue
        if question_id not in index.question_ids:
            logger.debug("Ignoring answer for unknown question: %s", question_id)
            continue
        total += price_answer(value, question_id, index)
    return total
