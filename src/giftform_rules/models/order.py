"""Order and gift models — the contract between the engine and its callers.

These models describe what the SDK computes from a form and a live answer
set.  They are intentionally decoupled from the ORM models in
``giftform_db`` so that API consumers never see database internals.

  - Threshold: one "spend amount → free gift count" tier
  - GiftSection: a gift-tagged item with its parsed tiers
  - GiftSectionState: live allowance/selection view of one gift section
  - OrderState: running total plus every gift section's state
  - Product: a priced (or free, for gifts) line item for review screens
  - SubmissionPayload / SubmissionReceipt: what is handed to and returned
    by a submission sink
"""

import enum
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from giftform_rules.constants import FIELD_PREFIX, GIFT_SECTION_MARKER
from giftform_rules.models.form import Image


# Answer values: a single string, an ordered list of strings (multi-select),
# or a scalar produced by non-text widgets.
AnswerValue = str | list[str] | bool | int | float | None
AnswerSet = dict[str, AnswerValue]


class Threshold(BaseModel):
    """A gift tier: spending at least ``amount`` unlocks ``gifts`` free items."""

    amount: int
    gifts: int


class GiftSection(BaseModel):
    """A gift-tagged form item.

    Derived once per schema load from the title marker; never persisted.
    ``thresholds`` is ascending by amount and may be empty when the title
    could not be parsed.
    ``question_ids`` lists every question the item owns (all sub-questions
    of a group); ``question_id`` is the first of them and carries the
    allowance.
    """

    question_id: str
    item_id: str
    title: str
    question_ids: list[str] = Field(default_factory=list)
    thresholds: list[Threshold] = Field(default_factory=list)
    options: list[str] = Field(default_factory=list)

    @property
    def field_id(self) -> str:
        """Answer-set key for this section's selections."""
        return f"{FIELD_PREFIX}{self.question_id}"

    @property
    def display_title(self) -> str:
        """Title without the gift marker prefix."""
        return self.title.removeprefix(GIFT_SECTION_MARKER).strip()


class GiftStatus(str, enum.Enum):
    """How a gift section presents itself for the current total.

    RULES_UNAVAILABLE: the title yielded no tiers, nothing is selectable
    BELOW_FIRST_TIER: tiers exist but the total has not reached the first
    ACTIVE: at least one tier is met
    """

    RULES_UNAVAILABLE = "rules_unavailable"
    BELOW_FIRST_TIER = "below_first_tier"
    ACTIVE = "active"


class GiftSectionState(BaseModel):
    """Live view of one gift section for the current total and selections."""

    question_id: str
    title: str
    thresholds: list[Threshold]
    status: GiftStatus
    max_selections: int
    selections: list[str]
    disabled_options: list[str]
    message: str


class OrderState(BaseModel):
    """Everything the UI needs after an answer-set mutation."""

    total: int
    selected_items_count: int
    gift_sections: list[GiftSectionState]

    def section(self, question_id: str) -> GiftSectionState:
        """Return the state for one gift section.

        Raises:
            KeyError: if ``question_id`` is not a gift section.
        """
        for state in self.gift_sections:
            if state.question_id == question_id:
                return state
        raise KeyError(f"Gift section not found: {question_id}")


class Product(BaseModel):
    """A selected line item.  Gifts carry ``price == 0``."""

    name: str
    price: int
    image: Image | None = None


class SubmissionPayload(BaseModel):
    """A finished order handed to a :class:`SubmissionSink`.

    ``answers`` are the (already trimmed) respondent answers in no
    particular field order; ``total`` is the aggregator's final total.
    The two HTML bodies are rendered once at submit time so the sink can
    store them alongside the order.
    """

    form_id: str
    answers: dict[str, Any]
    total: int
    email: str | None = None
    products: list[Product] = Field(default_factory=list)
    gifts: dict[str, list[str]] = Field(default_factory=dict)
    sheet_row: list[str | int] = Field(default_factory=list)
    confirmation_html: str | None = None
    admin_notification_html: str | None = None


class SubmissionReceipt(BaseModel):
    """What a sink returns after persisting a submission."""

    submission_id: str
    form_id: str
    total: int
    created_at: datetime
