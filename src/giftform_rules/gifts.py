"""Gift section tagging and gift-eligibility enforcement.

A gift section is any item whose title starts with the gift marker
(``~gift_section~`` by default).  Its selections are free, excluded from the
order total, and capped by a spend-based allowance:

  - :func:`tag_gift_sections` runs once per schema load and returns the
    ``{question_id: GiftSection}`` map the rest of the SDK consumes
  - :func:`max_selections` maps the current total onto the tier list
  - :func:`enforce` trims an over-long selection list after the total drops
  - :func:`is_option_selectable` / :func:`disabled_options` implement the
    selection-time guard

The allowance is recomputed from the total on every change.  There is no
stored "unlocked tier": falling back below a tier shrinks the allowance
immediately.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from giftform_rules.constants import (
    ACTIVE_TIER_MESSAGE,
    BELOW_FIRST_TIER_MESSAGE,
    GIFT_SECTION_MARKER,
    RULES_UNAVAILABLE_MESSAGE,
)
from giftform_rules.models.form import FormItem
from giftform_rules.models.order import (
    GiftSection,
    GiftSectionState,
    GiftStatus,
    Threshold,
)
from giftform_rules.pricing import is_selected_value
from giftform_rules.thresholds import parse_thresholds

logger = logging.getLogger(__name__)


def is_gift_section(item: FormItem) -> bool:
    """True if the item title carries the gift-section marker prefix."""
    return bool(item.title) and item.title.startswith(GIFT_SECTION_MARKER)


def tag_gift_sections(items: Iterable[FormItem]) -> dict[str, GiftSection]:
    """Find every gift section in the form, keyed by its question id.

    Items with the marker but no question are skipped with a warning.
    Sections whose title yields no tiers are still returned (with an empty
    threshold list) so callers can report them as unavailable.
    """
    sections: dict[str, GiftSection] = {}
    for item in items:
        if not is_gift_section(item):
            continue

        question_id = item.primary_question_id
        if question_id is None:
            logger.warning(
                "Gift section item has no question: item_id=%s title=%r",
                item.item_id, item.title,
            )
            continue

        thresholds = parse_thresholds(item.title)
        if not thresholds:
            logger.warning("Failed to parse gift thresholds from title: %r", item.title)
        else:
            logger.debug(
                "Gift section found: question_id=%s thresholds=%s",
                question_id, [(t.amount, t.gifts) for t in thresholds],
            )

        options = [opt.value for q in item.questions for opt in q.options]
        sections[question_id] = GiftSection(
            question_id=question_id,
            question_ids=[q.question_id for q in item.questions],
            item_id=item.item_id,
            title=item.title,
            thresholds=thresholds,
            options=options,
        )
    return sections


def max_selections(total: int, thresholds: Sequence[Threshold]) -> int:
    """Number of gifts selectable at *total*.

    Scans tiers from the highest amount down and returns the gift count of
    the first tier whose amount is <= total.  Returns 0 when no tier
    qualifies or the tier list is empty.  Tiers may arrive in any order;
    among tiers with the same amount the last one listed wins.
    """
    for threshold in reversed(sorted(thresholds, key=lambda t: t.amount)):
        if total >= threshold.amount:
            return threshold.gifts
    return 0


def current_selections(value: object) -> list[str]:
    """Normalise a gift field's raw answer value into an ordered selection list."""
    if isinstance(value, list):
        return [v for v in value if is_selected_value(v)]
    if is_selected_value(value):
        return [value]
    return []


def enforce(selections: Sequence[str], limit: int) -> list[str]:
    """Trim *selections* to the first *limit* entries, preserving order.

    Lists already within the limit are returned unchanged (as a new list).
    """
    if len(selections) > limit:
        return list(selections[: max(limit, 0)])
    return list(selections)


def is_option_selectable(option: str, selections: Sequence[str], limit: int) -> bool:
    """Selection-time guard for one option of a gift section.

    Selected options stay togglable (removable) even at the limit; an
    unselected option is disabled once the selection count reaches *limit*.
    """
    if option in selections:
        return True
    return len(selections) < limit


def disabled_options(
    options: Iterable[str], selections: Sequence[str], limit: int
) -> list[str]:
    """All options that may not be newly selected right now, in form order."""
    return [opt for opt in options if not is_option_selectable(opt, selections, limit)]


def section_status(total: int, thresholds: Sequence[Threshold]) -> GiftStatus:
    if not thresholds:
        return GiftStatus.RULES_UNAVAILABLE
    if total < thresholds[0].amount:
        return GiftStatus.BELOW_FIRST_TIER
    return GiftStatus.ACTIVE


def section_message(
    status: GiftStatus,
    thresholds: Sequence[Threshold],
    limit: int,
    count: int,
) -> str:
    """Human-readable hint shown above a gift section's choices."""
    if status is GiftStatus.RULES_UNAVAILABLE:
        return RULES_UNAVAILABLE_MESSAGE
    if status is GiftStatus.BELOW_FIRST_TIER:
        first = thresholds[0]
        return BELOW_FIRST_TIER_MESSAGE.format(amount=first.amount, gifts=first.gifts)
    return ACTIVE_TIER_MESSAGE.format(max=limit, count=count)


def section_state(
    section: GiftSection, total: int, selections: Sequence[str]
) -> GiftSectionState:
    """Compute the live state of one gift section.

    *selections* should already be enforced against the current allowance.
    """
    limit = max_selections(total, section.thresholds)
    status = section_status(total, section.thresholds)
    return GiftSectionState(
        question_id=section.question_id,
        title=section.display_title,
        thresholds=list(section.thresholds),
        status=status,
        max_selections=limit,
        selections=list(selections),
        disabled_options=disabled_options(section.options, selections, limit),
        message=section_message(status, section.thresholds, limit, len(selections)),
    )
