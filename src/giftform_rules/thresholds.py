"""Gift threshold parsing.

Gift section titles describe their tiers in free text, e.g.::

    ✦第一階段滿額贈。原礦約2-3m，適合隨身攜帶✦ 滿2500*1、5000*2、7000*3、8500*4

Only the first tier repeats the "reached" qualifier (滿); later tiers are
bare ``<amount>*<count>`` pairs.  :func:`parse_thresholds` turns such a title
into an ascending list of :class:`Threshold` tiers.

Note: the bare ``<int>*<int>`` fallback also accepts unrelated numeric text
that happens to look like a tier (e.g. a size like ``"3*4cm"``).
"""

from __future__ import annotations

import logging
import re

from giftform_rules.constants import GIFT_QUALIFIER, THRESHOLD_SEPARATORS
from giftform_rules.models.order import Threshold

logger = logging.getLogger(__name__)

_SPLIT_RE = re.compile(f"[{re.escape(THRESHOLD_SEPARATORS)}]")
_QUALIFIED_RE = re.compile(rf"{re.escape(GIFT_QUALIFIER)}\s*(\d+)\s*\*\s*(\d+)")
_BARE_RE = re.compile(r"(\d+)\s*\*\s*(\d+)")


def _parse_segment(segment: str) -> Threshold | None:
    """Parse one separator-delimited segment; None if it holds no valid tier."""
    match = _QUALIFIED_RE.search(segment) or _BARE_RE.search(segment)
    if match is None:
        return None
    amount, gifts = int(match.group(1)), int(match.group(2))
    if amount <= 0 or gifts <= 0:
        return None
    return Threshold(amount=amount, gifts=gifts)


def parse_thresholds(label: str | None) -> list[Threshold]:
    """Parse gift tiers from a gift section title.

    Args:
        label: the section title, possibly None or empty.

    Returns:
        Tiers sorted ascending by amount.  Malformed segments are dropped
        without error; duplicate amounts are kept in source order.  An empty
        list means no tier could be parsed.
    """
    if not label:
        return []

    thresholds: list[Threshold] = []
    for segment in _SPLIT_RE.split(label):
        threshold = _parse_segment(segment)
        if threshold is not None:
            thresholds.append(threshold)

    # sorted() is stable, so equal amounts keep their relative order
    return sorted(thresholds, key=lambda t: t.amount)
