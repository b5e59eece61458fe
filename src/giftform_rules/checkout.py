"""CheckoutService — quote and submit orders against a loaded form.

The service is what the REST layer talks to.  It never trusts a total sent
by the client: both ``quote`` and ``submit`` re-run :func:`evaluate` on the
posted answers, so gift over-selection is trimmed server-side as well.

``submit`` hands a :class:`SubmissionPayload` to the configured
:class:`SubmissionSink` exactly once.  Sink failures surface as
:class:`SubmissionError` with the sink's message; there is no retry here.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from giftform_rules.engine import evaluate
from giftform_rules.errors import SubmissionError
from giftform_rules.forms import FormIndex, FormStore
from giftform_rules.interfaces import SubmissionSink
from giftform_rules.models.order import (
    AnswerSet,
    OrderState,
    SubmissionPayload,
    SubmissionReceipt,
)
from giftform_rules.notify import ConfirmationRenderer
from giftform_rules.pricing import parse_field_id
from giftform_rules.review import (
    basic_info_key,
    build_sheet_row,
    selected_gifts,
    selected_products,
)

logger = logging.getLogger(__name__)


class CheckoutService:
    """Quotes and submits orders for every form in a :class:`FormStore`.

    Args:
        store: a loaded form store
        sink: where finished orders are recorded
        renderer: notification renderer (defaults to the bundled templates)
        sheet_headers: response-sheet header row used to build ``sheet_row``;
            when empty, no sheet row is built
    """

    def __init__(
        self,
        store: FormStore,
        sink: SubmissionSink,
        renderer: ConfirmationRenderer | None = None,
        sheet_headers: Sequence[str] = (),
    ) -> None:
        self._store = store
        self._sink = sink
        self._renderer = renderer or ConfirmationRenderer()
        self._sheet_headers = list(sheet_headers)

    def quote(self, form_id: str, answers: AnswerSet) -> tuple[OrderState, AnswerSet]:
        """Recompute total and gift limits for a draft answer set.

        Raises ``KeyError``/``ValueError`` for unknown or malformed form ids.
        """
        index = self._store.get_index(form_id)
        return evaluate(index, answers)

    async def submit(
        self,
        form_id: str,
        answers: AnswerSet,
        *,
        email: str | None = None,
        now: datetime | None = None,
    ) -> SubmissionReceipt:
        """Finalise an order and deliver it to the sink.

        The answers are enforced first, so the stored gift selections never
        exceed what the final total allows.

        Raises:
            SubmissionError: if the sink fails.  The message is preserved.
        """
        index = self._store.get_index(form_id)
        state, enforced = evaluate(index, answers)
        moment = now or datetime.now()

        products = selected_products(enforced, index)
        gifts = selected_gifts(enforced, index)
        gift_products = [g for items in gifts.values() for g in items]
        full_name = _basic_info(enforced, index, "full_name")
        payload = SubmissionPayload(
            form_id=index.form_id,
            answers=enforced,
            total=state.total,
            email=email,
            products=products,
            gifts={qid: [g.name for g in items] for qid, items in gifts.items()},
            sheet_row=(
                build_sheet_row(enforced, index, self._sheet_headers, state.total, email, now=moment)
                if self._sheet_headers
                else []
            ),
            confirmation_html=self._renderer.render(
                full_name=full_name,
                products=products,
                gifts=gift_products,
                total=state.total,
                timestamp=moment,
            ),
            admin_notification_html=self._renderer.render_admin_notification(
                full_name=full_name,
                email=email or _basic_info(enforced, index, "email"),
                products=products,
                gifts=gift_products,
                total=state.total,
                timestamp=moment,
            ),
        )

        logger.info(
            "Submitting order: form_id=%s total=%d products=%d",
            index.form_id, state.total, len(products),
        )
        try:
            return await self._sink.submit(payload)
        except SubmissionError:
            logger.error("Submission failed for form_id=%s", index.form_id)
            raise


def _basic_info(answers: AnswerSet, index: FormIndex, key: str) -> str:
    """Answer to the basic-info question *key* (e.g. ``"full_name"``), or ""."""
    for field_id, value in answers.items():
        question_id = parse_field_id(field_id)
        if question_id is None:
            continue
        item = index.item_for_question(question_id)
        if item is not None and basic_info_key(item.title) == key:
            return value if isinstance(value, str) else ""
    return ""
