"""OrderEngine — reactive recomputation of the order total and gift limits.

The engine owns the respondent's live answer set for one form.  Every
mutation (``set_answer``, ``clear_answer``, ``toggle_option``) runs the same
pipeline explicitly:

    answers ──► calculate_total ──► max_selections per gift section
            ──► enforce (trim over-selection) ──► OrderState ──► listeners

Data flows one way: gift selections never feed back into the total.  The
pipeline itself lives in :func:`evaluate`, a pure function that the
checkout service reuses for server-side recomputation.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from giftform_rules.constants import FIELD_PREFIX
from giftform_rules.forms import FormIndex
from giftform_rules.gifts import (
    current_selections,
    enforce,
    is_option_selectable,
    max_selections,
    section_state,
)
from giftform_rules.models.order import AnswerSet, AnswerValue, OrderState
from giftform_rules.pricing import calculate_total
from giftform_rules.review import selected_products

logger = logging.getLogger(__name__)

OrderListener = Callable[[OrderState], None]


def evaluate(index: FormIndex, answers: AnswerSet) -> tuple[OrderState, AnswerSet]:
    """Compute the order state and the enforced answer set.

    Args:
        index: the loaded form's precomputed lookups
        answers: current answers keyed by field id (not mutated)

    Returns:
        ``(state, enforced_answers)`` where ``enforced_answers`` is a copy of
        *answers* with every gift section trimmed to its current allowance.
    """
    enforced: dict[str, Any] = dict(answers)
    total = calculate_total(enforced, index.prices, index.gift_question_ids)

    states = []
    for section in index.gift_sections.values():
        raw = enforced.get(section.field_id)
        selections = current_selections(raw)
        limit = max_selections(total, section.thresholds)
        trimmed = enforce(selections, limit)
        if len(trimmed) < len(selections):
            logger.debug(
                "Trimmed gift section %s from %d to %d selections (total=%d)",
                section.question_id, len(selections), len(trimmed), total,
            )
            enforced[section.field_id] = trimmed
        states.append(section_state(section, total, trimmed))

    state = OrderState(
        total=total,
        selected_items_count=len(selected_products(enforced, index)),
        gift_sections=states,
    )
    return state, enforced


class OrderEngine:
    """Holds one respondent's answers and keeps derived state current.

    Args:
        index: a :class:`FormIndex` for the form being filled
        answers: optional initial answers (enforced immediately)
    """

    def __init__(self, index: FormIndex, answers: AnswerSet | None = None) -> None:
        self._index = index
        self._listeners: list[OrderListener] = []
        self._state, self._answers = evaluate(index, dict(answers or {}))

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def answers(self) -> AnswerSet:
        """A copy of the current (enforced) answer set."""
        return dict(self._answers)

    @property
    def state(self) -> OrderState:
        return self._state

    @property
    def total(self) -> int:
        return self._state.total

    def max_selections(self, question_id: str) -> int:
        """Current allowance of a gift section.

        Raises:
            KeyError: if *question_id* is not a gift section.
        """
        section = self._index.gift_sections[question_id]
        return max_selections(self._state.total, section.thresholds)

    def is_option_selectable(self, question_id: str, option: str) -> bool:
        """Selection-time guard.  Options outside gift sections are always selectable."""
        section = self._index.gift_sections.get(question_id)
        if section is None:
            return True
        selections = current_selections(self._answers.get(section.field_id))
        return is_option_selectable(option, selections, self.max_selections(question_id))

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: OrderListener) -> Callable[[], None]:
        """Register *listener* to receive the new state after each mutation.

        Returns a callable that unsubscribes the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_answer(self, field_id: str, value: AnswerValue) -> OrderState:
        """Set one field's value and recompute."""
        answers = dict(self._answers)
        answers[field_id] = value
        return self._apply(answers)

    def clear_answer(self, field_id: str) -> OrderState:
        """Remove one field from the answer set and recompute."""
        answers = dict(self._answers)
        answers.pop(field_id, None)
        return self._apply(answers)

    def replace_answers(self, answers: AnswerSet) -> OrderState:
        """Swap in a whole new answer set and recompute."""
        return self._apply(dict(answers))

    def toggle_option(self, question_id: str, option: str) -> OrderState:
        """Add or remove *option* in a multi-select field.

        Adding an option that the selection-time guard disables is refused
        (the state is returned unchanged); removing is always allowed.
        """
        field_id = f"{FIELD_PREFIX}{question_id}"
        selections = current_selections(self._answers.get(field_id))

        if option in selections:
            selections.remove(option)
        elif self.is_option_selectable(question_id, option):
            selections.append(option)
        else:
            logger.debug("Refused gift option %r for %s: limit reached", option, question_id)
            return self._state

        answers = dict(self._answers)
        answers[field_id] = selections
        return self._apply(answers)

    def _apply(self, answers: AnswerSet) -> OrderState:
        previous_total = self._state.total
        self._state, self._answers = evaluate(self._index, answers)
        if self._state.total != previous_total:
            logger.debug("Order total changed: %d -> %d", previous_total, self._state.total)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state
